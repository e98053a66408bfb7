"""dbchart - render database deployment manifests from layered values."""

__version__ = "0.1.0"
