"""ConfigMap document generator."""

from __future__ import annotations

from dbchart.core.documents import ConfigMap
from dbchart.core.models import ResolvedConfig
from dbchart.generators.env import env_value
from dbchart.resolver.names import NameSet


def generate_config_map_document(
    config: ResolvedConfig, names: NameSet
) -> ConfigMap | None:
    """Generate the ConfigMap, or None when there are no non-secret settings."""
    if not config.config:
        return None

    return ConfigMap(
        name=names.config,
        labels=names.labels,
        data={str(key): env_value(value) for key, value in config.config.items()},
    )
