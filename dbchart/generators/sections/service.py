"""Service document generator."""

from dbchart.core.documents import Service
from dbchart.core.models import ResolvedConfig
from dbchart.resolver.names import NameSet


def generate_service_document(config: ResolvedConfig, names: NameSet) -> Service:
    """Generate the Service fronting the workload."""
    ports = [
        {
            "name": "postgresql",
            "port": config.service.port,
            "targetPort": "postgresql",
            "protocol": "TCP",
        }
    ]
    if config.monitoring.enabled:
        ports.append(
            {
                "name": "metrics",
                "port": config.monitoring.port,
                "targetPort": "metrics",
                "protocol": "TCP",
            }
        )

    return Service(
        name=names.service,
        labels=names.labels,
        selector=names.selector_labels,
        type=config.service.type,
        ports=tuple(ports),
        annotations={str(k): str(v) for k, v in config.service.annotations.items()},
    )
