"""NetworkPolicy document generator."""

from __future__ import annotations

from typing import Any

from dbchart.core.documents import NetworkPolicy
from dbchart.core.models import ResolvedConfig
from dbchart.resolver.names import NameSet


def generate_network_policy_document(
    config: ResolvedConfig, names: NameSet
) -> NetworkPolicy | None:
    """Generate the ingress policy guarding the database port."""
    policy = config.network_policy
    if not policy.enabled:
        return None

    ports = [config.container_port]
    if config.monitoring.enabled:
        ports.append(config.monitoring.port)

    sources: list[dict[str, Any]] = []
    if not policy.allow_external:
        client_key, client_value = names.client_label
        sources.append({"podSelector": {"matchLabels": {client_key: client_value}}})
        if policy.allowed_labels:
            sources.append(
                {
                    "podSelector": {
                        "matchLabels": {
                            str(k): str(v) for k, v in policy.allowed_labels.items()
                        }
                    }
                }
            )

    return NetworkPolicy(
        name=names.network_policy,
        labels=names.labels,
        selector=names.selector_labels,
        ports=tuple(ports),
        sources=tuple(sources),
    )
