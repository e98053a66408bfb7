"""Workload document generator."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from dbchart.core.documents import ConfigMap, Workload
from dbchart.core.frozen import thaw
from dbchart.core.models import AntiAffinity, ClaimTemplate, ResolvedConfig
from dbchart.generators.env import literal_env, secret_env
from dbchart.resolver.names import NameSet

CONTAINER_NAME = "postgresql"
EXPORTER_NAME = "metrics"


def generate_workload_document(
    config: ResolvedConfig,
    names: NameSet,
    config_map: ConfigMap | None = None,
) -> Workload:
    """Generate the StatefulSet (or Deployment) running the database."""
    containers = [_database_container(config, names, config_map)]
    if config.monitoring.enabled:
        containers.append(_exporter_container(config, names))

    volumes, claim_templates = _data_volumes(config, names)

    affinity: dict[str, Any] = {}
    topology_spread: list[dict[str, Any]] = []
    if config.high_availability.enabled:
        affinity, topology_spread = _placement(config, names)

    return Workload(
        name=names.workload,
        labels=names.labels,
        stateful=config.stateful,
        replicas=config.replica_count,
        service_name=names.service,
        selector=names.selector_labels,
        pod_annotations=_pod_annotations(config, config_map),
        containers=tuple(containers),
        volumes=tuple(volumes),
        claim_templates=tuple(claim_templates),
        affinity=affinity,
        topology_spread=tuple(topology_spread),
        node_selector=config.node_selector,
        tolerations=config.tolerations,
    )


def config_checksum(config_map: ConfigMap) -> str:
    """SHA-256 of the ConfigMap data, stable across renders."""
    payload = json.dumps(
        dict(config_map.data), sort_keys=True, separators=(",", ":")
    )
    return hashlib.sha256(payload.encode()).hexdigest()


def _pod_annotations(
    config: ResolvedConfig, config_map: ConfigMap | None
) -> dict[str, str]:
    annotations = {str(k): str(v) for k, v in config.pod_annotations.items()}
    if config_map is not None:
        annotations["checksum/config"] = config_checksum(config_map)
    if config.monitoring.enabled:
        annotations["prometheus.io/scrape"] = "true"
        annotations["prometheus.io/port"] = str(config.monitoring.port)
    return annotations


def _database_container(
    config: ResolvedConfig, names: NameSet, config_map: ConfigMap | None
) -> dict[str, Any]:
    port = config.container_port
    env = [
        secret_env("POSTGRES_USER", "user", names.secret_name),
        secret_env("POSTGRES_PASSWORD", "password", names.secret_name),
        secret_env("POSTGRES_DB", "database", names.secret_name),
        # Subdirectory, so the volume root may hold lost+found
        {"name": "PGDATA", "value": f"{data_mount_path(config)}/pgdata"},
    ]
    env.extend(literal_env(config.env))

    ready_command = (
        'exec pg_isready -U "$POSTGRES_USER" -d "$POSTGRES_DB" '
        f"-h 127.0.0.1 -p {port}"
    )

    container: dict[str, Any] = {
        "name": CONTAINER_NAME,
        "image": config.image.reference,
        "imagePullPolicy": config.image.pull_policy,
        "ports": [
            {
                "name": "postgresql",
                "containerPort": port,
                "protocol": "TCP",
            }
        ],
        "env": env,
    }
    if config_map is not None:
        container["envFrom"] = [{"configMapRef": {"name": config_map.name}}]
    container["resources"] = thaw(config.resources)
    container["volumeMounts"] = _volume_mounts(config)
    container["readinessProbe"] = {
        "exec": {"command": ["/bin/sh", "-c", ready_command]},
        "initialDelaySeconds": 5,
        "periodSeconds": 10,
        "timeoutSeconds": 5,
        "failureThreshold": 6,
    }
    container["livenessProbe"] = {
        "exec": {"command": ["/bin/sh", "-c", ready_command]},
        "initialDelaySeconds": 30,
        "periodSeconds": 10,
        "timeoutSeconds": 5,
        "failureThreshold": 6,
    }
    return container


def _exporter_container(config: ResolvedConfig, names: NameSet) -> dict[str, Any]:
    monitoring = config.monitoring
    return {
        "name": EXPORTER_NAME,
        "image": monitoring.image,
        "args": [f"--web.listen-address=:{monitoring.port}"],
        "ports": [
            {
                "name": "metrics",
                "containerPort": monitoring.port,
                "protocol": "TCP",
            }
        ],
        "env": [
            secret_env("DATA_SOURCE_USER", "user", names.secret_name),
            secret_env("DATA_SOURCE_PASS", "password", names.secret_name),
            secret_env("DATA_SOURCE_DB", "database", names.secret_name),
            {
                "name": "DATA_SOURCE_URI",
                "value": (
                    f"127.0.0.1:{config.container_port}/$(DATA_SOURCE_DB)"
                    "?sslmode=disable"
                ),
            },
        ],
    }


def claim_mount_path(config: ResolvedConfig, index: int, claim: ClaimTemplate) -> str:
    if claim.mount_path:
        return claim.mount_path
    if index == 0:
        return config.persistence.mount_path
    return f"/var/lib/postgresql/{claim.name}"


def data_mount_path(config: ResolvedConfig) -> str:
    """Where the data directory volume is mounted: the first claim, or the emptyDir."""
    persistence = config.persistence
    if persistence.enabled and persistence.claims:
        return claim_mount_path(config, 0, persistence.claims[0])
    return persistence.mount_path


def _volume_mounts(config: ResolvedConfig) -> list[dict[str, Any]]:
    persistence = config.persistence
    if not persistence.enabled:
        return [{"name": "data", "mountPath": persistence.mount_path}]
    return [
        {"name": claim.name, "mountPath": claim_mount_path(config, index, claim)}
        for index, claim in enumerate(persistence.claims)
    ]


def _data_volumes(
    config: ResolvedConfig, names: NameSet
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Return (pod volumes, volume claim templates)."""
    persistence = config.persistence
    if not persistence.enabled:
        return [{"name": "data", "emptyDir": {}}], []

    if not config.stateful:
        # Deployments cannot carry claim templates; data is pod-local
        return [{"name": claim.name, "emptyDir": {}} for claim in persistence.claims], []

    templates = []
    for claim in persistence.claims:
        spec: dict[str, Any] = {
            "accessModes": list(claim.access_modes),
            "resources": {"requests": {"storage": claim.size}},
        }
        if claim.storage_class:
            spec["storageClassName"] = claim.storage_class
        templates.append(
            {
                "metadata": {"name": claim.name, "labels": names.selector_labels},
                "spec": spec,
            }
        )
    return [], templates


def _placement(
    config: ResolvedConfig, names: NameSet
) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    ha = config.high_availability
    term = {
        "labelSelector": {"matchLabels": names.selector_labels},
        "topologyKey": ha.topology_key,
    }
    if ha.anti_affinity == AntiAffinity.HARD:
        anti_affinity = {"requiredDuringSchedulingIgnoredDuringExecution": [term]}
        when_unsatisfiable = "DoNotSchedule"
    else:
        anti_affinity = {
            "preferredDuringSchedulingIgnoredDuringExecution": [
                {"weight": 100, "podAffinityTerm": term}
            ]
        }
        when_unsatisfiable = "ScheduleAnyway"

    spread = [
        {
            "maxSkew": ha.max_skew,
            "topologyKey": ha.topology_key,
            "whenUnsatisfiable": when_unsatisfiable,
            "labelSelector": {"matchLabels": names.selector_labels},
        }
    ]
    return {"podAntiAffinity": anti_affinity}, spread
