"""Configuration models for dbchart."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from dbchart.core.frozen import FrozenFields


class AntiAffinity(str, Enum):
    SOFT = "soft"
    HARD = "hard"


# Keys of the credential secret, shared by the generated and the referenced secret
SECRET_KEYS = {
    "user": "username",
    "password": "password",
    "database": "database",
}


@dataclass(frozen=True)
class ImageSpec:
    """Container image reference."""

    registry: str
    repository: str
    tag: str
    pull_policy: str = "IfNotPresent"

    @property
    def reference(self) -> str:
        """Full image reference, e.g. docker.io/library/postgres:16.4."""
        ref = f"{self.registry}/{self.repository}" if self.registry else self.repository
        return f"{ref}:{self.tag}" if self.tag else ref

    @classmethod
    def from_values(cls, values: dict[str, Any]) -> ImageSpec:
        return cls(
            registry=values["registry"],
            repository=values["repository"],
            tag=values["tag"],
            pull_policy=values["pullPolicy"],
        )


@dataclass(frozen=True)
class ServiceSpec(FrozenFields):
    type: str
    port: int
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ClaimTemplate:
    """A per-replica persistent storage request."""

    name: str
    size: str
    storage_class: str = ""
    access_modes: tuple[str, ...] = ("ReadWriteOnce",)
    mount_path: str = ""


@dataclass(frozen=True)
class PersistenceSpec:
    enabled: bool
    mount_path: str
    claims: tuple[ClaimTemplate, ...] = ()


@dataclass(frozen=True)
class CredentialsSpec:
    """Inline credential values. Leave password empty when using an existing secret."""

    user: str
    password: str
    database: str


@dataclass(frozen=True)
class AutoscalingSpec:
    enabled: bool
    min_replicas: int
    max_replicas: int
    target_cpu: int
    # 0 disables the memory metric
    target_memory: int = 0


@dataclass(frozen=True)
class NetworkPolicySpec(FrozenFields):
    enabled: bool
    allow_external: bool = False
    allowed_labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DisruptionBudgetSpec:
    enabled: bool
    min_available: int = 1


@dataclass(frozen=True)
class HighAvailabilitySpec:
    enabled: bool
    anti_affinity: AntiAffinity = AntiAffinity.SOFT
    topology_key: str = "kubernetes.io/hostname"
    max_skew: int = 1


@dataclass(frozen=True)
class MonitoringSpec:
    enabled: bool
    port: int = 9187
    image: str = ""


@dataclass(frozen=True)
class BackupSpec:
    enabled: bool
    schedule: str
    retention: int
    claim_name: str = ""
    image: str = ""


@dataclass(frozen=True)
class ScheduledJobSpec(FrozenFields):
    """A user-authored scheduled job definition."""

    name: str
    schedule: str
    image: str = ""
    command: tuple[str, ...] = ()
    args: tuple[str, ...] = ()
    env: dict[str, Any] = field(default_factory=dict)
    volumes: tuple[dict[str, Any], ...] = ()
    volume_mounts: tuple[dict[str, Any], ...] = ()
    concurrency_policy: str = "Forbid"
    successful_history: int = 3
    failed_history: int = 1
    restart_policy: str = "OnFailure"
    suspend: bool = False

    @classmethod
    def from_values(cls, values: dict[str, Any]) -> ScheduledJobSpec:
        return cls(
            name=values["name"],
            schedule=values["schedule"],
            image=values["image"],
            command=tuple(values["command"]),
            args=tuple(values["args"]),
            env=dict(values["env"]),
            volumes=tuple(values["volumes"]),
            volume_mounts=tuple(values["volumeMounts"]),
            concurrency_policy=values["concurrencyPolicy"],
            successful_history=values["successfulJobsHistoryLimit"],
            failed_history=values["failedJobsHistoryLimit"],
            restart_policy=values["restartPolicy"],
            suspend=values["suspend"],
        )


@dataclass(frozen=True)
class ResolvedConfig(FrozenFields):
    """Fully merged configuration. Single source of truth for a render."""

    # Workload shape
    stateful: bool
    replica_count: int
    image: ImageSpec
    container_port: int
    service: ServiceSpec
    resources: dict[str, Any]

    # Storage and credentials
    persistence: PersistenceSpec
    credentials: CredentialsSpec
    external_secret_name: str

    # Optional features
    autoscaling: AutoscalingSpec
    network_policy: NetworkPolicySpec
    disruption_budget: DisruptionBudgetSpec
    high_availability: HighAvailabilitySpec
    monitoring: MonitoringSpec
    backup: BackupSpec
    scheduled_jobs: tuple[ScheduledJobSpec, ...] = ()

    # Free-form values
    config: dict[str, Any] = field(default_factory=dict)
    env: dict[str, Any] = field(default_factory=dict)
    pod_annotations: dict[str, str] = field(default_factory=dict)
    node_selector: dict[str, str] = field(default_factory=dict)
    tolerations: tuple[dict[str, Any], ...] = ()

    @property
    def uses_default_backup(self) -> bool:
        """The documented backup job is emitted only when no jobs are listed."""
        return self.backup.enabled and not self.scheduled_jobs

    @classmethod
    def from_values(cls, values: dict[str, Any]) -> ResolvedConfig:
        """Build the typed configuration from a merged, schema-checked values tree."""
        persistence = values["persistence"]
        autoscaling = values["autoscaling"]
        network_policy = values["networkPolicy"]
        ha = values["highAvailability"]
        monitoring = values["monitoring"]
        backup = values["backup"]

        return cls(
            stateful=values["statefulWorkload"],
            replica_count=values["replicaCount"],
            image=ImageSpec.from_values(values["image"]),
            container_port=values["containerPort"],
            service=ServiceSpec(
                type=values["service"]["type"],
                port=values["service"]["port"],
                annotations=dict(values["service"]["annotations"]),
            ),
            resources=values["resources"],
            persistence=PersistenceSpec(
                enabled=persistence["enabled"],
                mount_path=persistence["mountPath"],
                claims=tuple(
                    ClaimTemplate(
                        name=claim["name"],
                        size=claim["size"],
                        storage_class=claim["storageClass"],
                        access_modes=tuple(claim["accessModes"]),
                        mount_path=claim["mountPath"],
                    )
                    for claim in persistence["claims"]
                ),
            ),
            credentials=CredentialsSpec(**values["credentials"]),
            external_secret_name=values["externalSecretName"],
            autoscaling=AutoscalingSpec(
                enabled=autoscaling["enabled"],
                min_replicas=autoscaling["minReplicas"],
                max_replicas=autoscaling["maxReplicas"],
                target_cpu=autoscaling["targetCPUUtilizationPercentage"],
                target_memory=autoscaling["targetMemoryUtilizationPercentage"],
            ),
            network_policy=NetworkPolicySpec(
                enabled=network_policy["enabled"],
                allow_external=network_policy["allowExternal"],
                allowed_labels=dict(network_policy["allowedLabels"]),
            ),
            disruption_budget=DisruptionBudgetSpec(
                enabled=values["podDisruptionBudget"]["enabled"],
                min_available=values["podDisruptionBudget"]["minAvailable"],
            ),
            high_availability=HighAvailabilitySpec(
                enabled=ha["enabled"],
                anti_affinity=AntiAffinity(ha["antiAffinity"]),
                topology_key=ha["topologyKey"],
                max_skew=ha["maxSkew"],
            ),
            monitoring=MonitoringSpec(
                enabled=monitoring["enabled"],
                port=monitoring["port"],
                image=monitoring["image"],
            ),
            backup=BackupSpec(
                enabled=backup["enabled"],
                schedule=backup["schedule"],
                retention=backup["retention"],
                claim_name=backup["claimName"],
                image=backup["image"],
            ),
            scheduled_jobs=tuple(
                ScheduledJobSpec.from_values(job) for job in values["scheduledJobs"]
            ),
            config=dict(values["config"]),
            env=dict(values["env"]),
            pod_annotations=dict(values["podAnnotations"]),
            node_selector=dict(values["nodeSelector"]),
            tolerations=tuple(values["tolerations"]),
        )


# Credential sources


@dataclass(frozen=True)
class InlineSecret:
    """Credentials supplied as values; a Secret document is generated for them."""

    password: str
    user: str
    database: str


@dataclass(frozen=True)
class ExternalSecretReference:
    """Credentials held by an existing Secret; nothing is generated."""

    name: str


CredentialSource = Union[InlineSecret, ExternalSecretReference]


@dataclass
class InstanceOptions:
    """Answers collected by `dbchart init`."""

    instance: str
    replicas: int = 1
    storage_size: str = "8Gi"
    storage_class: str = ""
    user: str = "postgres"
    database: str = "postgres"
    existing_secret: str = ""

    # Feature flags
    high_availability: bool = False
    monitoring: bool = False
    network_policy: bool = False
    backup: bool = False
    backup_schedule: str = "0 2 * * *"
    backup_retention: int = 7
