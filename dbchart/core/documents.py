"""Output documents: one immutable record per Kubernetes object kind."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from dbchart.core.frozen import FrozenFields, thaw


class DocumentKind(str, Enum):
    WORKLOAD = "workload"
    SERVICE = "service"
    CONFIG_MAP = "config-map"
    SECRET = "secret"
    AUTOSCALER = "autoscaler"
    NETWORK_POLICY = "network-policy"
    DISRUPTION_BUDGET = "disruption-budget"
    SCHEDULED_JOB = "scheduled-job"


def _metadata(name: str, labels: dict[str, str]) -> dict[str, Any]:
    return {"name": name, "labels": dict(labels)}


def _selector(labels: dict[str, str]) -> dict[str, Any]:
    return {"matchLabels": dict(labels)}


@dataclass(frozen=True)
class Workload(FrozenFields):
    """The database process: a StatefulSet, or a Deployment when stateless."""

    tag: ClassVar[DocumentKind] = DocumentKind.WORKLOAD

    name: str
    labels: dict[str, str]
    stateful: bool
    replicas: int
    service_name: str
    selector: dict[str, str]
    pod_annotations: dict[str, str] = field(default_factory=dict)
    containers: tuple[dict[str, Any], ...] = ()
    volumes: tuple[dict[str, Any], ...] = ()
    claim_templates: tuple[dict[str, Any], ...] = ()
    affinity: dict[str, Any] = field(default_factory=dict)
    topology_spread: tuple[dict[str, Any], ...] = ()
    node_selector: dict[str, str] = field(default_factory=dict)
    tolerations: tuple[dict[str, Any], ...] = ()

    @property
    def kind(self) -> str:
        return "StatefulSet" if self.stateful else "Deployment"

    def to_manifest(self) -> dict[str, Any]:
        pod_spec: dict[str, Any] = {"containers": thaw(self.containers)}
        if self.volumes:
            pod_spec["volumes"] = thaw(self.volumes)
        if self.affinity:
            pod_spec["affinity"] = thaw(self.affinity)
        if self.topology_spread:
            pod_spec["topologySpreadConstraints"] = thaw(self.topology_spread)
        if self.node_selector:
            pod_spec["nodeSelector"] = dict(self.node_selector)
        if self.tolerations:
            pod_spec["tolerations"] = thaw(self.tolerations)

        template: dict[str, Any] = {"metadata": {"labels": dict(self.selector)}}
        if self.pod_annotations:
            template["metadata"]["annotations"] = dict(self.pod_annotations)
        template["spec"] = pod_spec

        spec: dict[str, Any] = {
            "replicas": self.replicas,
            "selector": _selector(self.selector),
        }
        if self.stateful:
            spec["serviceName"] = self.service_name
            spec["podManagementPolicy"] = "OrderedReady"
            spec["updateStrategy"] = {"type": "RollingUpdate"}
        else:
            # A single writer per data directory
            spec["strategy"] = {"type": "Recreate"}
        spec["template"] = template
        if self.stateful and self.claim_templates:
            spec["volumeClaimTemplates"] = thaw(self.claim_templates)

        return {
            "apiVersion": "apps/v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "spec": spec,
        }


@dataclass(frozen=True)
class Service(FrozenFields):
    tag: ClassVar[DocumentKind] = DocumentKind.SERVICE
    kind: ClassVar[str] = "Service"

    name: str
    labels: dict[str, str]
    selector: dict[str, str]
    type: str = "ClusterIP"
    ports: tuple[dict[str, Any], ...] = ()
    annotations: dict[str, str] = field(default_factory=dict)

    def to_manifest(self) -> dict[str, Any]:
        metadata = _metadata(self.name, self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)
        return {
            "apiVersion": "v1",
            "kind": self.kind,
            "metadata": metadata,
            "spec": {
                "type": self.type,
                "selector": dict(self.selector),
                "ports": thaw(self.ports),
            },
        }


@dataclass(frozen=True)
class ConfigMap(FrozenFields):
    tag: ClassVar[DocumentKind] = DocumentKind.CONFIG_MAP
    kind: ClassVar[str] = "ConfigMap"

    name: str
    labels: dict[str, str]
    data: dict[str, str] = field(default_factory=dict)

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class Secret(FrozenFields):
    """Generated credential secret. Only emitted for inline credentials."""

    tag: ClassVar[DocumentKind] = DocumentKind.SECRET
    kind: ClassVar[str] = "Secret"

    name: str
    labels: dict[str, str]
    values: dict[str, str] = field(default_factory=dict)

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "type": "Opaque",
            "data": {
                key: base64.b64encode(value.encode()).decode()
                for key, value in self.values.items()
            },
        }


@dataclass(frozen=True)
class Autoscaler(FrozenFields):
    tag: ClassVar[DocumentKind] = DocumentKind.AUTOSCALER
    kind: ClassVar[str] = "HorizontalPodAutoscaler"

    name: str
    labels: dict[str, str]
    target_kind: str
    target_name: str
    min_replicas: int
    max_replicas: int
    target_cpu: int
    target_memory: int = 0

    def to_manifest(self) -> dict[str, Any]:
        metrics = [_utilization_metric("cpu", self.target_cpu)]
        if self.target_memory:
            metrics.append(_utilization_metric("memory", self.target_memory))
        return {
            "apiVersion": "autoscaling/v2",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "spec": {
                "scaleTargetRef": {
                    "apiVersion": "apps/v1",
                    "kind": self.target_kind,
                    "name": self.target_name,
                },
                "minReplicas": self.min_replicas,
                "maxReplicas": self.max_replicas,
                "metrics": metrics,
            },
        }


def _utilization_metric(resource: str, target: int) -> dict[str, Any]:
    return {
        "type": "Resource",
        "resource": {
            "name": resource,
            "target": {
                "type": "Utilization",
                "averageUtilization": target,
            },
        },
    }


@dataclass(frozen=True)
class NetworkPolicy(FrozenFields):
    tag: ClassVar[DocumentKind] = DocumentKind.NETWORK_POLICY
    kind: ClassVar[str] = "NetworkPolicy"

    name: str
    labels: dict[str, str]
    selector: dict[str, str]
    ports: tuple[int, ...] = ()
    # Empty: any source may connect
    sources: tuple[dict[str, Any], ...] = ()

    def to_manifest(self) -> dict[str, Any]:
        rule: dict[str, Any] = {
            "ports": [{"protocol": "TCP", "port": port} for port in self.ports],
        }
        if self.sources:
            rule["from"] = thaw(self.sources)
        return {
            "apiVersion": "networking.k8s.io/v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "spec": {
                "podSelector": _selector(self.selector),
                "policyTypes": ["Ingress"],
                "ingress": [rule],
            },
        }


@dataclass(frozen=True)
class DisruptionBudget(FrozenFields):
    tag: ClassVar[DocumentKind] = DocumentKind.DISRUPTION_BUDGET
    kind: ClassVar[str] = "PodDisruptionBudget"

    name: str
    labels: dict[str, str]
    selector: dict[str, str]
    min_available: int = 1

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "policy/v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "spec": {
                "minAvailable": self.min_available,
                "selector": _selector(self.selector),
            },
        }


@dataclass(frozen=True)
class ScheduledJob(FrozenFields):
    """A CronJob. Credentials reach it only through secretKeyRef env entries."""

    tag: ClassVar[DocumentKind] = DocumentKind.SCHEDULED_JOB
    kind: ClassVar[str] = "CronJob"

    name: str
    labels: dict[str, str]
    schedule: str
    container: dict[str, Any]
    pod_labels: dict[str, str] = field(default_factory=dict)
    volumes: tuple[dict[str, Any], ...] = ()
    concurrency_policy: str = "Forbid"
    successful_history: int = 3
    failed_history: int = 1
    restart_policy: str = "OnFailure"
    suspend: bool = False

    def to_manifest(self) -> dict[str, Any]:
        pod_spec: dict[str, Any] = {
            "restartPolicy": self.restart_policy,
            "containers": [thaw(self.container)],
        }
        if self.volumes:
            pod_spec["volumes"] = thaw(self.volumes)
        return {
            "apiVersion": "batch/v1",
            "kind": self.kind,
            "metadata": _metadata(self.name, self.labels),
            "spec": {
                "schedule": self.schedule,
                "concurrencyPolicy": self.concurrency_policy,
                "successfulJobsHistoryLimit": self.successful_history,
                "failedJobsHistoryLimit": self.failed_history,
                "suspend": self.suspend,
                "jobTemplate": {
                    "spec": {
                        "template": {
                            "metadata": {"labels": dict(self.pod_labels)},
                            "spec": pod_spec,
                        },
                    },
                },
            },
        }


OutputDocument = Union[
    Workload,
    Service,
    ConfigMap,
    Secret,
    Autoscaler,
    NetworkPolicy,
    DisruptionBudget,
    ScheduledJob,
]
