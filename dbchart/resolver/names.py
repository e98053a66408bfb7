"""Canonical resource names and labels for one instance."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field, replace

from dbchart.core.defaults import CHART_NAME
from dbchart.core.errors import SchemaError
from dbchart.core.models import CredentialSource, ExternalSecretReference

# Kubernetes object names and label values
NAME_LIMIT = 63
# CronJob names leave room for the 11-character job suffix
CRONJOB_NAME_LIMIT = 52

_DNS_LABEL_RE = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")

SUFFIXES = {
    "workload": "",
    "service": "",
    "secret": "-credentials",
    "config": "-config",
    "autoscaler": "-hpa",
    "network_policy": "-netpol",
    "disruption_budget": "-pdb",
    "backup_claim": "-backups",
}

LABEL_NAME = "app.kubernetes.io/name"
LABEL_INSTANCE = "app.kubernetes.io/instance"
LABEL_COMPONENT = "app.kubernetes.io/component"

WORKLOAD_COMPONENT = "database"
JOB_COMPONENT_PREFIX = "job-"


def is_dns_label(value: str) -> bool:
    return len(value) <= NAME_LIMIT and bool(_DNS_LABEL_RE.match(value))


def fit_name(name: str, limit: int = NAME_LIMIT) -> str:
    """Shorten name to limit, keeping it unique with a hash of the full name."""
    if len(name) <= limit:
        return name
    digest = hashlib.sha256(name.encode()).hexdigest()[:8]
    return f"{name[: limit - 9].rstrip('-')}-{digest}"


@dataclass(frozen=True)
class NameSet:
    """Names and labels shared by every document of one instance."""

    instance: str
    base: str
    workload: str
    service: str
    secret_name: str
    config: str
    autoscaler: str
    network_policy: str
    disruption_budget: str
    backup_claim: str
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def selector_labels(self) -> dict[str, str]:
        """Labels every selector targeting the workload matches on."""
        return dict(self.labels)

    @property
    def client_label(self) -> tuple[str, str]:
        """Label that lets a pod through the network policy."""
        return fit_name(f"{self.base}-client"), "true"

    def component_labels(self, component: str) -> dict[str, str]:
        labels = dict(self.labels)
        labels[LABEL_COMPONENT] = component
        return labels

    def job_name(self, job: str) -> str:
        return fit_name(f"{self.base}-{job}", CRONJOB_NAME_LIMIT)

    def job_component(self, job: str) -> str:
        """Component label of a job's pods. Never equal to the workload's."""
        return fit_name(f"{JOB_COMPONENT_PREFIX}{job}")

    def bind(self, source: CredentialSource | None) -> NameSet:
        """Point secret_name at the secret that actually holds the credentials."""
        if isinstance(source, ExternalSecretReference):
            return replace(self, secret_name=source.name)
        return self


def derive(instance_id: str) -> NameSet:
    """Derive every name for instance_id. Same id, same names."""
    if not isinstance(instance_id, str) or not is_dns_label(instance_id):
        raise SchemaError(
            [f"instance: {instance_id!r} is not a valid DNS-1123 label"]
        )

    base = fit_name(f"{instance_id}-{CHART_NAME}")
    names = {
        kind: fit_name(f"{base}{suffix}") for kind, suffix in SUFFIXES.items()
    }
    return NameSet(
        instance=instance_id,
        base=base,
        workload=names["workload"],
        service=names["service"],
        secret_name=names["secret"],
        config=names["config"],
        autoscaler=names["autoscaler"],
        network_policy=names["network_policy"],
        disruption_budget=names["disruption_budget"],
        backup_claim=names["backup_claim"],
        labels={
            LABEL_NAME: CHART_NAME,
            LABEL_INSTANCE: instance_id,
            LABEL_COMPONENT: WORKLOAD_COMPONENT,
        },
    )
