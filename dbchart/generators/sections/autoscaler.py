"""HorizontalPodAutoscaler document generator."""

from __future__ import annotations

from dbchart.core.documents import Autoscaler, Workload
from dbchart.core.models import ResolvedConfig
from dbchart.resolver.names import NameSet


def generate_autoscaler_document(
    config: ResolvedConfig, names: NameSet, workload: Workload
) -> Autoscaler | None:
    """Generate the autoscaler, or None when autoscaling is disabled.

    The workload keeps its own replica count; once this document exists that
    count is only the initial size.
    """
    autoscaling = config.autoscaling
    if not autoscaling.enabled:
        return None

    return Autoscaler(
        name=names.autoscaler,
        labels=names.labels,
        target_kind=workload.kind,
        target_name=workload.name,
        min_replicas=autoscaling.min_replicas,
        max_replicas=autoscaling.max_replicas,
        target_cpu=autoscaling.target_cpu,
        target_memory=autoscaling.target_memory,
    )
