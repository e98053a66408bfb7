"""PodDisruptionBudget document generator."""

from __future__ import annotations

from dbchart.core.documents import DisruptionBudget
from dbchart.core.models import ResolvedConfig
from dbchart.resolver.names import NameSet


def generate_disruption_budget_document(
    config: ResolvedConfig, names: NameSet
) -> DisruptionBudget | None:
    if not config.disruption_budget.enabled:
        return None

    return DisruptionBudget(
        name=names.disruption_budget,
        labels=names.labels,
        selector=names.selector_labels,
        min_available=config.disruption_budget.min_available,
    )
