"""Manifest composition: decide which documents an instance gets."""

from __future__ import annotations

import logging
from typing import Any

from dbchart.core.documents import OutputDocument
from dbchart.core.models import CredentialSource, ResolvedConfig
from dbchart.generators.sections.autoscaler import generate_autoscaler_document
from dbchart.generators.sections.config_map import generate_config_map_document
from dbchart.generators.sections.disruption_budget import (
    generate_disruption_budget_document,
)
from dbchart.generators.sections.network_policy import (
    generate_network_policy_document,
)
from dbchart.generators.sections.scheduled_jobs import (
    generate_scheduled_job_documents,
)
from dbchart.generators.sections.secret import generate_secret_document
from dbchart.generators.sections.service import generate_service_document
from dbchart.generators.sections.workload import generate_workload_document
from dbchart.resolver.names import NameSet

logger = logging.getLogger(__name__)


def compose(
    config: ResolvedConfig, source: CredentialSource, names: NameSet
) -> list[OutputDocument]:
    """Compose the ordered document list for one validated configuration.

    Order: Workload, Service, ConfigMap, Secret, Autoscaler, NetworkPolicy,
    DisruptionBudget, then scheduled jobs in list order.
    """
    names = names.bind(source)

    config_map = generate_config_map_document(config, names)
    workload = generate_workload_document(config, names, config_map)

    documents: list[OutputDocument] = [
        workload,
        generate_service_document(config, names),
    ]
    optional = (
        config_map,
        generate_secret_document(source, names),
        generate_autoscaler_document(config, names, workload),
        generate_network_policy_document(config, names),
        generate_disruption_budget_document(config, names),
    )
    documents.extend(document for document in optional if document is not None)
    documents.extend(generate_scheduled_job_documents(config, names))

    logger.debug(
        "Composed %s for %s",
        ", ".join(f"{document.kind}/{document.name}" for document in documents),
        names.instance,
    )
    return documents


def to_manifests(documents: list[OutputDocument]) -> list[dict[str, Any]]:
    return [document.to_manifest() for document in documents]
