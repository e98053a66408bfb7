"""Render pipeline: resolve, validate, name and compose one instance."""

from __future__ import annotations

import logging
from typing import Any

from dbchart.core.defaults import default_values
from dbchart.core.documents import OutputDocument
from dbchart.core.errors import RenderError
from dbchart.generators.manifests import compose
from dbchart.resolver.config import resolve
from dbchart.resolver.names import derive
from dbchart.resolver.secrets import resolve_credentials
from dbchart.validation import validate

logger = logging.getLogger(__name__)


def render(
    instance_id: str,
    overrides: dict[str, Any] | None = None,
    defaults: dict[str, Any] | None = None,
) -> list[OutputDocument]:
    """Render every document for instance_id.

    Raises SchemaError for malformed overrides or instance ids and RenderError
    carrying all validation failures. Nothing is returned on failure.
    """
    names = derive(instance_id)
    config = resolve(defaults if defaults is not None else default_values(), overrides)
    source = resolve_credentials(config.credentials, config.external_secret_name)

    errors = validate(config, source)
    if errors:
        for error in errors:
            logger.debug("Validation failed for %s: %s", instance_id, error)
        raise RenderError(errors)

    documents = compose(config, source, names)
    logger.info("Rendered %d document(s) for %s", len(documents), instance_id)
    return documents
