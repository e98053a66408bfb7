"""Override values generator for `dbchart init`."""

import secrets
from typing import Any

from dbchart.core.models import InstanceOptions
from dbchart.utils.yaml import dump_yaml_with_header


def _generate_db_secret(length: int = 24) -> str:
    """Generate a cryptographically secure hex token.

    Uses only [0-9a-f] characters, safe for inclusion in URIs such as
    PostgreSQL connection strings.
    """
    return secrets.token_hex(length)


def generate_overrides(options: InstanceOptions) -> dict[str, Any]:
    """Build the override layer for one instance."""
    values: dict[str, Any] = {
        "replicaCount": options.replicas,
        "persistence": {
            "enabled": True,
            "claims": [
                {
                    "name": "data",
                    "size": options.storage_size,
                    "storageClass": options.storage_class,
                }
            ],
        },
    }

    if options.existing_secret:
        values["externalSecretName"] = options.existing_secret
    else:
        values["credentials"] = {
            "user": options.user,
            "password": _generate_db_secret(),
            "database": options.database,
        }

    if options.high_availability:
        values["highAvailability"] = {"enabled": True}
        # A budget on a single replica would block every node drain
        if options.replicas > 1:
            values["podDisruptionBudget"] = {
                "enabled": True,
                "minAvailable": options.replicas - 1,
            }

    if options.monitoring:
        values["monitoring"] = {"enabled": True}

    if options.network_policy:
        values["networkPolicy"] = {"enabled": True}

    if options.backup:
        values["backup"] = {
            "enabled": True,
            "schedule": options.backup_schedule,
            "retention": options.backup_retention,
        }

    return values


def render_overrides(options: InstanceOptions) -> str:
    """Generate the values-<instance>.yaml content."""
    return dump_yaml_with_header(generate_overrides(options), "values", options.instance)
