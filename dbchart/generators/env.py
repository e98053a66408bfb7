"""Environment bindings shared by the workload and scheduled jobs."""

from typing import Any

from dbchart.core.models import SECRET_KEYS


def secret_env(name: str, field: str, secret_name: str) -> dict[str, Any]:
    """Bind env var name to one credential field of the secret, by reference."""
    return {
        "name": name,
        "valueFrom": {
            "secretKeyRef": {
                "name": secret_name,
                "key": SECRET_KEYS[field],
            },
        },
    }


def literal_env(values: dict[str, Any]) -> list[dict[str, Any]]:
    """Literal env entries, in the caller's order, values as strings."""
    return [
        {"name": str(key), "value": env_value(value)} for key, value in values.items()
    ]


def env_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
