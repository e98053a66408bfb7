"""Merge packaged defaults with caller overrides into a ResolvedConfig."""

from __future__ import annotations

import copy
import logging
from typing import Any

from dbchart.core.defaults import CLAIM_DEFAULTS, SCHEDULED_JOB_DEFAULTS
from dbchart.core.errors import SchemaError
from dbchart.core.models import ResolvedConfig
from dbchart.resolver.names import is_dns_label

logger = logging.getLogger(__name__)

# Free-form maps: any key is accepted, null deletes a key
PASSTHROUGH_MAPS = frozenset(
    {
        "config",
        "env",
        "podAnnotations",
        "nodeSelector",
        "resources",
        "service.annotations",
        "networkPolicy.allowedLabels",
        "scheduledJobs[].env",
    }
)

# Lists whose items are raw manifest fragments
OPAQUE_LISTS = frozenset(
    {
        "tolerations",
        "scheduledJobs[].volumes",
        "scheduledJobs[].volumeMounts",
    }
)

# Lists of records, each completed from a template
ITEM_TEMPLATES: dict[str, dict[str, Any]] = {
    "persistence.claims": CLAIM_DEFAULTS,
    "scheduledJobs": SCHEDULED_JOB_DEFAULTS,
}

CHOICES: dict[str, tuple[str, ...]] = {
    "image.pullPolicy": ("Always", "IfNotPresent", "Never"),
    "service.type": ("ClusterIP", "NodePort", "LoadBalancer"),
    "highAvailability.antiAffinity": ("soft", "hard"),
    "scheduledJobs[].concurrencyPolicy": ("Allow", "Forbid", "Replace"),
    "scheduledJobs[].restartPolicy": ("OnFailure", "Never"),
}


def merge_values(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge overrides onto a copy of base.

    Maps merge key by key, lists and scalars replace the base value wholesale,
    and a None value deletes the key. Neither argument is modified.
    """
    merged = copy.deepcopy(base)
    _merge_into(merged, overrides)
    return merged


def _merge_into(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    for key, val in overrides.items():
        if val is None:
            base.pop(key, None)
        elif isinstance(val, dict) and isinstance(base.get(key), dict):
            _merge_into(base[key], val)
        else:
            base[key] = copy.deepcopy(val)


def combine_overrides(*layers: dict[str, Any]) -> dict[str, Any]:
    """Fold several override layers into one, later layers winning."""
    combined: dict[str, Any] = {}
    for layer in layers:
        combined = merge_values(combined, layer)
    return combined


def check_schema(overrides: Any, defaults: dict[str, Any]) -> list[str]:
    """Return every shape problem of overrides against the defaults tree."""
    problems: list[str] = []
    if not isinstance(overrides, dict):
        return [f"<root>: expected a mapping, got {_type_name(overrides)}"]
    _check_mapping(overrides, defaults, "", "", problems)
    return problems


def _child(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _check_mapping(
    value: dict, default: dict, schema_path: str, where: str, problems: list[str]
) -> None:
    for key, item in value.items():
        key = str(key)
        child_schema = _child(schema_path, key)
        child_where = _child(where, key)
        if key not in default:
            problems.append(f"{child_where}: unknown key")
            continue
        _check_value(item, default[key], child_schema, child_where, problems)


def _check_value(
    value: Any, default: Any, schema_path: str, where: str, problems: list[str]
) -> None:
    if value is None:
        problems.append(f"{where}: null is only allowed inside free-form maps")
        return

    if schema_path in PASSTHROUGH_MAPS:
        if not isinstance(value, dict):
            problems.append(f"{where}: expected a mapping, got {_type_name(value)}")
        return

    if isinstance(default, dict):
        if not isinstance(value, dict):
            problems.append(f"{where}: expected a mapping, got {_type_name(value)}")
            return
        _check_mapping(value, default, schema_path, where, problems)
        return

    if isinstance(default, list):
        if not isinstance(value, list):
            problems.append(f"{where}: expected a list, got {_type_name(value)}")
            return
        _check_list(value, schema_path, where, problems)
        return

    if not _same_type(value, default):
        problems.append(
            f"{where}: expected {_type_name(default)}, got {_type_name(value)}"
        )
        return

    choices = CHOICES.get(schema_path)
    if choices and value not in choices:
        problems.append(f"{where}: must be one of {', '.join(choices)}")


def _check_list(value: list, schema_path: str, where: str, problems: list[str]) -> None:
    if schema_path in OPAQUE_LISTS:
        return

    template = ITEM_TEMPLATES.get(schema_path)
    if template is None:
        for index, item in enumerate(value):
            if not isinstance(item, str):
                problems.append(
                    f"{where}[{index}]: expected string, got {_type_name(item)}"
                )
        return

    seen: set[str] = set()
    for index, item in enumerate(value):
        item_where = f"{where}[{index}]"
        if not isinstance(item, dict):
            problems.append(f"{item_where}: expected a mapping, got {_type_name(item)}")
            continue
        _check_mapping(item, template, f"{schema_path}[]", item_where, problems)

        name = item.get("name")
        if not isinstance(name, str) or not name:
            problems.append(f"{item_where}.name: required")
        elif not is_dns_label(name):
            problems.append(f"{item_where}.name: {name!r} is not a valid DNS-1123 label")
        elif name in seen:
            problems.append(f"{item_where}.name: duplicate name {name!r}")
        else:
            seen.add(name)


def _same_type(value: Any, default: Any) -> bool:
    # bool is an int subclass; keep the two apart
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number" if isinstance(value, float) else "integer"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "mapping"
    if isinstance(value, list):
        return "list"
    return type(value).__name__


def _complete_items(values: dict[str, Any]) -> None:
    """Fill missing keys of list records from their templates."""
    persistence = values["persistence"]
    persistence["claims"] = [
        merge_values(CLAIM_DEFAULTS, claim) for claim in persistence["claims"]
    ]
    values["scheduledJobs"] = [
        merge_values(SCHEDULED_JOB_DEFAULTS, job) for job in values["scheduledJobs"]
    ]


def resolve(
    defaults: dict[str, Any], overrides: dict[str, Any] | None
) -> ResolvedConfig:
    """Resolve defaults plus overrides into one ResolvedConfig.

    Raises SchemaError listing every malformed override before anything is merged.
    """
    overrides = overrides or {}
    problems = check_schema(overrides, defaults)
    if problems:
        raise SchemaError(problems)

    values = merge_values(defaults, overrides)
    _complete_items(values)
    logger.debug("Resolved values with %d top-level override(s)", len(overrides))
    return ResolvedConfig.from_values(values)
