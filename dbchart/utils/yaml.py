"""YAML serialization for values files and rendered manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import yaml

from dbchart import __version__
from dbchart.core.errors import SchemaError


class LiteralStr(str):
    """String emitted as a YAML literal block (|)."""


class _Dumper(yaml.SafeDumper):
    def ignore_aliases(self, data: Any) -> bool:
        # Manifests are read by humans and kubectl; never emit &anchors
        return True


def _literal_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return _literal_representer(dumper, data)
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_Dumper.add_representer(LiteralStr, _literal_representer)
_Dumper.add_representer(str, _str_representer)


def _header(kind: str, instance: str) -> str:
    return (
        f"# dbchart {kind} for instance '{instance}'\n"
        f"# Generated by dbchart {__version__}\n"
    )


def dump_yaml(data: Any) -> str:
    return yaml.dump(
        data,
        Dumper=_Dumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def dump_yaml_with_header(data: Any, kind: str, instance: str) -> str:
    """Dump data as YAML below a generated header comment."""
    return _header(kind, instance) + "\n" + dump_yaml(data)


def dump_manifests(manifests: Iterable[dict[str, Any]], instance: str) -> str:
    """Dump manifests as one multi-document YAML stream."""
    body = "".join(f"---\n{dump_yaml(manifest)}" for manifest in manifests)
    return _header("manifests", instance) + body


def load_values(path: str | Path) -> dict[str, Any]:
    """Load one override layer. An empty file is an empty layer."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise SchemaError([f"{path}: {exc}"]) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaError([f"{path}: top level must be a mapping"])
    return data
