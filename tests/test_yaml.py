"""
Tests for utils/yaml.py - manifest and values serialization.
"""

import pytest
import yaml

from dbchart.core.errors import SchemaError
from dbchart.generators.manifests import to_manifests
from dbchart.render import render
from dbchart.utils.yaml import (
    LiteralStr,
    dump_manifests,
    dump_yaml,
    dump_yaml_with_header,
    load_values,
)


def test_dump_manifests_stream():
    """Test that every document becomes one YAML document in order."""
    documents = render(
        "orders", {"credentials": {"password": "p"}, "backup": {"enabled": True}}
    )

    content = dump_manifests(to_manifests(documents), "orders")

    assert content.startswith("# dbchart manifests for instance 'orders'")
    loaded = [doc for doc in yaml.safe_load_all(content) if doc]
    assert [doc["kind"] for doc in loaded] == [
        "StatefulSet",
        "Service",
        "Secret",
        "CronJob",
    ]
    assert "&id" not in content
    assert "*id" not in content


def test_backup_script_is_literal_block():
    documents = render(
        "orders", {"credentials": {"password": "p"}, "backup": {"enabled": True}}
    )

    content = dump_manifests(to_manifests(documents[-1:]), "orders")

    assert "- |" in content
    assert "pg_dump --no-owner --no-privileges" in content


def test_literal_str_style():
    content = dump_yaml({"script": LiteralStr("echo one\necho two\n")})

    assert content == "script: |\n  echo one\n  echo two\n"


def test_key_order_preserved():
    content = dump_yaml({"b": 1, "a": 2})

    assert content == "b: 1\na: 2\n"


def test_dump_yaml_with_header():
    content = dump_yaml_with_header({"replicaCount": 3}, "values", "orders")

    assert content.startswith("# dbchart values for instance 'orders'\n")
    assert yaml.safe_load(content) == {"replicaCount": 3}


def test_load_values(tmp_path):
    path = tmp_path / "values.yaml"
    path.write_text("replicaCount: 3\nenv:\n  TZ: UTC\n")

    assert load_values(path) == {"replicaCount": 3, "env": {"TZ": "UTC"}}


def test_load_empty_values(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_values(path) == {}


def test_load_values_requires_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- replicaCount\n")

    with pytest.raises(SchemaError):
        load_values(path)
