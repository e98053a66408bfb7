"""
Tests for resolver/config.py - merging defaults with overrides.
"""

import copy

import pytest

from dbchart.core.errors import SchemaError
from dbchart.resolver.config import (
    check_schema,
    combine_overrides,
    merge_values,
    resolve,
)


def test_defaults_resolve_without_overrides(defaults):
    """Test that the packaged defaults resolve on their own."""
    config = resolve(defaults, {})

    assert config.stateful is True
    assert config.replica_count == 1
    assert config.image.reference == "docker.io/library/postgres:16.4"
    assert config.persistence.enabled is True
    assert [claim.name for claim in config.persistence.claims] == ["data"]
    assert config.persistence.claims[0].size == "8Gi"
    assert config.autoscaling.enabled is False
    assert config.scheduled_jobs == ()


def test_scalar_override_keeps_siblings(defaults):
    """Test that overriding one leaf leaves the other leaves at their defaults."""
    config = resolve(defaults, {"image": {"tag": "17.0"}})

    assert config.image.tag == "17.0"
    assert config.image.repository == "library/postgres"
    assert config.image.reference == "docker.io/library/postgres:17.0"


def test_list_replaced_wholesale(defaults):
    """Test that a supplied claim list replaces the default list entirely."""
    config = resolve(
        defaults,
        {"persistence": {"claims": [{"name": "wal", "size": "2Gi"}]}},
    )

    claims = config.persistence.claims
    assert len(claims) == 1
    assert claims[0].name == "wal"
    assert claims[0].size == "2Gi"
    # Item fields missing from the override come from the item template
    assert claims[0].access_modes == ("ReadWriteOnce",)
    assert claims[0].storage_class == ""


def test_empty_list_replaces_default(defaults):
    """Test that an explicit empty list clears the default entries."""
    config = resolve(defaults, {"persistence": {"claims": []}})

    assert config.persistence.claims == ()


def test_job_entries_completed_from_template(defaults):
    """Test that scheduled job entries get default policies."""
    config = resolve(
        defaults,
        {
            "scheduledJobs": [
                {
                    "name": "vacuum",
                    "schedule": "0 3 * * *",
                    "command": ["vacuumdb", "--all"],
                }
            ]
        },
    )

    job = config.scheduled_jobs[0]
    assert job.name == "vacuum"
    assert job.command == ("vacuumdb", "--all")
    assert job.concurrency_policy == "Forbid"
    assert job.successful_history == 3
    assert job.failed_history == 1
    assert job.restart_policy == "OnFailure"


def test_merge_does_not_mutate_inputs(defaults):
    """Test that merging is side-effect free."""
    overrides = {"replicaCount": 3, "env": {"TZ": "UTC"}}
    defaults_before = copy.deepcopy(defaults)
    overrides_before = copy.deepcopy(overrides)

    merged = merge_values(defaults, overrides)

    assert defaults == defaults_before
    assert overrides == overrides_before
    assert merged["replicaCount"] == 3
    merged["env"]["TZ"] = "changed"
    assert overrides["env"]["TZ"] == "UTC"


def test_null_deletes_key_in_free_form_map():
    """Test that None removes a key from a passthrough map."""
    merged = merge_values({"env": {"A": "1", "B": "2"}}, {"env": {"A": None}})

    assert merged == {"env": {"B": "2"}}


def test_passthrough_maps_accept_any_key(defaults):
    """Test that env and config keep arbitrary keys."""
    config = resolve(
        defaults,
        {"env": {"TZ": "UTC"}, "config": {"POSTGRES_INITDB_ARGS": "--data-checksums"}},
    )

    assert config.env == {"TZ": "UTC"}
    assert config.config == {"POSTGRES_INITDB_ARGS": "--data-checksums"}


def test_unknown_key_rejected(defaults):
    """Test that an unknown key raises SchemaError."""
    with pytest.raises(SchemaError) as exc_info:
        resolve(defaults, {"replicas": 3})

    assert exc_info.value.problems == ["replicas: unknown key"]


def test_type_change_rejected(defaults):
    """Test that a leaf may not change its type."""
    problems = check_schema({"replicaCount": "3"}, defaults)

    assert problems == ["replicaCount: expected integer, got string"]


def test_bool_and_int_kept_apart(defaults):
    """Test that 1 is not accepted where a boolean is expected."""
    problems = check_schema({"statefulWorkload": 1}, defaults)

    assert problems == ["statefulWorkload: expected boolean, got integer"]


def test_null_rejected_outside_free_form_maps(defaults):
    """Test that None cannot erase a schema leaf."""
    problems = check_schema({"replicaCount": None}, defaults)

    assert len(problems) == 1
    assert problems[0].startswith("replicaCount: null")


def test_all_schema_problems_reported_together(defaults):
    """Test that every problem is collected, not just the first."""
    with pytest.raises(SchemaError) as exc_info:
        resolve(
            defaults,
            {
                "replicas": 3,
                "image": {"tag": 5},
                "highAvailability": {"antiAffinity": "maybe"},
            },
        )

    problems = exc_info.value.problems
    assert len(problems) == 3
    assert "replicas: unknown key" in problems
    assert "image.tag: expected string, got integer" in problems
    assert "highAvailability.antiAffinity: must be one of soft, hard" in problems


def test_job_item_problems(defaults):
    """Test that list records are checked against their template."""
    problems = check_schema(
        {
            "scheduledJobs": [
                {"schedule": "0 1 * * *"},
                {"name": "vacuum", "cronSpec": "x"},
                {"name": "vacuum"},
                {"name": "Bad_Name"},
            ]
        },
        defaults,
    )

    assert "scheduledJobs[0].name: required" in problems
    assert "scheduledJobs[1].cronSpec: unknown key" in problems
    assert "scheduledJobs[2].name: duplicate name 'vacuum'" in problems
    assert any(p.startswith("scheduledJobs[3].name:") for p in problems)


def test_string_lists_checked(defaults):
    """Test that command entries must be strings."""
    problems = check_schema(
        {"scheduledJobs": [{"name": "vacuum", "command": ["vacuumdb", 3]}]},
        defaults,
    )

    assert problems == ["scheduledJobs[0].command[1]: expected string, got integer"]


def test_opaque_lists_accept_fragments(defaults):
    """Test that tolerations are passed through as-is."""
    toleration = {"key": "dedicated", "operator": "Equal", "value": "db"}
    config = resolve(defaults, {"tolerations": [toleration]})

    assert config.tolerations == (toleration,)


def test_non_mapping_overrides_rejected(defaults):
    """Test that the override root must be a mapping."""
    assert check_schema(["replicaCount"], defaults) == [
        "<root>: expected a mapping, got list"
    ]


def test_combine_overrides_later_layer_wins():
    """Test that layers fold in order with the same list rules."""
    combined = combine_overrides(
        {"replicaCount": 1, "persistence": {"claims": [{"name": "data"}]}},
        {"replicaCount": 3, "persistence": {"claims": [{"name": "wal"}]}},
        {"env": {"TZ": "UTC"}},
    )

    assert combined == {
        "replicaCount": 3,
        "persistence": {"claims": [{"name": "wal"}]},
        "env": {"TZ": "UTC"},
    }


def test_resolved_config_is_read_only(defaults):
    """Test that free-form values cannot be edited after resolution."""
    config = resolve(
        defaults,
        {
            "env": {"TZ": "UTC"},
            "scheduledJobs": [
                {"name": "vacuum", "schedule": "0 3 * * *", "env": {"A": "1"}}
            ],
        },
    )

    with pytest.raises(TypeError):
        config.env["TZ"] = "CET"
    with pytest.raises(TypeError):
        config.resources["limits"] = {}
    with pytest.raises(TypeError):
        config.scheduled_jobs[0].env["A"] = "2"
    assert config.env == {"TZ": "UTC"}
