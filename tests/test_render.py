"""
Tests for render.py - the full resolve, validate, compose pipeline.
"""

import logging

import pytest

from dbchart.core.defaults import default_values
from dbchart.core.errors import (
    MissingPassword,
    PersistenceWithoutClaims,
    RenderError,
    SchemaError,
)
from dbchart.render import render


def test_stateful_inline_scenario():
    """Test three replicas with one claim and inline credentials."""
    documents = render(
        "orders",
        {
            "statefulWorkload": True,
            "replicaCount": 3,
            "persistence": {"enabled": True, "claims": [{"name": "data", "size": "10Gi"}]},
            "credentials": {"password": "p"},
        },
    )

    assert [d.kind for d in documents] == ["StatefulSet", "Service", "Secret"]
    workload = documents[0]
    assert workload.stateful is True
    assert workload.replicas == 3
    assert len(workload.claim_templates) == 1
    assert workload.claim_templates[0]["spec"]["resources"]["requests"]["storage"] == "10Gi"


def test_missing_password_scenario():
    """Test that no password and no secret name produce no documents."""
    with pytest.raises(RenderError) as exc_info:
        render("orders", {"credentials": {"password": ""}, "externalSecretName": ""})

    assert exc_info.value.errors == [MissingPassword()]


def test_persistence_without_claims_produces_nothing():
    with pytest.raises(RenderError) as exc_info:
        render(
            "orders",
            {"credentials": {"password": "p"}, "persistence": {"enabled": True, "claims": []}},
        )

    assert exc_info.value.errors == [PersistenceWithoutClaims()]


def test_render_error_lists_every_failure():
    with pytest.raises(RenderError) as exc_info:
        render("orders", {"replicaCount": 0})

    assert [e.code for e in exc_info.value.errors] == [
        "missing-password",
        "invalid-replica-range",
    ]
    assert "missing-password" in str(exc_info.value)


def test_embedded_password_blocks_render():
    """Test that a job env value carrying the password aborts the render."""
    with pytest.raises(RenderError) as exc_info:
        render(
            "orders",
            {
                "credentials": {"password": "s3cret"},
                "scheduledJobs": [
                    {
                        "name": "sync",
                        "schedule": "0 3 * * *",
                        "env": {"DATABASE_URL": "postgres://postgres:s3cret@db/postgres"},
                    }
                ],
            },
        )

    assert [error.code for error in exc_info.value.errors] == ["literal-credential"]


def test_schema_error_before_validation():
    """Test that a malformed override aborts before validation runs."""
    with pytest.raises(SchemaError) as exc_info:
        render("orders", {"credentials": {"pass": "x"}})

    assert exc_info.value.problems == ["credentials.pass: unknown key"]


def test_invalid_instance_rejected():
    with pytest.raises(SchemaError):
        render("Orders_DB", {"credentials": {"password": "p"}})


def test_external_secret_render():
    documents = render("orders", {"externalSecretName": "orders-db-creds"})

    assert [d.kind for d in documents] == ["StatefulSet", "Service"]


def test_custom_defaults():
    """Test that a caller may supply its own default layer."""
    defaults = default_values()
    defaults["credentials"]["password"] = "from-defaults"
    defaults["replicaCount"] = 2

    documents = render("orders", {}, defaults=defaults)

    assert documents[0].replicas == 2
    assert documents[2].values["password"] == "from-defaults"


def test_render_is_idempotent():
    """Test that re-rendering the same instance yields the same documents."""
    overrides = {"credentials": {"password": "p"}, "backup": {"enabled": True}}

    assert render("orders", overrides) == render("orders", overrides)


def test_instances_do_not_share_names():
    first = render("orders", {"credentials": {"password": "p"}})
    second = render("billing", {"credentials": {"password": "p"}})

    assert {d.name for d in first}.isdisjoint({d.name for d in second})


def test_render_logs_document_count(caplog):
    with caplog.at_level(logging.INFO, logger="dbchart.render"):
        render("orders", {"credentials": {"password": "p"}})

    assert "Rendered 3 document(s) for orders" in caplog.text
