"""
Tests for the dbchart CLI commands.
"""

import yaml
from click.testing import CliRunner

from dbchart.cli.main import cli


def _write(path, data):
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_values_prints_defaults():
    result = CliRunner().invoke(cli, ["values"])

    assert result.exit_code == 0
    assert yaml.safe_load(result.output)["replicaCount"] == 1


def test_render_to_stdout(tmp_path):
    values = _write(tmp_path / "values.yaml", {"credentials": {"password": "p"}})

    result = CliRunner().invoke(cli, ["render", "orders", "-f", values])

    assert result.exit_code == 0
    kinds = [doc["kind"] for doc in yaml.safe_load_all(result.output) if doc]
    assert kinds == ["StatefulSet", "Service", "Secret"]


def test_render_layers_values_files(tmp_path):
    """Test that later -f files override earlier ones."""
    base = _write(tmp_path / "base.yaml", {"credentials": {"password": "p"}})
    prod = _write(tmp_path / "prod.yaml", {"replicaCount": 3, "backup": {"enabled": True}})
    out = tmp_path / "orders.yaml"

    result = CliRunner().invoke(
        cli, ["render", "orders", "-f", base, "-f", prod, "-o", str(out)]
    )

    assert result.exit_code == 0
    docs = [doc for doc in yaml.safe_load_all(out.read_text()) if doc]
    assert docs[0]["spec"]["replicas"] == 3
    assert docs[-1]["kind"] == "CronJob"


def test_render_reports_validation_errors(tmp_path):
    """Test that a failed render exits 1 and writes no documents."""
    values = _write(tmp_path / "values.yaml", {"persistence": {"claims": []}})
    out = tmp_path / "orders.yaml"

    result = CliRunner().invoke(cli, ["render", "orders", "-f", values, "-o", str(out)])

    assert result.exit_code == 1
    assert "missing-password" in result.output
    assert "persistence-without-claims" in result.output
    assert not out.exists()


def test_render_reports_schema_errors(tmp_path):
    values = _write(tmp_path / "values.yaml", {"replicas": 3})

    result = CliRunner().invoke(cli, ["render", "orders", "-f", values])

    assert result.exit_code == 1
    assert "unknown key" in result.output


def test_init_non_interactive(tmp_path):
    """Test that init writes a values file that renders."""
    result = CliRunner().invoke(
        cli,
        [
            "init",
            "--no-interactive",
            "--instance",
            "orders",
            "--replicas",
            "3",
            "--storage-size",
            "20Gi",
            "--backup",
            "-o",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0
    values_file = tmp_path / "values-orders.yaml"
    values = yaml.safe_load(values_file.read_text())
    assert values["replicaCount"] == 3
    assert values["persistence"]["claims"][0]["size"] == "20Gi"
    assert values["backup"]["enabled"] is True
    assert len(values["credentials"]["password"]) == 48

    rendered = CliRunner().invoke(cli, ["render", "orders", "-f", str(values_file)])
    assert rendered.exit_code == 0


def test_init_existing_secret(tmp_path):
    result = CliRunner().invoke(
        cli,
        [
            "init",
            "-I",
            "-n",
            "orders",
            "--existing-secret",
            "orders-db-creds",
            "-o",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0
    values = yaml.safe_load((tmp_path / "values-orders.yaml").read_text())
    assert values["externalSecretName"] == "orders-db-creds"
    assert "credentials" not in values


def test_init_requires_instance(tmp_path):
    result = CliRunner().invoke(cli, ["init", "--no-interactive", "-o", str(tmp_path)])

    assert result.exit_code == 2
    assert "--instance is required" in result.output


def test_init_rejects_invalid_instance(tmp_path):
    result = CliRunner().invoke(
        cli, ["init", "--no-interactive", "--instance", "Orders_DB", "-o", str(tmp_path)]
    )

    assert result.exit_code == 2
    assert not (tmp_path / "values-Orders_DB.yaml").exists()
