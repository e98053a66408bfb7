"""Values command for dbchart."""

import click

from dbchart.core.defaults import default_values
from dbchart.utils.yaml import dump_yaml


@click.command("values")
def values_cmd():
    """Print the packaged default values."""
    click.echo(dump_yaml(default_values()), nl=False)
