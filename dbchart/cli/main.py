"""Main CLI entry point for dbchart."""

import logging

import click
from rich.logging import RichHandler

from dbchart.cli.commands import init, render, values
from dbchart.utils.output import err_console


@click.group()
@click.version_option()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str):
    """dbchart - database deployment manifest renderer.

    Resolve layered values into the Kubernetes documents that run a
    PostgreSQL instance and its scheduled backups.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# Register commands
cli.add_command(init.init_cmd, name="init")
cli.add_command(render.render_cmd, name="render")
cli.add_command(values.values_cmd, name="values")
