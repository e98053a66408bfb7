"""Render command for dbchart."""

from pathlib import Path

import click
from rich.markup import escape

from dbchart.core.errors import DbchartError, RenderError, SchemaError
from dbchart.generators.manifests import to_manifests
from dbchart.render import render
from dbchart.resolver.config import combine_overrides
from dbchart.utils.output import err_console
from dbchart.utils.yaml import dump_manifests, load_values


@click.command("render")
@click.argument("instance")
@click.option(
    "--values",
    "-f",
    "values_files",
    type=click.Path(exists=True, dir_okay=False),
    multiple=True,
    help="Override values file; repeat to layer, later files win",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write manifests to this file instead of stdout",
)
def render_cmd(instance: str, values_files: tuple[str, ...], output: str | None):
    """Render the manifests for INSTANCE.

    Examples:

        # Render to stdout
        dbchart render orders -f values-orders.yaml

        # Layer a production file over the base file
        dbchart render orders -f values-orders.yaml -f prod.yaml -o orders.yaml
    """
    try:
        overrides = combine_overrides(*(load_values(path) for path in values_files))
        documents = render(instance, overrides)
    except DbchartError as exc:
        _report(exc)
        raise SystemExit(1)

    content = dump_manifests(to_manifests(documents), instance)
    if output:
        Path(output).write_text(content)
        err_console.print(
            f"[bold green]Wrote {len(documents)} document(s) to[/bold green] "
            f"[cyan]{output}[/cyan]"
        )
    else:
        click.echo(content, nl=False)


def _report(exc: DbchartError) -> None:
    """Print every problem of a failed render."""
    if isinstance(exc, SchemaError):
        err_console.print("[bold red]Invalid values:[/bold red]")
        for problem in exc.problems:
            err_console.print(f"  [red]-[/red] {escape(problem)}")
    elif isinstance(exc, RenderError):
        err_console.print("[bold red]Render aborted, no documents written:[/bold red]")
        for error in exc.errors:
            err_console.print(
                f"  [red]-[/red] [yellow]{error.code}[/yellow]: {escape(error.message)}"
            )
    else:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
