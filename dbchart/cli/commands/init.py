"""Init command for dbchart."""

from pathlib import Path

import click
from rich.panel import Panel
from rich.prompt import Confirm

from dbchart.cli.display import show_next_steps, show_options_summary
from dbchart.cli.prompts import collect_interactive_options
from dbchart.core.errors import SchemaError
from dbchart.core.models import InstanceOptions
from dbchart.generators.overrides import render_overrides
from dbchart.resolver.names import derive
from dbchart.utils.output import console


@click.command("init")
@click.option(
    "--instance",
    "-n",
    help="Instance name (e.g., orders)",
)
@click.option(
    "--replicas",
    "-r",
    type=click.IntRange(min=1),
    help="Number of database replicas",
)
@click.option(
    "--storage-size",
    "-s",
    help="Storage per replica (e.g., 20Gi)",
)
@click.option(
    "--existing-secret",
    help="Existing secret holding username/password/database",
)
@click.option(
    "--backup/--no-backup",
    default=False,
    help="Schedule the pg_dump backup job (non-interactive mode)",
)
@click.option(
    "--schedule",
    default="0 2 * * *",
    show_default=True,
    help="Backup cron schedule (non-interactive mode)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    default="output",
    help="Output directory for generated files",
)
@click.option(
    "--interactive/--no-interactive",
    "-i/-I",
    default=True,
    help="Run in interactive mode",
)
def init_cmd(
    instance: str | None,
    replicas: int | None,
    storage_size: str | None,
    existing_secret: str | None,
    backup: bool,
    schedule: str,
    output: str,
    interactive: bool,
):
    """Initialize the values file for a new database instance.

    Generates values-<instance>.yaml, with a random password unless an
    existing secret is named.

    Examples:

        # Interactive mode (default)
        dbchart init

        # Non-interactive mode
        dbchart init --instance orders --replicas 3 --storage-size 20Gi --backup --no-interactive

        # Output to specific directory
        dbchart init -o ./deploy
    """
    console.print(
        Panel.fit(
            "[bold blue]Database Instance Configuration[/bold blue]\n"
            "Generate override values for dbchart render",
            border_style="blue",
        )
    )

    # Collect options
    if interactive:
        options = collect_interactive_options(
            instance, replicas, storage_size, existing_secret
        )
    else:
        if not instance:
            raise click.UsageError("--instance is required in non-interactive mode")
        options = InstanceOptions(
            instance=instance,
            replicas=replicas or 1,
            storage_size=storage_size or "8Gi",
            existing_secret=existing_secret or "",
            backup=backup,
            backup_schedule=schedule,
        )

    try:
        names = derive(options.instance)
    except SchemaError as exc:
        raise click.BadParameter(exc.problems[0], param_hint="--instance")

    # Show summary
    show_options_summary(options)

    if interactive and not Confirm.ask(
        "\n[bold]Generate values with these options?[/bold]"
    ):
        console.print("[yellow]Aborted.[/yellow]")
        return

    # Generate file
    output_path = Path(output)
    output_path.mkdir(parents=True, exist_ok=True)

    values_file = output_path / f"values-{options.instance}.yaml"
    values_file.write_text(render_overrides(options))

    console.print()
    console.print("[bold green]Values generated successfully![/bold green]")
    console.print()
    console.print(f"  [cyan]{values_file}[/cyan]")
    console.print()

    show_next_steps(options, names, values_file)
