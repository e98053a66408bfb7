"""Display utilities for CLI output."""

from pathlib import Path

from rich.table import Table

from dbchart.core.models import InstanceOptions
from dbchart.resolver.names import NameSet
from dbchart.utils.output import console


def show_options_summary(options: InstanceOptions) -> None:
    """Display a summary of the collected options."""
    console.print()

    table = Table(title="Instance Summary", border_style="blue")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Instance", options.instance)
    table.add_row("Replicas", str(options.replicas))
    table.add_row("Storage", options.storage_size)
    if options.storage_class:
        table.add_row("Storage Class", options.storage_class)

    if options.existing_secret:
        table.add_row("Credentials", f"existing secret {options.existing_secret}")
    else:
        table.add_row("Credentials", "generated password")
        table.add_row("Database User", options.user)
        table.add_row("Database Name", options.database)

    table.add_row("High Availability", "yes" if options.high_availability else "no")
    table.add_row("Monitoring", "yes" if options.monitoring else "no")
    table.add_row("Network Policy", "yes" if options.network_policy else "no")
    if options.backup:
        table.add_row(
            "Backup",
            f"{options.backup_schedule} (keep {options.backup_retention} days)",
        )
    else:
        table.add_row("Backup", "no")

    console.print(table)


def show_next_steps(
    options: InstanceOptions, names: NameSet, values_file: Path
) -> None:
    """Display next steps after file generation."""
    step = 1

    console.print("[bold]Next steps:[/bold]")
    console.print()
    console.print(f"  {step}. Review [cyan]{values_file}[/cyan]")
    if not options.existing_secret:
        console.print(
            "     It holds a generated database password; keep it out of version control."
        )
    console.print()
    step += 1

    if options.existing_secret:
        console.print(
            f"  {step}. Create secret [cyan]{options.existing_secret}[/cyan] "
            "with keys username, password and database"
        )
        console.print()
        step += 1

    if options.backup:
        console.print(
            f"  {step}. Create the claim [cyan]{names.backup_claim}[/cyan] "
            "for backup dumps, or set backup.claimName"
        )
        console.print()
        step += 1

    console.print(f"  {step}. Render and apply:")
    console.print()
    render_cmd = (
        f"     dbchart render {options.instance} -f {values_file} \\\n"
        f"       | kubectl apply -f -"
    )
    console.print(f"[dim]{render_cmd}[/dim]")
    console.print()
