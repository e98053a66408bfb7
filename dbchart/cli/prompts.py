"""Interactive prompts for dbchart CLI."""

from rich.prompt import Confirm, IntPrompt, Prompt

from dbchart.core.models import InstanceOptions
from dbchart.utils.output import console


def collect_interactive_options(
    instance: str | None,
    replicas: int | None,
    storage_size: str | None,
    existing_secret: str | None,
) -> InstanceOptions:
    """Collect instance options interactively."""
    console.print()

    # Instance
    if instance:
        instance_name = instance
    else:
        instance_name = Prompt.ask(
            "[bold]Instance name[/bold]",
            default="main",
        )

    # Replicas
    if replicas is not None:
        replica_count = replicas
    else:
        replica_count = IntPrompt.ask(
            "[bold]Replicas[/bold]",
            default=1,
        )

    # Storage
    if storage_size:
        size = storage_size
    else:
        size = Prompt.ask(
            "[bold]Storage size per replica[/bold]",
            default="8Gi",
        )

    options = InstanceOptions(
        instance=instance_name,
        replicas=replica_count,
        storage_size=size,
    )

    options.storage_class = Prompt.ask(
        "  Storage class (empty for cluster default)",
        default="",
    )

    # Credentials
    console.print()
    console.print("[bold]Credentials:[/bold]")
    if existing_secret is not None:
        options.existing_secret = existing_secret
    elif Confirm.ask("\n  Use an existing secret for credentials?", default=False):
        options.existing_secret = Prompt.ask(
            "  Secret name (keys: username, password, database)",
        )
    if not options.existing_secret:
        options.user = Prompt.ask("  Database user", default="postgres")
        options.database = Prompt.ask("  Database name", default="postgres")

    # Features
    console.print()
    console.print("[bold]Features:[/bold]")
    options.high_availability = Confirm.ask(
        "  Spread replicas across nodes?", default=replica_count > 1
    )
    options.monitoring = Confirm.ask("  Add a metrics exporter?", default=False)
    options.network_policy = Confirm.ask(
        "  Restrict access with a network policy?", default=False
    )
    options.backup = Confirm.ask("  Schedule nightly backups?", default=True)
    if options.backup:
        options.backup_schedule = Prompt.ask(
            "  Backup schedule (cron)",
            default=options.backup_schedule,
        )
        options.backup_retention = IntPrompt.ask(
            "  Days of backups to keep",
            default=options.backup_retention,
        )

    return options
