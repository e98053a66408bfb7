"""Cross-cutting checks run before any document is composed."""

from __future__ import annotations

from dbchart.core.errors import (
    EmptySchedule,
    InvalidAutoscalingRange,
    InvalidReplicaRange,
    LiteralCredential,
    MissingPassword,
    PersistenceWithoutClaims,
    ReservedJobEnv,
    ValidationError,
)
from dbchart.core.models import (
    CredentialSource,
    InlineSecret,
    ResolvedConfig,
    ScheduledJobSpec,
)

# Variables that must come from the secret, never from literal job env
CREDENTIAL_ENV_NAMES = frozenset(
    {
        "PGUSER",
        "PGPASSWORD",
        "PGDATABASE",
        "POSTGRES_USER",
        "POSTGRES_PASSWORD",
        "POSTGRES_DB",
    }
)

# Connection variables every job already gets from the service
SERVICE_ENV_NAMES = frozenset({"PGHOST", "PGPORT"})


def validate(
    config: ResolvedConfig, source: CredentialSource | None
) -> list[ValidationError]:
    """Return every violated invariant. An empty list means the render may proceed."""
    errors: list[ValidationError] = []

    if source is None:
        errors.append(MissingPassword())

    if config.replica_count < 0:
        errors.append(
            InvalidReplicaRange(
                f"replicaCount must not be negative (got {config.replica_count})"
            )
        )
    elif config.stateful and config.replica_count < 1:
        errors.append(
            InvalidReplicaRange(
                f"stateful workloads need replicaCount >= 1 (got {config.replica_count})"
            )
        )

    autoscaling = config.autoscaling
    if autoscaling.enabled:
        if autoscaling.min_replicas < 1 or autoscaling.max_replicas < 1:
            errors.append(
                InvalidAutoscalingRange(
                    "autoscaling.minReplicas and autoscaling.maxReplicas must be >= 1"
                )
            )
        elif autoscaling.min_replicas > autoscaling.max_replicas:
            errors.append(
                InvalidAutoscalingRange(
                    f"autoscaling.minReplicas ({autoscaling.min_replicas}) exceeds "
                    f"autoscaling.maxReplicas ({autoscaling.max_replicas})"
                )
            )

    if config.persistence.enabled and not config.persistence.claims:
        errors.append(PersistenceWithoutClaims())

    if config.uses_default_backup and not config.backup.schedule.strip():
        errors.append(EmptySchedule("backup.schedule is empty"))

    for job in config.scheduled_jobs:
        if not job.schedule.strip():
            errors.append(EmptySchedule(f"scheduled job {job.name!r} has no schedule"))
        errors.extend(_job_credentials(job, source))

    return errors


def _job_credentials(
    job: ScheduledJobSpec, source: CredentialSource | None
) -> list[ValidationError]:
    """Check that a job reaches the database only through the bound env."""
    errors: list[ValidationError] = []
    for key in job.env:
        if key in CREDENTIAL_ENV_NAMES:
            errors.append(
                LiteralCredential(
                    f"scheduled job {job.name!r} sets {key} literally; "
                    "credentials are bound from the secret"
                )
            )
        elif key in SERVICE_ENV_NAMES:
            errors.append(
                ReservedJobEnv(
                    f"scheduled job {job.name!r} sets {key}; "
                    "it is bound to the database service"
                )
            )

    password = source.password if isinstance(source, InlineSecret) else ""
    if not password:
        return errors

    # The password may sit inside a longer value, e.g. a connection URL
    literals = [
        (f"env {key}", value)
        for key, value in job.env.items()
        if key not in CREDENTIAL_ENV_NAMES
    ]
    literals += [("command", part) for part in job.command]
    literals += [("args", part) for part in job.args]
    for where, value in literals:
        if password in str(value):
            errors.append(
                LiteralCredential(
                    f"scheduled job {job.name!r} embeds the database password "
                    f"in {where}"
                )
            )
    return errors
