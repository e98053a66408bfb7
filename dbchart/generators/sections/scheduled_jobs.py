"""Scheduled job (CronJob) document generators."""

from __future__ import annotations

from typing import Any

from dbchart.core.documents import ScheduledJob
from dbchart.core.models import ResolvedConfig, ScheduledJobSpec
from dbchart.generators.env import literal_env, secret_env
from dbchart.resolver.names import NameSet
from dbchart.utils.yaml import LiteralStr

BACKUP_JOB_NAME = "backup"
BACKUP_MOUNT_PATH = "/backups"

_BACKUP_SCRIPT = """\
set -euo pipefail
mkdir -p {mount}
dump="{mount}/${{PGDATABASE}}-$(date +%Y%m%d%H%M%S).sql.gz"
pg_dump --no-owner --no-privileges | gzip > "$dump"
find {mount} -name '*.sql.gz' -mtime +{retention} -delete
"""


def default_backup_job(config: ResolvedConfig, names: NameSet) -> ScheduledJobSpec:
    """The documented pg_dump backup, used when backup is on and no jobs are listed."""
    backup = config.backup
    script = _BACKUP_SCRIPT.format(mount=BACKUP_MOUNT_PATH, retention=backup.retention)
    return ScheduledJobSpec(
        name=BACKUP_JOB_NAME,
        schedule=backup.schedule,
        image=backup.image,
        command=("/bin/bash", "-c"),
        args=(LiteralStr(script),),
        volumes=(
            {
                "name": "backups",
                "persistentVolumeClaim": {
                    "claimName": backup.claim_name or names.backup_claim,
                },
            },
        ),
        volume_mounts=({"name": "backups", "mountPath": BACKUP_MOUNT_PATH},),
    )


def effective_jobs(config: ResolvedConfig, names: NameSet) -> list[ScheduledJobSpec]:
    """Listed jobs, or the default backup job when the list is empty."""
    if config.scheduled_jobs:
        return list(config.scheduled_jobs)
    if config.uses_default_backup:
        return [default_backup_job(config, names)]
    return []


def generate_scheduled_job_document(
    job: ScheduledJobSpec, config: ResolvedConfig, names: NameSet
) -> ScheduledJob:
    """Generate one CronJob. Credentials are bound by secret name only."""
    env: list[dict[str, Any]] = [
        {"name": "PGHOST", "value": names.service},
        {"name": "PGPORT", "value": str(config.service.port)},
        secret_env("PGUSER", "user", names.secret_name),
        secret_env("PGPASSWORD", "password", names.secret_name),
        secret_env("PGDATABASE", "database", names.secret_name),
    ]
    env.extend(literal_env(job.env))

    container: dict[str, Any] = {
        "name": job.name,
        "image": job.image or config.image.reference,
        "imagePullPolicy": config.image.pull_policy,
    }
    if job.command:
        container["command"] = list(job.command)
    if job.args:
        container["args"] = list(job.args)
    container["env"] = env
    if job.volume_mounts:
        container["volumeMounts"] = list(job.volume_mounts)

    client_key, client_value = names.client_label
    pod_labels = names.component_labels(names.job_component(job.name))
    pod_labels[client_key] = client_value

    return ScheduledJob(
        name=names.job_name(job.name),
        labels=names.labels,
        schedule=job.schedule,
        container=container,
        pod_labels=pod_labels,
        volumes=job.volumes,
        concurrency_policy=job.concurrency_policy,
        successful_history=job.successful_history,
        failed_history=job.failed_history,
        restart_policy=job.restart_policy,
        suspend=job.suspend,
    )


def generate_scheduled_job_documents(
    config: ResolvedConfig, names: NameSet
) -> list[ScheduledJob]:
    return [
        generate_scheduled_job_document(job, config, names)
        for job in effective_jobs(config, names)
    ]
