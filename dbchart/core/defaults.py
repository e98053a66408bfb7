"""Packaged default values for the database chart."""

import copy
from typing import Any

CHART_NAME = "postgresql"

# Defaults completing each entry of persistence.claims
CLAIM_DEFAULTS: dict[str, Any] = {
    "name": "",
    "size": "8Gi",
    # Uses cluster default StorageClass when set to "".
    "storageClass": "",
    "accessModes": ["ReadWriteOnce"],
    # Empty: the first claim mounts at persistence.mountPath,
    # the others at /var/lib/postgresql/<name>
    "mountPath": "",
}

# Defaults completing each entry of scheduledJobs
SCHEDULED_JOB_DEFAULTS: dict[str, Any] = {
    "name": "",
    "schedule": "",
    # Empty: runs the database image
    "image": "",
    "command": [],
    "args": [],
    "env": {},
    "volumes": [],
    "volumeMounts": [],
    "concurrencyPolicy": "Forbid",
    "successfulJobsHistoryLimit": 3,
    "failedJobsHistoryLimit": 1,
    "restartPolicy": "OnFailure",
    "suspend": False,
}

DEFAULT_VALUES: dict[str, Any] = {
    "statefulWorkload": True,
    # Advisory only when autoscaling is enabled
    "replicaCount": 1,
    "image": {
        "registry": "docker.io",
        "repository": "library/postgres",
        "tag": "16.4",
        "pullPolicy": "IfNotPresent",
    },
    "containerPort": 5432,
    "service": {
        "type": "ClusterIP",
        "port": 5432,
        "annotations": {},
    },
    "resources": {
        "requests": {
            "cpu": "250m",
            "memory": "256Mi",
        },
        "limits": {
            "cpu": "1000m",
            "memory": "1Gi",
        },
    },
    "persistence": {
        "enabled": True,
        "mountPath": "/var/lib/postgresql/data",
        "claims": [
            {
                "name": "data",
                "size": "8Gi",
                "storageClass": "",
                "accessModes": ["ReadWriteOnce"],
                "mountPath": "",
            }
        ],
    },
    # Leave password empty when using externalSecretName
    "credentials": {
        "user": "postgres",
        "password": "",
        "database": "postgres",
    },
    # Existing secret with username/password/database keys
    "externalSecretName": "",
    # Non-secret settings, exposed to the database container from a ConfigMap
    "config": {},
    "env": {},
    "podAnnotations": {},
    "nodeSelector": {},
    "tolerations": [],
    "autoscaling": {
        "enabled": False,
        "minReplicas": 1,
        "maxReplicas": 3,
        "targetCPUUtilizationPercentage": 80,
        "targetMemoryUtilizationPercentage": 0,
    },
    "networkPolicy": {
        "enabled": False,
        "allowExternal": False,
        "allowedLabels": {},
    },
    "podDisruptionBudget": {
        "enabled": False,
        "minAvailable": 1,
    },
    "highAvailability": {
        "enabled": False,
        "antiAffinity": "soft",
        "topologyKey": "kubernetes.io/hostname",
        "maxSkew": 1,
    },
    "monitoring": {
        "enabled": False,
        "port": 9187,
        "image": "quay.io/prometheuscommunity/postgres-exporter:v0.15.0",
    },
    "backup": {
        "enabled": False,
        "schedule": "0 2 * * *",
        # Days of dumps to keep
        "retention": 7,
        # Existing claim for dumps; defaults to <base>-backups
        "claimName": "",
        "image": "",
    },
    "scheduledJobs": [],
}


def default_values() -> dict[str, Any]:
    """Return a private copy of the packaged defaults."""
    return copy.deepcopy(DEFAULT_VALUES)
