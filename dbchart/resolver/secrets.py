"""Credential source resolution."""

from __future__ import annotations

from dbchart.core.models import (
    CredentialSource,
    CredentialsSpec,
    ExternalSecretReference,
    InlineSecret,
)


def resolve_credentials(
    credentials: CredentialsSpec, external_secret_name: str
) -> CredentialSource | None:
    """Decide where the database credentials come from.

    An existing secret always wins; inline values are then ignored. Returns
    None when neither a secret name nor an inline password is available; the
    validator reports that as MissingPassword.
    """
    if external_secret_name:
        return ExternalSecretReference(name=external_secret_name)
    if credentials.password:
        return InlineSecret(
            password=credentials.password,
            user=credentials.user,
            database=credentials.database,
        )
    return None
