"""Credential Secret document generator."""

from __future__ import annotations

from dbchart.core.documents import Secret
from dbchart.core.models import SECRET_KEYS, CredentialSource, InlineSecret
from dbchart.resolver.names import NameSet


def generate_secret_document(
    source: CredentialSource, names: NameSet
) -> Secret | None:
    """Generate the Secret for inline credentials.

    Returns None for an existing secret; consumers bind to names.secret_name
    either way.
    """
    if not isinstance(source, InlineSecret):
        return None

    return Secret(
        name=names.secret_name,
        labels=names.labels,
        values={
            SECRET_KEYS["user"]: source.user,
            SECRET_KEYS["password"]: source.password,
            SECRET_KEYS["database"]: source.database,
        },
    )
