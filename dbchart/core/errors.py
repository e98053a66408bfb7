"""Errors raised while resolving, validating and composing a render."""

from __future__ import annotations


class DbchartError(Exception):
    """Base class for every dbchart error."""


class SchemaError(DbchartError):
    """Malformed override shape: unknown keys, type changes, bad choices."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class ValidationError(DbchartError):
    """A resolved configuration violates a render invariant."""

    code = "validation"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))


class MissingPassword(ValidationError):
    code = "missing-password"

    def __init__(self, message: str = ""):
        super().__init__(
            message
            or "credentials.password is empty and no externalSecretName is set"
        )


class InvalidReplicaRange(ValidationError):
    code = "invalid-replica-range"


class InvalidAutoscalingRange(ValidationError):
    code = "invalid-autoscaling-range"


class PersistenceWithoutClaims(ValidationError):
    code = "persistence-without-claims"

    def __init__(self, message: str = ""):
        super().__init__(
            message or "persistence is enabled but persistence.claims is empty"
        )


class EmptySchedule(ValidationError):
    code = "empty-schedule"


class LiteralCredential(ValidationError):
    code = "literal-credential"


class ReservedJobEnv(ValidationError):
    code = "reserved-env"


class RenderError(DbchartError):
    """Validation failed; no documents were produced."""

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        summary = ", ".join(error.code for error in self.errors)
        super().__init__(f"render aborted with {len(self.errors)} error(s): {summary}")
