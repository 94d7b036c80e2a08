"""Exceptions raised by esconn."""

from collections.abc import Iterable


class EsconnError(Exception):
    """Base class for all esconn errors."""


class ConstraintGraphError(EsconnError):
    """Raised when the constraint graph is inconsistent with the field catalog.

    This is a programming defect, detected once when the graph is built.
    """


class ConnectionConfigError(EsconnError, ValueError):
    """Raised for malformed user-supplied connection configuration."""


class ConnectionValidationError(ConnectionConfigError):
    """Raised when a connection configuration violates the effective model.

    Attributes:
        issues: Human-readable issue messages, one per violated rule
        field_names: Sorted names of every field involved in an issue
    """

    def __init__(self, issues: Iterable[str], field_names: Iterable[str]):
        self.issues = list(issues)
        self.field_names = sorted(set(field_names))
        super().__init__(
            "Invalid connection configuration:\n" + "\n".join(f"  - {i}" for i in self.issues)
        )
