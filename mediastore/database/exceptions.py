"""Exceptions raised by the mediastore database layer.

Driver errors (DB-API ``Error`` subclasses) are never wrapped; callers
classify them through the dialect predicates instead.
"""


class DatabaseError(Exception):
    """Base class for database layer errors."""


class MissingParameterError(DatabaseError):
    """A required connection parameter or driver is missing."""

    def __init__(self, parameter: str, message: str | None = None) -> None:
        self.parameter = parameter
        super().__init__(message or f"Missing connection parameter: {parameter}")


class StatementClosedError(DatabaseError):
    """An operation was attempted on a closed prepared statement."""
