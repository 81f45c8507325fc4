"""Custom exception hierarchy for sqlweave.

All public errors inherit from SQLWeaveError so callers can catch the base
class for any sqlweave-specific failure.
"""
from __future__ import annotations

from typing import Any


class SQLWeaveError(Exception):
    """Base exception for all sqlweave errors."""


class CompositionError(SQLWeaveError):
    """Raised when a value cannot be interpolated into a Statement.

    Always raised synchronously while building or resolving a statement,
    before anything is sent to the database.

    Args:
        message: Human-readable description.
        trailing: The SQL text immediately preceding the offending
            interpolation, when relevant.
    """

    def __init__(self, message: str, trailing: str | None = None) -> None:
        super().__init__(message)
        self.trailing = trailing


class MissingClauseError(CompositionError):
    """Raised when an UPDATE or DELETE would touch every row by accident.

    Pass ``all_rows=True`` to the table method to issue the statement
    without a clause on purpose.
    """

    def __init__(self, operation: str, table: str) -> None:
        super().__init__(
            f"{operation}() on '{table}' has no clause; "
            f"pass all_rows=True to {operation.lower()} every row."
        )
        self.operation = operation
        self.table = table


class ConfigurationError(SQLWeaveError):
    """Raised when a table or connection is misconfigured for an operation.

    Detected before any query is executed, e.g. a keyed operation on a
    table without a single-column primary key.

    Args:
        message: Human-readable description.
        table: The table involved, if any.
    """

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class DriverError(SQLWeaveError):
    """Raised when the database driver fails to execute a statement.

    Args:
        message: The driver's error message.
        sql: The resolved SQL text that was sent.
        params: The positional parameters that were sent.
        code: Backend-specific error code (MySQL error number or
            PostgreSQL SQLSTATE).
    """

    def __init__(
        self,
        message: str,
        sql: str,
        params: list[Any] | None = None,
        code: str | int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.sql = sql
        self.params: list[Any] = list(params or [])
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} ({self.sql}) ({self.params!r}) [{self.code}]"

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured description suitable for logs and APIs."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "sql": self.sql,
            "params": self.params,
            "code": self.code,
        }


class DuplicateKeyError(DriverError):
    """Raised when a statement violates a primary-key or unique constraint."""
