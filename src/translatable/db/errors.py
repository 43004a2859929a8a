"""Typed database exceptions for the DB package.

Repository modules wrap SQLite failures in this small hierarchy so callers
(the checker, the CLI) handle one set of exception types regardless of the
underlying driver error.

Design intent:
    - Domain outcomes like "table missing" stay ordinary return values.
    - Infrastructure failures raise typed exceptions carrying the operation
      name for logs and CLI messages.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DatabaseOperationContext:
    """Structured operation metadata carried by repository exceptions.

    Attributes:
        operation: Stable operation identifier (for example
            ``"records.fetch_all"``).
        details: Optional human-readable context for logs and debugging.
    """

    operation: str
    details: str | None = None


class DatabaseError(RuntimeError):
    """Base exception for DB-layer failures."""


class DatabaseOperationError(DatabaseError):
    """Base exception for repository operation failures.

    Args:
        context: Structured operation metadata.
        cause: Optional underlying exception.
    """

    def __init__(
        self,
        *,
        context: DatabaseOperationContext,
        cause: Exception | None = None,
    ) -> None:
        message = context.operation
        if context.details:
            message = f"{message}: {context.details}"
        super().__init__(message)
        self.context = context
        self.cause = cause


class DatabaseReadError(DatabaseOperationError):
    """Repository read/query failure."""


class DatabaseWriteError(DatabaseOperationError):
    """Repository mutation failure."""


class UnsafeIdentifierError(ValueError):
    """A table or column name is not a plain SQL identifier."""
