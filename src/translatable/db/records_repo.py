"""Row-level reads and writes for translatable tables.

Tables and columns are supplied by callers (record types), so every name is
validated through ``quote_identifier`` before it reaches SQL; values are
always bound as parameters.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, NoReturn

from translatable.db.connection import connection_scope, quote_identifier
from translatable.db.errors import (
    DatabaseError,
    DatabaseOperationContext,
    DatabaseReadError,
    DatabaseWriteError,
)

logger = logging.getLogger(__name__)


def _raise_read_error(operation: str, exc: Exception, *, details: str | None = None) -> NoReturn:
    """Raise a typed repository read error while preserving chained cause."""
    if isinstance(exc, DatabaseError):
        raise exc
    logger.error(f"{operation} failed: {exc}")
    raise DatabaseReadError(
        context=DatabaseOperationContext(operation=operation, details=details),
        cause=exc,
    ) from exc


def _raise_write_error(operation: str, exc: Exception, *, details: str | None = None) -> NoReturn:
    """Raise a typed repository write error while preserving chained cause."""
    if isinstance(exc, DatabaseError):
        raise exc
    logger.error(f"{operation} failed: {exc}")
    raise DatabaseWriteError(
        context=DatabaseOperationContext(operation=operation, details=details),
        cause=exc,
    ) from exc


def _where_clause(conditions: list[tuple[str, str, Any]]) -> tuple[str, list[Any]]:
    """Build ``WHERE a = ? AND b != ?`` from ``(column, operator, value)`` triples.

    A ``None`` value compares with ``IS NULL`` / ``IS NOT NULL``.
    """
    if not conditions:
        return "", []
    parts: list[str] = []
    params: list[Any] = []
    for column, operator, value in conditions:
        quoted = quote_identifier(column)
        if value is None:
            parts.append(f"{quoted} IS NOT NULL" if operator == "!=" else f"{quoted} IS NULL")
        else:
            parts.append(f"{quoted} {operator} ?")
            params.append(value)
    return " WHERE " + " AND ".join(parts), params


def fetch_all(table: str) -> list[dict[str, Any]]:
    """Return every row of ``table`` as a dict, in rowid order.

    The whole table is loaded into memory.
    """
    quoted = quote_identifier(table)
    try:
        with connection_scope() as conn:
            rows = conn.execute(f"SELECT * FROM {quoted}").fetchall()
    except Exception as exc:
        _raise_read_error("records.fetch_all", exc, details=table)

    return [dict(row) for row in rows]


def fetch_column(
    table: str,
    column: str,
    *,
    where: Mapping[str, Any] | None = None,
    exclude: tuple[str, Any] | None = None,
) -> list[Any]:
    """Return the values of one column, optionally filtered.

    Args:
        where: ``column = value`` equality filters.
        exclude: One ``(column, value)`` pair whose matching rows are skipped.
    """
    conditions = [(name, "=", value) for name, value in (where or {}).items()]
    if exclude is not None:
        conditions.append((exclude[0], "!=", exclude[1]))

    clause, params = _where_clause(conditions)
    sql = f"SELECT {quote_identifier(column)} FROM {quote_identifier(table)}{clause}"
    try:
        with connection_scope() as conn:
            rows = conn.execute(sql, params).fetchall()
    except Exception as exc:
        _raise_read_error("records.fetch_column", exc, details=f"{table}.{column}")

    return [row[0] for row in rows]


def update_columns(table: str, key_name: str, key: Any, updates: Mapping[str, Any]) -> bool:
    """Write ``updates`` to the row whose ``key_name`` equals ``key``.

    Each call commits on its own.

    Returns:
        True when a row was updated.
    """
    if not updates:
        return False

    assignments = ", ".join(f"{quote_identifier(column)} = ?" for column in updates)
    sql = (
        f"UPDATE {quote_identifier(table)} SET {assignments} "
        f"WHERE {quote_identifier(key_name)} = ?"
    )
    try:
        with connection_scope(write=True) as conn:
            cursor = conn.execute(sql, [*updates.values(), key])
            return cursor.rowcount > 0
    except Exception as exc:
        _raise_write_error("records.update_columns", exc, details=f"{table} {key_name}={key!r}")
