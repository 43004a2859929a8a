"""Schema inspection for translatable backing tables.

Only what the repair checker needs: does a table exist, and what storage
type does each of its columns declare.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from translatable.db.connection import connection_scope, quote_identifier
from translatable.db.errors import DatabaseError, DatabaseOperationContext, DatabaseReadError

# Declared types able to hold an unbounded JSON document.
WIDE_TEXT_TYPES = frozenset({"text", "mediumtext", "longtext", "clob"})

_BASE_TYPE_RE = re.compile(r"^\s*(\w+)")


@dataclass(slots=True)
class ColumnInfo:
    """One column as declared in the table definition.

    Attributes:
        name: Column name.
        declared_type: Type text exactly as declared (``VARCHAR(255)``);
            empty when the column was declared without a type.
    """

    name: str
    declared_type: str

    @property
    def base_type(self) -> str:
        """Lower-case type name without size or modifiers (``varchar``)."""
        match = _BASE_TYPE_RE.match(self.declared_type or "")
        return match.group(1).lower() if match else ""

    @property
    def is_wide_text(self) -> bool:
        return self.base_type in WIDE_TEXT_TYPES


def table_exists(table: str) -> bool:
    """Return True when ``table`` exists in the configured database."""
    try:
        with connection_scope() as conn:
            row = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? LIMIT 1",
                (table,),
            ).fetchone()
            return row is not None
    except DatabaseError:
        raise
    except Exception as exc:
        raise DatabaseReadError(
            context=DatabaseOperationContext(operation="inspection.table_exists", details=table),
            cause=exc,
        ) from exc


def get_columns(table: str) -> list[ColumnInfo]:
    """Return the columns of ``table`` in declaration order."""
    quoted = quote_identifier(table)
    try:
        with connection_scope() as conn:
            rows = conn.execute(f"PRAGMA table_info({quoted})").fetchall()
    except Exception as exc:
        raise DatabaseReadError(
            context=DatabaseOperationContext(operation="inspection.get_columns", details=table),
            cause=exc,
        ) from exc

    return [ColumnInfo(name=row["name"], declared_type=row["type"] or "") for row in rows]
