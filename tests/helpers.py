"""Small SQLite helpers for seeding and reading test databases."""

import sqlite3
from pathlib import Path
from typing import Any


def execute_sql(db_path: Path, sql: str, params: tuple = ()) -> None:
    """Run one statement against ``db_path`` and commit."""
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute(sql, params)
        conn.commit()
    finally:
        conn.close()


def insert_rows(db_path: Path, table: str, rows: list[dict[str, Any]]) -> None:
    """Insert dict rows into ``table``."""
    conn = sqlite3.connect(str(db_path))
    try:
        for row in rows:
            columns = ", ".join(row)
            placeholders = ", ".join("?" for _ in row)
            conn.execute(
                f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", tuple(row.values())
            )
        conn.commit()
    finally:
        conn.close()


def read_rows(db_path: Path, table: str) -> list[dict[str, Any]]:
    """Read every row of ``table`` ordered by id."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        return [dict(row) for row in conn.execute(f"SELECT * FROM {table} ORDER BY id")]
    finally:
        conn.close()
