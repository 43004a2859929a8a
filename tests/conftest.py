"""
Shared pytest fixtures for the translatable test suite.

This module provides fixtures that are automatically available to all test files:
- Temporary SQLite databases wired in through ``use_test_database``
- Seeded ``articles`` / ``narrow_articles`` tables for checker tests
- A fresh ``TranslationBus`` per test
- Deterministic locale settings regardless of the developer's environment
"""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from translatable.config import LocaleSettings, config, use_test_database
from translatable.events import TranslationBus
from translatable.model import Model
from translatable.store import TranslationStore
from tests.helpers import execute_sql

# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def default_locale_settings(monkeypatch) -> LocaleSettings:
    """
    Pin the configured locale settings to the built-in defaults.

    Stores built without explicit settings read ``config.locale`` per call,
    so every test starts from ``en`` / fallback ``en`` / fallback value None.
    """
    settings = LocaleSettings()
    monkeypatch.setattr(config, "locale", settings)
    return settings


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Point the configuration at a fresh database file for one test.

    Yields:
        Path to the (not yet created) database file
    """
    db_path = tmp_path / "test_translatable.db"
    with use_test_database(db_path):
        yield db_path


@pytest.fixture
def articles_db(temp_db_path: Path) -> Path:
    """
    Create an empty ``articles`` table with wide-text translatable columns.

    Columns: id, title TEXT, body LONGTEXT, slug VARCHAR(255).
    """
    execute_sql(
        temp_db_path,
        "CREATE TABLE articles ("
        "id INTEGER PRIMARY KEY, title TEXT, body LONGTEXT, slug VARCHAR(255))",
    )
    return temp_db_path


@pytest.fixture
def narrow_articles_db(temp_db_path: Path) -> Path:
    """Create ``narrow_articles`` where ``title`` is VARCHAR(255)."""
    execute_sql(
        temp_db_path,
        "CREATE TABLE narrow_articles (id INTEGER PRIMARY KEY, title VARCHAR(255), summary TEXT)",
    )
    return temp_db_path


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def bus() -> TranslationBus:
    """Provide a fresh, isolated bus instance."""
    return TranslationBus()


@pytest.fixture
def make_record(bus: TranslationBus):
    """
    Factory for ad-hoc record types sharing the fixture bus.

    Usage:
        record = make_record(["title"], casts={"title": "int"}, row={"title": '{"en": "1"}'})
    """

    def _make(attributes: list[str], *, row: dict[str, Any] | None = None, **store_kwargs):
        store_kwargs.setdefault("bus", bus)

        class Record(Model):
            table = "records"
            translations = TranslationStore(attributes, **store_kwargs)

        return Record.from_row(row or {})

    return _make
