"""
Translatable configuration management.

This module handles loading and accessing configuration from multiple sources
with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/translatable.ini) - for static deployments
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The
TranslatableConfig dataclass provides typed access to all settings.

The configuration is only a *default source*. A ``TranslationStore`` can be
handed its own ``LocaleSettings`` and every locale-sensitive call accepts an
explicit ``locale=`` keyword, so nothing in the core requires this module's
singleton to be populated.

Usage:
    from translatable.config import config

    print(config.locale.locale)
    print(config.locale.fallback_locale)
    print(config.database.absolute_path)

Environment Variable Mapping:
    TRANSLATABLE_LOCALE           -> locale.locale
    TRANSLATABLE_FALLBACK_LOCALE  -> locale.fallback_locale
    TRANSLATABLE_FALLBACK_VALUE   -> locale.fallback_value
    TRANSLATABLE_DB_PATH          -> database.path
    TRANSLATABLE_LOG_LEVEL        -> logging.level
    TRANSLATABLE_LOG_FORMAT       -> logging.format
"""

import configparser
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/, data/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Config file paths
CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "translatable.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "translatable.example.ini"

# Values that mean "not configured" for optional string settings
_UNSET_VALUES = ("", "none", "null")

LOG_FORMATS = {
    "simple": "%(levelname)s %(name)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
}


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class LocaleSettings:
    """
    Locale resolution settings.

    Attributes:
        locale: Active locale used when a caller does not pass one.
        fallback_locale: Locale consulted when the requested locale has no
            stored translation. ``None`` disables the fallback locale step.
        fallback_value: Final default returned when the fallback locale has
            no translation either. Read from INI or environment as JSON
            when it parses, otherwise as plain text.
    """

    locale: str = "en"
    fallback_locale: str | None = "en"
    fallback_value: Any = None


@dataclass
class DatabaseSettings:
    """Database configuration."""

    path: str = "data/app.db"

    @property
    def absolute_path(self) -> Path:
        """Get absolute path to database file."""
        p = Path(self.path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed"] = "simple"


@dataclass
class TranslatableConfig:
    """
    Complete configuration.

    Aggregates all settings sections. Access via the module-level `config`
    singleton.
    """

    locale: LocaleSettings = field(default_factory=LocaleSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_optional(value: str) -> str | None:
    """Parse an optional string setting; blank, ``none`` and ``null`` mean unset."""
    stripped = value.strip()
    if stripped.lower() in _UNSET_VALUES:
        return None
    return stripped


def _parse_fallback_value(value: str) -> Any:
    """Parse the fallback default as JSON, keeping plain text as a string."""
    stripped = _parse_optional(value)
    if stripped is None:
        return None
    try:
        return json.loads(stripped)
    except ValueError:
        return stripped


def _load_from_ini(parser: configparser.ConfigParser, cfg: TranslatableConfig) -> None:
    """Load configuration from parsed INI file into TranslatableConfig."""
    # Locale section
    if parser.has_section("locale"):
        if parser.has_option("locale", "locale"):
            cfg.locale.locale = parser.get("locale", "locale").strip()
        if parser.has_option("locale", "fallback_locale"):
            cfg.locale.fallback_locale = _parse_optional(parser.get("locale", "fallback_locale"))
        if parser.has_option("locale", "fallback_value"):
            raw_fallback = parser.get("locale", "fallback_value")
            cfg.locale.fallback_value = _parse_fallback_value(raw_fallback)

    # Database section
    if parser.has_section("database"):
        if parser.has_option("database", "path"):
            cfg.database.path = parser.get("database", "path")

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in LOG_FORMATS:
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: TranslatableConfig) -> None:
    """Apply environment variable overrides (highest priority)."""
    # Locale settings
    if env_locale := os.getenv("TRANSLATABLE_LOCALE"):
        cfg.locale.locale = env_locale
    if (env_fallback_locale := os.getenv("TRANSLATABLE_FALLBACK_LOCALE")) is not None:
        cfg.locale.fallback_locale = _parse_optional(env_fallback_locale)
    if (env_fallback_value := os.getenv("TRANSLATABLE_FALLBACK_VALUE")) is not None:
        cfg.locale.fallback_value = _parse_fallback_value(env_fallback_value)

    # Database settings
    if env_db := os.getenv("TRANSLATABLE_DB_PATH"):
        cfg.database.path = env_db

    # Logging settings
    if env_log := os.getenv("TRANSLATABLE_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()
    if env_log_format := os.getenv("TRANSLATABLE_LOG_FORMAT"):
        if env_log_format.lower() in LOG_FORMATS:
            cfg.logging.format = env_log_format.lower()  # type: ignore[assignment]


def load_config() -> TranslatableConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. config/translatable.ini
        3. config/translatable.example.ini (fallback for development)
        4. Built-in defaults

    Returns:
        TranslatableConfig: Fully populated configuration object.
    """
    cfg = TranslatableConfig()

    # Determine which config file to use
    config_file = None
    if CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        config_file = CONFIG_EXAMPLE

    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "TranslatableConfig":
    """
    Reload configuration from disk and environment.

    Updates the module-level `config` singleton in place so that modules
    holding a reference to it observe the new values.

    Returns:
        TranslatableConfig: The refreshed configuration.
    """
    fresh = load_config()
    config.locale = fresh.locale
    config.database = fresh.database
    config.logging = fresh.logging
    return config


def configure_logging(cfg: TranslatableConfig | None = None) -> None:
    """Configure the root logger from the logging section.

    Only entry points (the CLI) call this; library modules just create
    module-level loggers.
    """
    settings = (cfg or config).logging
    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        format=LOG_FORMATS.get(settings.format, LOG_FORMATS["simple"]),
    )


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

# Load configuration once at module import time
config = load_config()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_config_status() -> dict:
    """
    Get configuration status for diagnostics.

    Returns a dictionary with configuration source information.
    """
    return {
        "config_file_exists": CONFIG_FILE.exists(),
        "config_file_path": str(CONFIG_FILE),
        "using_example": not CONFIG_FILE.exists() and CONFIG_EXAMPLE.exists(),
        "locale": config.locale.locale,
        "fallback_locale": config.locale.fallback_locale,
        "fallback_value": config.locale.fallback_value,
    }


def print_config_summary() -> None:
    """Print a summary of current configuration to stdout."""
    status = get_config_status()
    print("\n" + "=" * 60)
    print("TRANSLATABLE CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    if status["using_example"]:
        print("WARNING: Using example config (copy to translatable.ini to customise)")
    print("-" * 60)
    print(f"Locale:          {status['locale']}")
    print(f"Fallback locale: {status['fallback_locale']}")
    print(f"Fallback value:  {status['fallback_value']!r}")
    print(f"Database:        {config.database.absolute_path}")
    print(f"Log level:       {config.logging.level}")
    print("=" * 60 + "\n")


# =============================================================================
# TEST HELPERS
# =============================================================================


class use_test_database:
    """
    Context manager for using a temporary test database.

    Usage:
        from translatable.config import use_test_database

        def test_something(tmp_path):
            with use_test_database(tmp_path / "test.db"):
                ...

    Args:
        db_path: Path to the test database file
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self.original_path: str | None = None

    def __enter__(self) -> Path:
        """Set up test database path."""
        self.original_path = config.database.path
        config.database.path = str(self.db_path)
        return self.db_path

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Restore original database path."""
        if self.original_path is not None:
            config.database.path = self.original_path
        return None


class use_locale:
    """
    Context manager that temporarily switches the configured active locale.

    Args:
        locale: Locale to activate for the duration of the block.
    """

    def __init__(self, locale: str):
        self.locale = locale
        self.original_locale: str | None = None

    def __enter__(self) -> str:
        self.original_locale = config.locale.locale
        config.locale.locale = self.locale
        return self.locale

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.original_locale is not None:
            config.locale.locale = self.original_locale
        return None
