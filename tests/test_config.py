"""Tests for translatable.config loading, overrides and helpers."""

import configparser
import logging
import textwrap
from unittest.mock import patch

import pytest

from translatable import config as config_module
from translatable.config import (
    DatabaseSettings,
    LoggingSettings,
    TranslatableConfig,
    _load_from_ini,
    _parse_fallback_value,
    _parse_optional,
    config,
    configure_logging,
    load_config,
    print_config_summary,
    reload_config,
    use_locale,
    use_test_database,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TRANSLATABLE_* variables so only the files and defaults apply."""
    for name in (
        "TRANSLATABLE_LOCALE",
        "TRANSLATABLE_FALLBACK_LOCALE",
        "TRANSLATABLE_FALLBACK_VALUE",
        "TRANSLATABLE_DB_PATH",
        "TRANSLATABLE_LOG_LEVEL",
        "TRANSLATABLE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ============================================================================
# DEFAULTS AND INI LOADING
# ============================================================================


@pytest.mark.unit
def test_defaults():
    cfg = TranslatableConfig()

    assert cfg.locale.locale == "en"
    assert cfg.locale.fallback_locale == "en"
    assert cfg.locale.fallback_value is None
    assert cfg.database.path == "data/app.db"
    assert cfg.logging.level == "INFO"
    assert cfg.logging.format == "simple"


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "  ", "none", "NULL", "null"])
def test_parse_optional_unset(value):
    assert _parse_optional(value) is None


@pytest.mark.unit
def test_parse_optional_value():
    assert _parse_optional(" fr ") == "fr"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [("0", 0), ("false", False), ('["-"]', ["-"]), ('""', ""), (" n/a ", "n/a"), ("null", None)],
)
def test_parse_fallback_value(value, expected):
    assert _parse_fallback_value(value) == expected


@pytest.mark.unit
def test_load_from_ini_sections():
    parser = configparser.ConfigParser()
    parser.read_string(
        textwrap.dedent(
            """
        [locale]
        locale = vi
        fallback_locale = none
        fallback_value = (untranslated)

        [database]
        path = /srv/app.db

        [logging]
        level = debug
        format = detailed
        """
        )
    )
    cfg = TranslatableConfig()

    _load_from_ini(parser, cfg)

    assert cfg.locale.locale == "vi"
    assert cfg.locale.fallback_locale is None
    assert cfg.locale.fallback_value == "(untranslated)"
    assert cfg.database.path == "/srv/app.db"
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.format == "detailed"


@pytest.mark.unit
def test_load_from_ini_ignores_unknown_log_format():
    parser = configparser.ConfigParser()
    parser.read_string("[logging]\nformat = fancy\n")
    cfg = TranslatableConfig()

    _load_from_ini(parser, cfg)

    assert cfg.logging.format == "simple"


@pytest.mark.unit
def test_load_config_reads_example_file(clean_env):
    clean_env.setattr(config_module, "CONFIG_FILE", config_module.CONFIG_DIR / "missing.ini")

    cfg = load_config()

    assert cfg.locale.locale == "en"
    assert cfg.locale.fallback_locale == "en"
    assert cfg.locale.fallback_value is None


@pytest.mark.unit
def test_load_config_without_files(clean_env, tmp_path):
    clean_env.setattr(config_module, "CONFIG_FILE", tmp_path / "translatable.ini")
    clean_env.setattr(config_module, "CONFIG_EXAMPLE", tmp_path / "translatable.example.ini")

    cfg = load_config()

    assert cfg == TranslatableConfig()


@pytest.mark.unit
def test_load_config_prefers_real_file(clean_env, tmp_path):
    ini = tmp_path / "translatable.ini"
    ini.write_text("[locale]\nlocale = de\n", encoding="utf-8")
    clean_env.setattr(config_module, "CONFIG_FILE", ini)

    assert load_config().locale.locale == "de"


# ============================================================================
# ENVIRONMENT OVERRIDES
# ============================================================================


@pytest.mark.unit
def test_locale_env_overrides(clean_env):
    clean_env.setenv("TRANSLATABLE_LOCALE", "fr")
    clean_env.setenv("TRANSLATABLE_FALLBACK_LOCALE", "null")
    clean_env.setenv("TRANSLATABLE_FALLBACK_VALUE", "-")

    cfg = load_config()

    assert cfg.locale.locale == "fr"
    assert cfg.locale.fallback_locale is None
    assert cfg.locale.fallback_value == "-"


@pytest.mark.unit
def test_fallback_value_env_keeps_type(clean_env):
    clean_env.setenv("TRANSLATABLE_FALLBACK_VALUE", "0")

    assert load_config().locale.fallback_value == 0


@pytest.mark.unit
def test_database_and_logging_env_overrides(clean_env):
    clean_env.setenv("TRANSLATABLE_DB_PATH", "/tmp/other.db")
    clean_env.setenv("TRANSLATABLE_LOG_LEVEL", "warning")
    clean_env.setenv("TRANSLATABLE_LOG_FORMAT", "DETAILED")

    cfg = load_config()

    assert cfg.database.path == "/tmp/other.db"
    assert cfg.logging.level == "WARNING"
    assert cfg.logging.format == "detailed"


@pytest.mark.unit
def test_reload_config_updates_singleton_in_place(clean_env):
    clean_env.setattr(config, "database", DatabaseSettings())
    clean_env.setattr(config, "logging", LoggingSettings())
    clean_env.setenv("TRANSLATABLE_LOCALE", "ja")

    refreshed = reload_config()

    assert refreshed is config
    assert config.locale.locale == "ja"


# ============================================================================
# PATHS AND HELPERS
# ============================================================================


@pytest.mark.unit
def test_database_absolute_path(tmp_path):
    assert DatabaseSettings(path=str(tmp_path / "x.db")).absolute_path == tmp_path / "x.db"
    assert DatabaseSettings(path="data/app.db").absolute_path == (
        config_module.PROJECT_ROOT / "data" / "app.db"
    )


@pytest.mark.unit
def test_use_test_database_restores_path(tmp_path):
    original = config.database.path

    with use_test_database(tmp_path / "test.db") as db_path:
        assert db_path == tmp_path / "test.db"
        assert config.database.absolute_path == tmp_path / "test.db"

    assert config.database.path == original


@pytest.mark.unit
def test_use_locale_restores_locale():
    with use_locale("fr") as locale:
        assert locale == "fr"
        assert config.locale.locale == "fr"

    assert config.locale.locale == "en"


@pytest.mark.unit
def test_print_config_summary(capsys):
    print_config_summary()

    output = capsys.readouterr().out
    assert "TRANSLATABLE CONFIGURATION" in output
    assert "Locale:          en" in output
    assert "Fallback value:  None" in output


@pytest.mark.unit
def test_configure_logging_uses_logging_section():
    cfg = TranslatableConfig(logging=LoggingSettings(level="DEBUG", format="detailed"))

    with patch("translatable.config.logging.basicConfig") as mock_basic:
        configure_logging(cfg)

    mock_basic.assert_called_once_with(
        level=logging.DEBUG,
        format=config_module.LOG_FORMATS["detailed"],
    )
