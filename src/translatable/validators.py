"""Unique-translation validation rule.

Checks that no other row already stores ``value`` for the same locale of a
translatable column. Parameters follow the familiar ``unique`` rule layout::

    [table, column?, ignore_value?, ignore_column?, extra_col, extra_val, ...]

``"null"``/``"NULL"`` in a parameter slot mean "not given". The attribute
may carry its locale as ``name.locale``; otherwise the active locale is used.

Example::

    result = validate_unique_translation("title.fr", "Bonjour", ["articles"])
    if not result.is_unique:
        print(result.message)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from translatable.config import config
from translatable.db import records_repo
from translatable.store import decode_translations, is_locale_map

_NULL_VALUES = ("null", "NULL")

_MISSING = object()


@dataclass(frozen=True)
class UniqueTranslationResult:
    """Outcome of one unique-translation check."""

    is_unique: bool
    attribute: str
    locale: str
    message: str | None = None


def _filter_null(value: Any) -> Any:
    return None if value in _NULL_VALUES else value


def _param(parameters: Sequence[Any], index: int) -> Any:
    return parameters[index] if index < len(parameters) else None


def _extra_conditions(segments: Sequence[Any]) -> dict[str, Any]:
    """Pair up ``[col, val, col, val, ...]``; a trailing column compares with NULL."""
    return {
        segments[index]: _param(segments, index + 1) for index in range(0, len(segments), 2)
    }


def validate_unique_translation(
    attribute: str,
    value: Any,
    parameters: Sequence[Any],
    *,
    locale: str | None = None,
) -> UniqueTranslationResult:
    """Check that ``value`` is not already stored for the attribute's locale.

    Args:
        attribute: ``name`` or ``name.locale``.
        value: Candidate translation.
        parameters: ``[table, column?, ignore_value?, ignore_column?, extra...]``.
        locale: Locale used when ``attribute`` carries none; defaults to the
            configured active locale.

    Raises:
        ValueError: No table was given.
        DatabaseReadError: The lookup query failed.
    """
    name, _, attribute_locale = attribute.partition(".")
    resolved_locale = attribute_locale or locale or config.locale.locale

    table = _param(parameters, 0)
    if not table:
        raise ValueError("unique_translation requires at least a table parameter.")

    column = _filter_null(_param(parameters, 1)) or name
    ignore_value = _filter_null(_param(parameters, 2))
    ignore_column = _filter_null(_param(parameters, 3))
    extra_where = _extra_conditions(list(parameters[4:]))

    if ignore_value is not None and ignore_column is None:
        ignore_column = "id"
    exclude = (ignore_column, ignore_value) if ignore_column is not None else None

    stored = records_repo.fetch_column(table, column, where=extra_where, exclude=exclude)

    is_unique = True
    for raw in stored:
        if not is_locale_map(raw):
            continue
        if decode_translations(raw).get(resolved_locale, _MISSING) == value:
            is_unique = False
            break

    message = None if is_unique else f"The {name} ({resolved_locale}) has already been taken."
    return UniqueTranslationResult(
        is_unique=is_unique,
        attribute=name,
        locale=resolved_locale,
        message=message,
    )

