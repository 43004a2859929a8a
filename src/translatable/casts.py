"""Per-attribute translation casts.

A cast converts one locale's value on its way out of (``cast_value``) and
into (``to_storage``) the locale map. Three families exist:

- scalar:     ``int``/``integer``, ``float``/``real``/``double``,
              ``str``/``string``, ``bool``/``boolean``
- structured: ``array``, ``json``, ``object``, ``dict``, ``list``,
              ``collection`` (stored as nested JSON text)
- date-like:  ``date``, ``datetime``, ``timestamp`` (stored as
              ``YYYY-MM-DD HH:MM:SS`` text)
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time
from typing import Any

logger = logging.getLogger(__name__)

DATE_STORAGE_FORMAT = "%Y-%m-%d %H:%M:%S"

INT_CASTS = frozenset({"int", "integer"})
FLOAT_CASTS = frozenset({"float", "real", "double"})
STRING_CASTS = frozenset({"str", "string"})
BOOL_CASTS = frozenset({"bool", "boolean"})
STRUCTURED_CASTS = frozenset({"array", "json", "object", "dict", "list", "collection"})
DATE_CASTS = frozenset({"date", "datetime", "timestamp"})

SCALAR_CASTS = INT_CASTS | FLOAT_CASTS | STRING_CASTS | BOOL_CASTS
KNOWN_CASTS = SCALAR_CASTS | STRUCTURED_CASTS | DATE_CASTS


def normalize_cast(cast: str) -> str:
    """Return the canonical lower-case cast name, rejecting unknown casts."""
    name = cast.strip().lower()
    if name not in KNOWN_CASTS:
        raise ValueError(f"Unknown translation cast '{cast}'.")
    return name


def is_structured(cast: str | None) -> bool:
    return cast in STRUCTURED_CASTS


def is_date(cast: str | None) -> bool:
    return cast in DATE_CASTS


def as_json(value: Any) -> str:
    """Encode a value as JSON text, keeping non-ASCII characters unescaped."""
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return from_datetime(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def as_datetime(value: Any) -> datetime:
    """Interpret a stored or user-supplied value as a ``datetime``.

    Accepts ``datetime``, ``date`` (midnight), epoch numbers, numeric strings,
    ``YYYY-MM-DD`` and ISO-8601 / ``YYYY-MM-DD HH:MM:SS`` strings.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, bool):
        raise ValueError(f"Cannot interpret {value!r} as a date.")
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text))
        return datetime.fromisoformat(text)
    raise ValueError(f"Cannot interpret {value!r} as a date.")


def from_datetime(value: Any) -> str:
    """Normalize a date-like value to its stored text representation."""
    return as_datetime(value).strftime(DATE_STORAGE_FORMAT)


def cast_value(cast: str, value: Any) -> Any:
    """Decode one stored locale value according to ``cast``.

    ``None`` always stays ``None``. A stored value the cast cannot convert
    also reads as ``None`` so that legacy data never breaks attribute access.
    """
    if cast not in KNOWN_CASTS:
        raise ValueError(f"Unknown translation cast '{cast}'.")
    if value is None:
        return None

    try:
        return _convert(cast, value)
    except (ValueError, TypeError, OverflowError) as exc:
        logger.debug(f"Cannot cast {value!r} to {cast}: {exc}")
        return None


def _convert(cast: str, value: Any) -> Any:
    if cast in INT_CASTS:
        return int(value)
    if cast in FLOAT_CASTS:
        return float(value)
    if cast in STRING_CASTS:
        return str(value)
    if cast in BOOL_CASTS:
        return bool(value)
    if cast in STRUCTURED_CASTS:
        if isinstance(value, str):
            return json.loads(value)
        return value
    if cast == "date":
        return as_datetime(value).date()
    if cast == "datetime":
        return as_datetime(value)
    return int(as_datetime(value).timestamp())
