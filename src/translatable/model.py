"""Minimal record host for translatable attributes.

``Model`` stands in for the persistence object of an ORM: it owns a raw
attribute store and a snapshot of the values it was loaded with. It knows
nothing about translations itself; a record type opts in by declaring a
``TranslationStore`` and every attribute read/write is routed through it.

Usage::

    class Article(Model):
        table = "articles"
        translations = TranslationStore(["title", "body"])

    article = Article.from_row({"id": 1, "title": '{"en": "Hello"}'})
    article.get_attribute("title")            # "Hello"
    article.set_attribute("title", "Bonjour", locale="fr")
    article.attributes["title"]               # '{"en": "Hello", "fr": "Bonjour"}'

Saving ``attributes`` back to the table is left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from translatable.store import TranslationStore

_MISSING = object()


class Model:
    """A record with a raw attribute store and an original-value snapshot.

    Class attributes:
        table: Backing table name.
        key_name: Primary key column.
        translations: Translation behaviour, or ``None`` for plain records.
    """

    table: ClassVar[str] = ""
    key_name: ClassVar[str] = "id"
    translations: ClassVar[TranslationStore | None] = None

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self.attributes: dict[str, Any] = {}
        self.original: dict[str, Any] = {}
        self.exists = False
        self.fill({**(attributes or {}), **kwargs})

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Model:
        """Build a record from a stored row without going through translation."""
        record = cls()
        record.attributes = dict(row)
        record.sync_original()
        record.exists = True
        return record

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key_name}={self.get_key()!r})"

    # -------------------------------------------------------------------------
    # Attribute access
    # -------------------------------------------------------------------------

    def get_key(self) -> Any:
        return self.attributes.get(self.key_name)

    def get_raw_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def set_raw_attribute(self, key: str, value: Any) -> Model:
        self.attributes[key] = value
        return self

    def get_attribute(self, key: str, *, locale: str | None = None) -> Any:
        if self.translations is None:
            return self.get_raw_attribute(key)
        return self.translations.get_attribute_value(self, key, locale=locale)

    def set_attribute(self, key: str, value: Any, *, locale: str | None = None) -> Model:
        if self.translations is None:
            return self.set_raw_attribute(key, value)
        self.translations.set_attribute(self, key, value, locale=locale)
        return self

    def fill(self, attributes: Mapping[str, Any], *, locale: str | None = None) -> Model:
        for key, value in attributes.items():
            self.set_attribute(key, value, locale=locale)
        return self

    # -------------------------------------------------------------------------
    # Original snapshot
    # -------------------------------------------------------------------------

    def get_original(self, key: str | None = None, default: Any = None) -> Any:
        """Return the value ``key`` had when the record was loaded or last synced."""
        if key is None:
            return dict(self.original)
        return self.original.get(key, default)

    def sync_original(self) -> Model:
        self.original = dict(self.attributes)
        return self

    def is_dirty(self, key: str | None = None) -> bool:
        dirty = self.get_dirty()
        return bool(dirty) if key is None else key in dirty

    def get_dirty(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.attributes.items()
            if self.original.get(key, _MISSING) != value
        }

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_dict(self, *, locale: str | None = None) -> dict[str, Any]:
        """Output representation; translatable attributes resolve to one locale."""
        if self.translations is None:
            return dict(self.attributes)
        return self.translations.serialize(self, locale=locale)
