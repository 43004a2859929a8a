"""Translation store: locale-keyed values inside a single text column.

``TranslationStore`` owns the convention that a translatable attribute's raw
value is JSON text holding ``{locale: value}``. It reads and rewrites that
raw value in a record's attribute store, resolves fallbacks, applies
per-attribute casts and hooks, and emits one notification per mutation.

Caller contract
---------------
- The store is configured once per record type (declared attributes,
  casts, hooks, output exclusions) and shared by every record of that type.
- Records are passed to every call; the store keeps no per-record state.
  The locale map is decoded from raw storage on every read and re-encoded
  on every write.
- The active locale and fallback rules come from ``LocaleSettings``, either
  passed at construction or read from ``translatable.config`` at call time.
  Locale-sensitive calls also accept an explicit ``locale``.
- Persisting the mutated raw attributes is the caller's job.

Typical use
-----------
::

    store = TranslationStore(
        ["title", "published_on"],
        casts={"published_on": "date"},
        hooks={"title": TranslationHooks(get=lambda value, locale: value.strip())},
    )
    store.set_translation(article, "title", "fr", "Bonjour")
    store.get_translation(article, "title", "de")  # fallback rules apply
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from translatable import events
from translatable.casts import (
    as_json,
    cast_value,
    from_datetime,
    is_date,
    is_structured,
    normalize_cast,
)
from translatable.config import LocaleSettings, config
from translatable.errors import NotTranslatableAttribute

logger = logging.getLogger(__name__)

# (value, locale) -> value
TransformHook = Callable[[Any, str], Any]

# (record, locale, translations) -> value
FallbackHook = Callable[[Any, str, dict[str, Any]], Any]


class TranslatableRecord(Protocol):
    """What the store needs from a persisted record."""

    attributes: dict[str, Any]

    def get_raw_attribute(self, key: str) -> Any: ...

    def set_raw_attribute(self, key: str, value: Any) -> Any: ...

    def get_original(self, key: str) -> Any: ...


@dataclass(frozen=True)
class TranslationHooks:
    """Optional per-attribute hooks.

    Attributes:
        get: Applied to every locale value when translations are read
            (takes precedence over any cast).
        set: Applied to a value before it is stored (takes precedence over
            date and structured normalization).
        fallback: Replaces the configured fallback rules for this attribute
            when a requested locale is missing.
    """

    get: TransformHook | None = None
    set: TransformHook | None = None
    fallback: FallbackHook | None = None


# =============================================================================
# LOCALE MAP CODEC
# =============================================================================


def _load_json_object(raw: Any) -> dict[str, Any] | None:
    """Return the decoded mapping, or ``None`` when ``raw`` is not a JSON object."""
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, bytes | bytearray):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str):
        return None
    try:
        decoded = json.loads(raw)
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None


def decode_translations(raw: Any) -> dict[str, Any]:
    """Decode a raw stored value into a locale map.

    Absent, empty and undecodable values all yield ``{}`` so that ordinary
    attribute access degrades gracefully on legacy data.
    """
    if raw is None or raw == "":
        return {}
    return _load_json_object(raw) or {}


def encode_translations(translations: Mapping[str, Any]) -> str:
    """Encode a locale map as JSON text (non-ASCII kept unescaped)."""
    return as_json(dict(translations))


def is_locale_map(raw: Any) -> bool:
    """True when ``raw`` is, or decodes to, a mapping."""
    return _load_json_object(raw) is not None


# =============================================================================
# STORE
# =============================================================================


class TranslationStore:
    """Translation behaviour for one record type.

    Args:
        attributes: Declared translatable attribute names, in order.
        casts: Attribute -> cast name (see ``translatable.casts``).
        hooks: Attribute -> ``TranslationHooks`` (or a dict with ``get``,
            ``set`` and ``fallback`` keys).
        untranslated_in_output: Attributes left as raw values by
            ``serialize``.
        settings: Locale settings; ``None`` reads ``config.locale`` per call.
        bus: Notification bus; ``None`` uses ``translatable.events.bus``.
    """

    def __init__(
        self,
        attributes: Iterable[str],
        *,
        casts: Mapping[str, str] | None = None,
        hooks: Mapping[str, TranslationHooks | Mapping[str, Any]] | None = None,
        untranslated_in_output: Iterable[str] = (),
        settings: LocaleSettings | None = None,
        bus: events.TranslationBus | None = None,
    ) -> None:
        self._attributes: tuple[str, ...] = tuple(dict.fromkeys(attributes))

        self.casts: dict[str, str] = {}
        for key, cast in (casts or {}).items():
            self._guard(key)
            self.casts[key] = normalize_cast(cast)

        self.hooks: dict[str, TranslationHooks] = {}
        for key, hook in (hooks or {}).items():
            self._guard(key)
            if not isinstance(hook, TranslationHooks):
                hook = TranslationHooks(**hook)
            self.hooks[key] = hook

        self.untranslated_in_output = frozenset(untranslated_in_output)
        self._settings = settings
        self.bus = bus if bus is not None else events.bus

    def __repr__(self) -> str:
        return f"TranslationStore(attributes={list(self._attributes)!r})"

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    @property
    def translatable_attributes(self) -> list[str]:
        return list(self._attributes)

    @property
    def settings(self) -> LocaleSettings:
        return self._settings if self._settings is not None else config.locale

    def active_locale(self, locale: str | None = None) -> str:
        """Return ``locale`` when given, else the configured active locale."""
        return locale if isinstance(locale, str) else self.settings.locale

    def is_translatable(self, key: str) -> bool:
        return key in self._attributes

    def _guard(self, key: str) -> None:
        if not self.is_translatable(key):
            raise NotTranslatableAttribute(key, self._attributes)

    # =========================================================================
    # READ
    # =========================================================================

    def get_translations(
        self, record: TranslatableRecord, key: str | None = None, *, raw: bool = False
    ) -> dict[str, Any]:
        """Return the locale map of ``key``, or of every translatable attribute.

        With ``raw=False`` the values pass through the attribute's get hook
        or, failing that, its cast.
        """
        if key is None:
            return {attr: self.get_translations(record, attr, raw=raw) for attr in self._attributes}

        self._guard(key)
        translations = decode_translations(record.attributes.get(key))
        if raw:
            return translations

        hooks = self.hooks.get(key)
        if hooks is not None and hooks.get is not None:
            return {locale: hooks.get(value, locale) for locale, value in translations.items()}

        cast = self.casts.get(key)
        if cast is not None:
            return {locale: cast_value(cast, value) for locale, value in translations.items()}

        return translations

    def get_translation(
        self,
        record: TranslatableRecord,
        key: str,
        locale: str | None = None,
        fallback: Any = True,
        raw: bool = False,
    ) -> Any:
        """Resolve one locale's value of ``key``.

        When the locale is missing, ``fallback`` decides the result:
        a callable is invoked with ``(record, locale, translations)``,
        ``True`` runs the fallback rules, ``False``/``None`` yields ``None``
        and any other value is returned as-is.
        """
        locale = self.active_locale(locale)
        translations = self.get_translations(record, key, raw=raw)

        if locale in translations:
            return translations[locale]

        if callable(fallback):
            return fallback(record, locale, translations)
        if fallback is True:
            return self._fallback_translation(record, key, locale, translations)
        if fallback is None or isinstance(fallback, bool):
            return None
        return fallback

    # Same signature as get_translation, for read paths that say "translate".
    translate = get_translation

    def _fallback_translation(
        self, record: TranslatableRecord, key: str, locale: str, translations: dict[str, Any]
    ) -> Any:
        hooks = self.hooks.get(key)
        if hooks is not None and hooks.fallback is not None:
            return hooks.fallback(record, locale, translations)

        settings = self.settings
        if settings.fallback_locale is not None and settings.fallback_locale in translations:
            return translations[settings.fallback_locale]

        return settings.fallback_value

    def get_translated_locales(self, record: TranslatableRecord, key: str) -> list[str]:
        return list(self.get_translations(record, key, raw=True))

    def has_translation(self, record: TranslatableRecord, key: str, locale: str) -> bool:
        return locale in self.get_translations(record, key, raw=True)

    def may_have_been_translated(self, record: TranslatableRecord, key: str) -> bool:
        """True when ``key`` is translatable and its original value is a locale map."""
        return self.is_translatable(key) and is_locale_map(record.get_original(key))

    # =========================================================================
    # WRITE
    # =========================================================================

    def set_translation(
        self, record: TranslatableRecord, key: str, locale: str, value: Any
    ) -> TranslatableRecord:
        """Store ``value`` for ``locale`` and emit ``TranslationSet``."""
        self._guard(key)

        translations = self.get_translations(record, key, raw=True)
        old_value = translations.get(locale)
        if old_value is None:
            old_value = ""

        hooks = self.hooks.get(key)
        cast = self.casts.get(key)
        if hooks is not None and hooks.set is not None:
            value = hooks.set(value, locale)
        elif value and is_date(cast):
            value = from_datetime(value)
        elif is_structured(cast) and value is not None:
            value = as_json(value)

        translations[locale] = value
        record.attributes[key] = encode_translations(translations)

        logger.debug(f"Set translation {key}[{locale}] on {type(record).__name__}")
        self.bus.emit(events.TranslationSet(record, key, locale, old_value, value))

        return record

    def set_translations(
        self, record: TranslatableRecord, key: str, translations: Mapping[str, Any]
    ) -> TranslatableRecord:
        """Set each locale in order. Earlier locales stay set if a later one fails."""
        self._guard(key)

        for locale, value in translations.items():
            self.set_translation(record, key, locale, value)

        return record

    def forget_translation(
        self, record: TranslatableRecord, key: str, locale: str
    ) -> TranslatableRecord:
        """Remove one locale; an emptied map is stored as ``None``."""
        translations = self.get_translations(record, key, raw=True)
        translations.pop(locale, None)

        record.attributes[key] = encode_translations(translations) if translations else None

        logger.debug(f"Forgot translation {key}[{locale}] on {type(record).__name__}")
        self.bus.emit(events.TranslationForgotten(record, key, locale))

        return record

    def forget_translations(
        self, record: TranslatableRecord, key: str, locales: Iterable[str] | str = ()
    ) -> TranslatableRecord:
        """Remove the listed locales, or every locale when none are listed.

        The emitted event carries the requested list as given, including
        locales that were never stored. Clearing everything reports the
        locales that existed before.
        """
        translations = self.get_translations(record, key, raw=True)
        requested = [locales] if isinstance(locales, str) else list(locales)

        if not requested:
            record.attributes[key] = None
            logger.debug(f"Forgot all translations of {key} on {type(record).__name__}")
            self.bus.emit(events.TranslationsForgotten(record, key, tuple(translations)))
            return record

        for locale in requested:
            translations.pop(locale, None)

        record.attributes[key] = encode_translations(translations) if translations else None

        logger.debug(f"Forgot translations {key}{requested} on {type(record).__name__}")
        self.bus.emit(events.TranslationsForgotten(record, key, tuple(requested)))

        return record

    def forget_all_translations(self, record: TranslatableRecord, locale: str) -> TranslatableRecord:
        """Remove ``locale`` from every translatable attribute, in declaration order."""
        for key in self._attributes:
            self.forget_translation(record, key, locale)

        return record

    # =========================================================================
    # ATTRIBUTE ACCESS
    # =========================================================================

    def get_attribute_value(
        self, record: TranslatableRecord, key: str, *, locale: str | None = None
    ) -> Any:
        """Read an attribute; translatable ones resolve to a single locale value."""
        if not self.is_translatable(key):
            return record.get_raw_attribute(key)

        return self.get_translation(record, key, locale)

    def set_attribute(
        self, record: TranslatableRecord, key: str, value: Any, *, locale: str | None = None
    ) -> TranslatableRecord:
        """Write an attribute.

        A mapping written to a translatable attribute sets each of its
        locales; any other value sets only the active locale.
        """
        if not self.is_translatable(key):
            record.set_raw_attribute(key, value)
            return record

        if isinstance(value, Mapping):
            return self.set_translations(record, key, value)

        return self.set_translation(record, key, self.active_locale(locale), value)

    def serialize(
        self,
        record: TranslatableRecord,
        attributes: Mapping[str, Any] | None = None,
        *,
        locale: str | None = None,
    ) -> dict[str, Any]:
        """Return output attributes with translatable ones resolved to one locale.

        Attributes listed in ``untranslated_in_output`` keep their raw value.
        """
        output = dict(record.attributes if attributes is None else attributes)

        for key in self._attributes:
            if key in self.untranslated_in_output:
                continue
            output[key] = self.get_translation(record, key, locale)

        return output
