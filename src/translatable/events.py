"""
Translation change notifications.

Every successful translation mutation performed by a ``TranslationStore``
emits exactly one event through a ``TranslationBus`` before the store call
returns. The bus is a plain observer: callers subscribe handlers by event
type and receive the frozen event instance.

=============================================================================
PRINCIPLES
=============================================================================

1. EVENTS RECORD FACTS
   - "translation:set" means the translation was set, not "please set it"
   - Handlers react to what already happened, they cannot veto it

2. EVENTS ARE IMMUTABLE
   - Event dataclasses are frozen; the bus stamps metadata by copying

3. EMIT IS SYNCHRONOUS
   - Handlers run inline, in registration order
   - Handler exceptions propagate to whoever triggered the mutation

=============================================================================
USAGE
=============================================================================

    from translatable.events import Events, TranslationBus

    bus = TranslationBus()

    def on_set(event):
        print(f"{event.key}[{event.locale}]: {event.old_value!r} -> {event.new_value!r}")

    unsubscribe = bus.on(Events.TRANSLATION_SET, on_set)

    store = TranslationStore(["title"], bus=bus)

    # Later: stop listening
    unsubscribe()

=============================================================================
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# A handler takes an event and returns nothing
EventHandler = Callable[["TranslationEvent"], None]

# An unsubscribe function takes no args and returns nothing
Unsubscribe = Callable[[], None]


# =============================================================================
# EVENT TYPES
# =============================================================================


class Events:
    """
    Event type constants, "domain:action" in past tense.

    Use these instead of string literals when subscribing.
    """

    TRANSLATION_SET = "translation:set"
    """
    A single locale value was written to a translatable attribute.

    Event: TranslationSet(record, key, locale, old_value, new_value)
    """

    TRANSLATION_FORGOTTEN = "translation:forgotten"
    """
    A single locale was removed from a translatable attribute.

    Event: TranslationForgotten(record, key, locale)
    """

    TRANSLATIONS_FORGOTTEN = "translations:forgotten"
    """
    Several (or all) locales were removed from a translatable attribute.

    Event: TranslationsForgotten(record, key, locales)
    """


def get_all_event_types() -> list[str]:
    """Return every event type constant declared on ``Events``."""
    return [
        value
        for name, value in vars(Events).items()
        if not name.startswith("_") and isinstance(value, str)
    ]


# =============================================================================
# EVENT METADATA
# =============================================================================


@dataclass(frozen=True)
class EventMetadata:
    """
    Metadata stamped on an event when the bus emits it.

    Attributes:
        timestamp: Unix epoch milliseconds (UTC). For display, not ordering.
        source: Name of the component that emitted the event.
        sequence: Monotonically increasing per bus. The only reliable order.
    """

    timestamp: int
    source: str
    sequence: int

    @staticmethod
    def create(source: str, sequence: int) -> EventMetadata:
        """Create metadata with the current UTC timestamp."""
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
        return EventMetadata(timestamp=now_ms, source=source, sequence=sequence)


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class TranslationEvent:
    """
    Base class for translation notifications.

    Attributes:
        record: The record whose raw attribute store was mutated.
        key: The translatable attribute name.
        meta: Stamped by the bus on emission; ``None`` before that.
    """

    type: ClassVar[str] = ""

    record: Any = field(compare=False)
    key: str
    meta: EventMetadata | None = field(default=None, kw_only=True, compare=False)

    def __str__(self) -> str:
        if self.meta:
            return f"{type(self).__name__}(key='{self.key}', seq={self.meta.sequence})"
        return f"{type(self).__name__}(key='{self.key}')"


@dataclass(frozen=True)
class TranslationSet(TranslationEvent):
    """A translation was set for one locale."""

    type: ClassVar[str] = Events.TRANSLATION_SET

    locale: str
    old_value: Any
    new_value: Any


@dataclass(frozen=True)
class TranslationForgotten(TranslationEvent):
    """A translation was removed for one locale."""

    type: ClassVar[str] = Events.TRANSLATION_FORGOTTEN

    locale: str


@dataclass(frozen=True)
class TranslationsForgotten(TranslationEvent):
    """Translations were removed for a list of locales."""

    type: ClassVar[str] = Events.TRANSLATIONS_FORGOTTEN

    locales: tuple[str, ...]


# =============================================================================
# TRANSLATION BUS
# =============================================================================


class TranslationBus:
    """
    Synchronous observer for translation events.

    Unlike a process-wide dispatcher, each bus is an ordinary object: pass
    one to a ``TranslationStore`` to isolate notifications, or rely on the
    module-level ``bus`` default.

    Key Methods:
    - emit(): Stamp and deliver an event (returns the stamped event)
    - on(): Subscribe to an event type (returns unsubscribe function)
    - once(): Subscribe for a single event only
    - get_event_log(): Retrieve recent history
    """

    def __init__(self, *, log_size: int = 1000, source: str = "store") -> None:
        # event_type -> handlers, list keeps registration order
        self._handlers: dict[str, list[EventHandler]] = {}

        # Bounded history of emitted events
        self._event_log: deque[TranslationEvent] = deque(maxlen=log_size)

        self._sequence: int = 0
        self.source = source

    # =========================================================================
    # EMIT
    # =========================================================================

    def emit(self, event: TranslationEvent, source: str | None = None) -> TranslationEvent:
        """
        Emit an event.

        When this returns:
        1. The event has been stamped with a sequence number
        2. The event has been appended to the log
        3. Every handler subscribed to its type has been called

        Args:
            event: The event to deliver. Its ``meta`` is replaced.
            source: Emitting component name. Defaults to the bus source.

        Returns:
            The stamped event instance handed to handlers.

        Raises:
            Whatever a handler raises. Delivery stops at the failing handler;
            the event stays in the log.
        """
        self._sequence += 1
        stamped = replace(event, meta=EventMetadata.create(source or self.source, self._sequence))

        self._event_log.append(stamped)

        logger.debug(f"EMIT [{self._sequence}]: {stamped.type} key={stamped.key}")

        # Copy so a handler unsubscribing itself does not skip its neighbour
        for handler in list(self._handlers.get(stamped.type, ())):
            handler(stamped)

        return stamped

    # =========================================================================
    # SUBSCRIBE
    # =========================================================================

    def on(self, event_type: str, handler: EventHandler) -> Unsubscribe:
        """
        Subscribe to an event type.

        Args:
            event_type: One of the ``Events`` constants.
            handler: Called with the stamped event.

        Returns:
            An unsubscribe function. Calling it twice is harmless.
        """
        self._handlers.setdefault(event_type, []).append(handler)

        count = len(self._handlers[event_type])
        logger.debug(f"SUBSCRIBE: '{event_type}' (total handlers: {count})")

        def unsubscribe() -> None:
            """Remove this handler from the subscription list."""
            handlers = self._handlers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)
                logger.debug(f"UNSUBSCRIBE: '{event_type}'")

        return unsubscribe

    def once(self, event_type: str, handler: EventHandler) -> Unsubscribe:
        """Subscribe to an event type for a single event only."""
        unsub: Unsubscribe | None = None

        def one_time_wrapper(event: TranslationEvent) -> None:
            try:
                handler(event)
            finally:
                if unsub is not None:
                    unsub()

        unsub = self.on(event_type, one_time_wrapper)
        return unsub

    # =========================================================================
    # EVENT LOG ACCESS
    # =========================================================================

    def get_event_log(self, limit: int | None = None) -> list[TranslationEvent]:
        """
        Get events from the log, oldest first.

        Args:
            limit: Maximum number of events to return (from the end).
                   None means return all events in the log.
        """
        if limit is not None:
            return list(self._event_log)[-limit:]
        return list(self._event_log)

    def get_sequence(self) -> int:
        """Get the last assigned sequence number."""
        return self._sequence

    def get_handler_count(self, event_type: str) -> int:
        """Get the number of handlers for an event type."""
        return len(self._handlers.get(event_type, ()))

    def clear_event_log(self) -> None:
        """Clear the event log. Sequence numbers keep increasing."""
        self._event_log.clear()
        logger.debug("Event log cleared")


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

# Used by stores constructed without an explicit bus.
bus = TranslationBus()
