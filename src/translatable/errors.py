"""Exceptions raised by the translatable core.

Only caller mistakes are raised from the store: referencing a translation
operation on an attribute that was never declared translatable. Malformed
stored data is not an error at this level (it decodes to an empty locale
map) and schema problems are reported by the checker rather than raised.
"""

from __future__ import annotations

from collections.abc import Iterable


class TranslatableError(RuntimeError):
    """Base exception for the translatable package."""


class NotTranslatableAttribute(TranslatableError):
    """A translation operation referenced an attribute that is not translatable.

    Attributes:
        key: The offending attribute name.
        translatable: Every attribute the record type declares translatable.
    """

    def __init__(self, key: str, translatable: Iterable[str]) -> None:
        self.key = key
        self.translatable = tuple(translatable)
        joined = ", ".join(self.translatable)
        super().__init__(
            f"Cannot translate attribute `{key}` as it's not one of the "
            f"translatable attributes: `{joined}`"
        )


class ModelResolutionError(TranslatableError):
    """A record-type identifier could not be resolved to a class."""
