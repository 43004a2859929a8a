"""Translatable - locale-keyed attribute storage.

Stores every locale of a translatable attribute as one JSON object inside a
single text column, and ships a schema repair checker that migrates legacy
single-language values into that format.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from translatable.errors import NotTranslatableAttribute, TranslatableError
from translatable.events import Events, TranslationBus
from translatable.model import Model
from translatable.store import TranslationHooks, TranslationStore

try:
    __version__: str = version("translatable")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "Events",
    "Model",
    "NotTranslatableAttribute",
    "TranslatableError",
    "TranslationBus",
    "TranslationHooks",
    "TranslationStore",
    "__version__",
]
