"""Resolve record-type identifiers given on the command line."""

from __future__ import annotations

import importlib

from translatable.errors import ModelResolutionError


def resolve_model_class(identifier: str) -> type:
    """Import and return the class named by ``identifier``.

    Accepts ``package.module:ClassName`` and ``package.module.ClassName``.

    Raises:
        ModelResolutionError: The module cannot be imported, the attribute is
            missing, or it is not a class.
    """
    identifier = identifier.strip()
    if ":" in identifier:
        module_name, _, attr_path = identifier.partition(":")
    else:
        module_name, _, attr_path = identifier.rpartition(".")

    if not module_name or not attr_path:
        raise ModelResolutionError(f'Class "{identifier}" not found')

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ModelResolutionError(f'Class "{identifier}" not found') from exc

    target: object = module
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ModelResolutionError(f'Class "{identifier}" not found') from exc

    if not isinstance(target, type):
        raise ModelResolutionError(f'"{identifier}" is not a class')

    return target
