"""Tests for record-type resolution (translatable/registry.py)."""

import pytest

from translatable.errors import ModelResolutionError
from translatable.registry import resolve_model_class
from tests.models import Article


@pytest.mark.unit
@pytest.mark.parametrize(
    "identifier", ["tests.models:Article", "tests.models.Article", " tests.models:Article "]
)
def test_resolves_class(identifier):
    assert resolve_model_class(identifier) is Article


@pytest.mark.unit
@pytest.mark.parametrize(
    "identifier",
    ["Article", "tests.models:Missing", "tests.nowhere:Article", "tests.models:", ":Article"],
)
def test_not_found(identifier):
    with pytest.raises(ModelResolutionError, match="not found"):
        resolve_model_class(identifier)


@pytest.mark.unit
def test_not_a_class():
    with pytest.raises(ModelResolutionError, match='"tests.models:not_a_class" is not a class'):
        resolve_model_class("tests.models:not_a_class")
