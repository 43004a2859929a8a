"""Tests for the Model record host (translatable/model.py)."""

import pytest

from tests.models import Article, PlainRecord


class TestConstruction:
    """Building records."""

    @pytest.mark.unit
    def test_from_row_is_raw(self):
        article = Article.from_row({"id": 1, "title": "legacy"})

        assert article.attributes == {"id": 1, "title": "legacy"}
        assert article.exists is True
        assert article.get_key() == 1

    @pytest.mark.unit
    def test_new_record(self):
        article = Article({"title": "Hello"}, id=3)

        assert article.exists is False
        assert article.get_key() == 3
        assert article.get_raw_attribute("title") == '{"en": "Hello"}'
        assert article.get_original() == {}

    @pytest.mark.unit
    def test_repr(self):
        assert repr(Article.from_row({"id": 5})) == "Article(id=5)"


class TestOriginalSnapshot:
    """Original values and dirty tracking."""

    @pytest.mark.unit
    def test_from_row_syncs_original(self):
        article = Article.from_row({"id": 1, "title": '{"en": "Hello"}'})

        assert article.get_original("title") == '{"en": "Hello"}'
        assert article.is_dirty() is False

    @pytest.mark.unit
    def test_writes_mark_dirty(self):
        article = Article.from_row({"id": 1, "title": '{"en": "Hello"}', "slug": "hello"})

        article.set_attribute("title", "Bonjour", locale="fr")

        assert article.is_dirty("title") is True
        assert article.is_dirty("slug") is False
        assert article.get_dirty() == {"title": '{"en": "Hello", "fr": "Bonjour"}'}
        assert article.get_original("title") == '{"en": "Hello"}'

    @pytest.mark.unit
    def test_sync_original(self):
        article = Article.from_row({"id": 1})
        article.set_attribute("title", "Hello")

        article.sync_original()

        assert article.is_dirty() is False
        assert article.translations.may_have_been_translated(article, "title") is True

    @pytest.mark.unit
    def test_get_original_default(self):
        assert Article.from_row({"id": 1}).get_original("title", "none") == "none"


class TestPlainRecord:
    """Records without a translation store."""

    @pytest.mark.unit
    def test_attributes_are_raw(self):
        record = PlainRecord(title={"en": "Hello"})

        assert record.get_attribute("title") == {"en": "Hello"}
        assert record.to_dict() == {"title": {"en": "Hello"}}

    @pytest.mark.unit
    def test_set_raw_attribute_chains(self):
        record = PlainRecord()

        assert record.set_raw_attribute("title", "x") is record
        assert record.set_attribute("slug", "y") is record
        assert record.attributes == {"title": "x", "slug": "y"}
