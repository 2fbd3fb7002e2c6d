"""Tests for indexing translation rows by language."""

from types import SimpleNamespace

import pytest

from src.translated.behavior.index import attribute_getter, build_index
from src.translated.core.exceptions import DuplicateLanguageError, TranslationError


def row(lang_id: str, title: str = "") -> SimpleNamespace:
    return SimpleNamespace(lang_id=lang_id, title=title)


class TestBuildIndex:
    """Test build_index."""

    def test_keys_follow_input_order(self):
        """Test the index keeps the order rows were returned in."""
        rows = [row("ru"), row("en"), row("fr")]
        index = build_index(rows, attribute_getter("lang_id"))
        assert list(index) == ["ru", "en", "fr"]
        assert index["en"] is rows[1]

    def test_empty_input(self):
        """Test no rows give an empty index."""
        assert build_index([], attribute_getter("lang_id")) == {}

    def test_duplicate_language_raises_in_strict_mode(self):
        """Test a repeated language is rejected."""
        rows = [row("en", "a"), row("en", "b")]
        with pytest.raises(DuplicateLanguageError) as exc_info:
            build_index(rows, attribute_getter("lang_id"))
        assert exc_info.value.language == "en"
        assert isinstance(exc_info.value, TranslationError)

    def test_duplicate_language_last_wins_when_lenient(self, caplog):
        """Test lenient mode keeps the last row and warns."""
        rows = [row("en", "a"), row("ru"), row("en", "b")]
        index = build_index(rows, attribute_getter("lang_id"), strict=False)
        assert index["en"].title == "b"
        assert list(index) == ["en", "ru"]
        assert "Duplicate translation" in caplog.text


class TestAttributeGetter:
    """Test attribute_getter."""

    def test_reads_objects(self):
        """Test reading an attribute from an object."""
        assert attribute_getter("lang_id")(row("en")) == "en"

    def test_reads_mappings(self):
        """Test reading a key from a mapping row."""
        assert attribute_getter("lang_id")({"post_id": 1, "lang_id": "ru"}) == "ru"

    def test_missing_value_is_none(self):
        """Test a missing attribute reads as None."""
        assert attribute_getter("nope")(row("en")) is None
        assert attribute_getter("nope")({}) is None
