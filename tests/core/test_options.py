"""Tests for TranslateOptions."""

import pytest
from pydantic import ValidationError

from src.translated.core.config import reload_settings
from src.translated.core.locale import set_app_language, set_app_source_language
from src.translated.models.options import TranslateOptions


class TestAttributes:
    """Test normalization of the translated attribute declaration."""

    def test_list(self):
        """Test a list maps every name to itself."""
        options = TranslateOptions(relation="post_langs", attributes=["title", "description"])
        assert options.attributes == {"title": "title", "description": "description"}

    def test_single_name(self):
        """Test a single name is accepted."""
        options = TranslateOptions(relation="post_langs", attributes="title")
        assert options.attributes == {"title": "title"}

    def test_aliases(self):
        """Test a dict keeps its aliases."""
        options = TranslateOptions(relation="post_langs", attributes={"title_lang": "title"})
        assert options.attributes == {"title_lang": "title"}

    def test_relation_required(self):
        """Test the relationship name is mandatory."""
        with pytest.raises(ValidationError):
            TranslateOptions(attributes=["title"])

    def test_frozen(self):
        """Test options cannot change after declaration."""
        options = TranslateOptions(relation="post_langs")
        with pytest.raises(ValidationError):
            options.relation = "other"


class TestSettingsFallback:
    """Test values taken from settings when not declared."""

    def test_language_column(self):
        """Test the configured language column is the default."""
        assert TranslateOptions(relation="r").language_column == "lang_id"
        assert TranslateOptions(relation="r", language_attribute="code").language_column == "code"

    def test_strict_from_settings(self, tmp_path, monkeypatch):
        """Test duplicate handling follows the settings file."""
        config = tmp_path / "settings.yaml"
        config.write_text("translate:\n  strict: false\n", encoding="utf-8")
        monkeypatch.setenv("TRANSLATED_CONFIG", str(config))
        reload_settings()

        assert TranslateOptions(relation="r").is_strict is False
        assert TranslateOptions(relation="r", strict=True).is_strict is True


class TestLocaleContext:
    """Test per-type locale defaults."""

    def test_app_locale(self):
        """Test the process-wide locale is normalized."""
        set_app_language("ru-RU")
        context = TranslateOptions(relation="r").locale_context()

        assert context.current == "ru"
        assert context.source == "en"

    def test_type_overrides(self):
        """Test declared languages win over the process-wide locale."""
        set_app_source_language("de-DE")
        options = TranslateOptions(relation="r", language="fr-FR", source_language="en-GB")
        context = options.locale_context()

        assert context.current == "fr"
        assert context.source == "en"

    def test_primary_language_rule(self):
        """Test the type's rule normalizes the locale."""
        options = TranslateOptions(relation="r", primary_language=str.lower)

        assert options.rule.normalize("en-GB") == "en-gb"
        assert options.locale_context().current == "en-us"
