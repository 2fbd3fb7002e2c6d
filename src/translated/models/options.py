"""
Per-entity-type translation options.

Declared once on a translated model class:

    class Post(TranslatedMixin, Base):
        __translate__ = TranslateOptions(
            relation="post_langs",
            attributes={"title_lang": "title", "description": "description"},
        )
"""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.translated.core.config import get_settings
from src.translated.core.locale import LocaleContext, PrimaryLanguageRule, get_app_locale


class TranslateOptions(BaseModel):
    """
    Static configuration of a translated entity type.

    Attributes:
        relation: Name of the one-to-many relationship holding the translations
        attributes: Translated attribute names. A list maps each name to the
            translation column of the same name; a dict maps an alias exposed on
            the entity to the underlying translation column.
        language_attribute: Language column of the translation model
        language: Fixed current language for this type (normalized)
        source_language: Fixed source language for this type (normalized)
        primary_language: Locale -> language code override
        strict: Fail on duplicate language rows instead of keeping the last one
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    relation: str = Field(..., description="Translations relationship name")
    attributes: dict[str, str] = Field(default_factory=dict)
    language_attribute: str | None = Field(default=None)
    language: str | None = Field(default=None)
    source_language: str | None = Field(default=None)
    primary_language: Callable[[str], str] | None = Field(default=None)
    strict: bool | None = Field(default=None)

    @field_validator("attributes", mode="before")
    @classmethod
    def normalize_attributes(cls, v):
        if isinstance(v, str):
            return {v: v}
        if isinstance(v, dict):
            return dict(v)
        if isinstance(v, (list, tuple)):
            return {name: name for name in v}
        return v

    @property
    def rule(self) -> PrimaryLanguageRule:
        return PrimaryLanguageRule(self.primary_language)

    @property
    def language_column(self) -> str:
        return self.language_attribute or get_settings().translate.language_attribute

    @property
    def is_strict(self) -> bool:
        if self.strict is None:
            return get_settings().translate.strict
        return self.strict

    def locale_context(self) -> LocaleContext:
        """Defaults for a new instance: app locale, then the type's own overrides."""
        rule = self.rule
        context = get_app_locale().context(rule)
        if self.language is not None:
            context = context.with_current(rule.normalize(self.language))
        if self.source_language is not None:
            context = context.with_source(rule.normalize(self.source_language))
        return context
