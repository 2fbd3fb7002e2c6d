"""
Locale handling: short language codes and the process-wide locale.

Translation rows are keyed by a short language code derived from a locale
string. PrimaryLanguageRule performs that derivation; LocaleContext carries the
pair of codes (current and source) a single entity instance resolves against.

Examples:
    >>> rule = PrimaryLanguageRule()
    >>> rule.normalize("en-US")
    'en'
    >>> PrimaryLanguageRule(str.lower).normalize("en-GB")
    'en-gb'
"""

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from src.translated.core.config import get_settings

logger = logging.getLogger(__name__)

SHORT_CODE_LENGTH = 2


class PrimaryLanguageRule:
    """Turns a locale string into the language code used as the lookup key."""

    def __init__(self, func: Callable[[str], str] | None = None):
        """
        Args:
            func: Optional override, e.g. ``str.lower`` to keep the region part.
                  Defaults to the first two characters of the locale.
        """
        self.func = func

    def normalize(self, locale: str) -> str:
        if self.func is not None:
            return self.func(locale)
        return locale[:SHORT_CODE_LENGTH]

    __call__ = normalize

    def __repr__(self) -> str:
        return f"PrimaryLanguageRule(func={self.func!r})"


class LocaleContext(BaseModel):
    """Current and source language codes for one entity instance."""

    model_config = ConfigDict(frozen=True)

    current: str = Field(..., description="Language used for reads and writes")
    source: str = Field(..., description="Language whose values seed new translations")

    @property
    def is_source(self) -> bool:
        return self.current == self.source

    @property
    def languages(self) -> list[str]:
        """Current then source language, without duplicates."""
        return list(dict.fromkeys([self.current, self.source]))

    def with_current(self, current: str) -> "LocaleContext":
        return self.model_copy(update={"current": current})

    def with_source(self, source: str) -> "LocaleContext":
        return self.model_copy(update={"source": source})


class AppLocale(BaseModel):
    """Process-wide locale strings, as configured for the running application."""

    language: str
    source_language: str

    def context(self, rule: PrimaryLanguageRule | None = None) -> LocaleContext:
        """Build a LocaleContext by normalizing both locales."""
        rule = rule or PrimaryLanguageRule()
        return LocaleContext(
            current=rule.normalize(self.language),
            source=rule.normalize(self.source_language),
        )


_app_locale: AppLocale | None = None


def get_app_locale() -> AppLocale:
    """
    Get the process-wide locale.

    Initialised from settings on first call.
    """
    global _app_locale
    if _app_locale is None:
        settings = get_settings()
        _app_locale = AppLocale(
            language=settings.locale.language,
            source_language=settings.locale.source_language,
        )
    return _app_locale


def set_app_language(locale: str) -> None:
    """Change the process-wide current locale (e.g. per request)."""
    app_locale = get_app_locale()
    app_locale.language = locale
    logger.debug("Application language set to %s", locale)


def set_app_source_language(locale: str) -> None:
    """Change the process-wide source locale."""
    app_locale = get_app_locale()
    app_locale.source_language = locale


def reset_app_locale() -> None:
    """Forget the process-wide locale so it is re-read from settings."""
    global _app_locale
    _app_locale = None
