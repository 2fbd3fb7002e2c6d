"""Entity translation for SQLAlchemy models."""

from src.translated.behavior.coordinator import TranslationCoordinator
from src.translated.behavior.mixin import TranslatedMixin
from src.translated.core.exceptions import (
    DuplicateLanguageError,
    TranslationError,
    UnknownAttributeError,
)
from src.translated.core.locale import LocaleContext, PrimaryLanguageRule
from src.translated.models.options import TranslateOptions
from src.translated.models.persistence import Base, Lang, LangStatus

__all__ = [
    "Base",
    "DuplicateLanguageError",
    "Lang",
    "LangStatus",
    "LocaleContext",
    "PrimaryLanguageRule",
    "TranslateOptions",
    "TranslatedMixin",
    "TranslationCoordinator",
    "TranslationError",
    "UnknownAttributeError",
]

__version__ = "1.0.0"
