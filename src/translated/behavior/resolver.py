"""
Pick the translation row for a language, synthesizing one when missing.

A synthesized row starts as a value copy of the source-language row (when the
index holds one) and is stored back into the index, so resolving the same
language again returns the same object. Nothing here touches the database.
"""

import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

logger = logging.getLogger(__name__)


def copy_attributes(source: Any, target: Any, names: Iterable[str]) -> None:
    """Deep-copy ``names`` from an ORM object or mapping row onto ``target``."""
    for name in names:
        if isinstance(source, Mapping):
            if name not in source:
                continue
            value = source[name]
        else:
            value = getattr(source, name, None)
        setattr(target, name, copy.deepcopy(value))


class TranslationResolver:
    """Resolves translations for one translation model class."""

    def __init__(
        self,
        factory: Callable[[], Any],
        language_attribute: str,
        column_names: Iterable[str] = (),
    ):
        """
        Args:
            factory: Creates an empty translation
            language_attribute: Language column of the translation model
            column_names: Columns copied from the source-language row
        """
        self.factory = factory
        self.language_attribute = language_attribute
        self.column_names = [name for name in column_names if name != language_attribute]

    def resolve(self, index: dict[str, Any], language: str, source_language: str) -> Any:
        """Return ``index[language]``, creating and indexing it if absent."""
        translation = index.get(language)
        if translation is not None:
            return translation

        translation = self.factory()
        source = index.get(source_language)
        if source is not None:
            copy_attributes(source, translation, self.column_names)
        setattr(translation, self.language_attribute, language)
        index[language] = translation

        logger.debug(
            "Synthesized %s translation for %s (seeded from %s: %s)",
            language,
            type(translation).__name__,
            source_language,
            source is not None,
        )
        return translation
