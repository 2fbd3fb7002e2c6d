"""Index translation rows by language."""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from src.translated.core.exceptions import DuplicateLanguageError

logger = logging.getLogger(__name__)


def attribute_getter(name: str) -> Callable[[Any], Any]:
    """Read ``name`` from an ORM object or from a mapping row."""

    def getter(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(name)
        return getattr(row, name, None)

    return getter


def build_index(
    children: Iterable[Any],
    language_key_of: Callable[[Any], str],
    strict: bool = True,
) -> dict[str, Any]:
    """
    Map language code -> translation row, keeping input order.

    Args:
        children: Translation rows of one entity
        language_key_of: Returns the language code of a row
        strict: Raise on a repeated language; otherwise the last row wins

    Raises:
        DuplicateLanguageError: strict mode and two rows share a language
    """
    index: dict[str, Any] = {}
    for child in children:
        language = language_key_of(child)
        if language in index:
            if strict:
                raise DuplicateLanguageError(language)
            logger.warning("Duplicate translation for language %s, keeping the last row", language)
        index[language] = child
    return index
