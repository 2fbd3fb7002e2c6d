"""Exceptions raised by the translation layer."""


class TranslationError(Exception):
    """Base class for translation errors and misconfiguration."""


class UnknownAttributeError(TranslationError, AttributeError):
    """A name that is not declared as a translated attribute was accessed."""

    def __init__(self, name: str, owner: str | None = None):
        self.name = name
        self.owner = owner
        where = f" of {owner}" if owner else ""
        super().__init__(f"'{name}' is not a translated attribute{where}")


class DuplicateLanguageError(TranslationError):
    """Two translation rows of one entity share a language code."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Duplicate translation rows for language '{language}'")
