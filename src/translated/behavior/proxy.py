"""Expose translation columns as attributes of the owning entity."""

from collections.abc import Callable
from typing import Any

from sqlalchemy import inspect

from src.translated.core.exceptions import UnknownAttributeError


class AttributeProxy:
    """
    Reads and writes a fixed set of attribute names on whatever translation
    ``resolve()`` currently returns.

    Examples:
        >>> proxy = AttributeProxy({"title_lang": "title"}, coordinator.get_translation)
        >>> proxy.set("title_lang", "Hello")
        >>> proxy.get("title_lang")
        'Hello'
    """

    def __init__(
        self,
        attributes: dict[str, str],
        resolve: Callable[[], Any],
        owner: str | None = None,
    ):
        """
        Args:
            attributes: Alias on the entity -> column of the translation
            resolve: Returns the translation for the current language
            owner: Entity type name used in error messages
        """
        self.attributes = dict(attributes)
        self.resolve = resolve
        self.owner = owner

    def has(self, name: str) -> bool:
        return name in self.attributes

    def attribute_name(self, name: str) -> str | None:
        """Translation column behind alias ``name``, or None if not translated."""
        return self.attributes.get(name)

    def _column(self, name: str) -> str:
        try:
            return self.attributes[name]
        except KeyError:
            raise UnknownAttributeError(name, self.owner) from None

    def get(self, name: str) -> Any:
        column = self._column(name)
        return getattr(self.resolve(), column, None)

    def set(self, name: str, value: Any) -> None:
        column = self._column(name)
        setattr(self.resolve(), column, value)

    def is_changed(self, name: str) -> bool:
        """Whether the current translation holds an unsaved change of ``name``."""
        column = self._column(name)
        state = inspect(self.resolve())
        return state.attrs[column].history.has_changes()

    def values(self) -> dict[str, Any]:
        """Alias -> value for the current translation."""
        translation = self.resolve()
        return {alias: getattr(translation, column, None) for alias, column in self.attributes.items()}
