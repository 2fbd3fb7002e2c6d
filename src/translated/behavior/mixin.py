"""
Mixin that makes a mapped class translated.

Usage:

    class Post(TranslatedMixin, Base):
        __tablename__ = "post"
        __translate__ = TranslateOptions(
            relation="post_langs",
            attributes={"title_lang": "title", "description": "description"},
        )

        id: Mapped[int] = mapped_column(primary_key=True)
        post_langs: Mapped[list["PostLang"]] = relationship(back_populates="post")

    post = Post(title_lang="Hello", description="First post")
    post.save(session)
"""

import logging
from functools import lru_cache
from typing import Any, ClassVar

from sqlalchemy import and_, event, inspect
from sqlalchemy.orm import Session

from src.translated.behavior.coordinator import TranslationCoordinator
from src.translated.behavior.relation import TranslationRelation
from src.translated.core.exceptions import TranslationError
from src.translated.models.options import TranslateOptions

logger = logging.getLogger(__name__)

_COORDINATOR_KEY = "_translation_coordinator"


@lru_cache(maxsize=None)
def translation_relation_for(cls: type) -> TranslationRelation:
    """Relationship description of a translated class (computed once per class)."""
    options: TranslateOptions = cls.__translate__
    relation = TranslationRelation(cls, options.relation, options.language_column)

    mapped = inspect(cls).attrs
    for alias, column in options.attributes.items():
        if alias in mapped:
            raise TranslationError(
                f"Translated attribute '{alias}' collides with a mapped attribute of {cls.__name__}"
            )
        if column not in relation.column_names:
            raise TranslationError(
                f"{relation.model.__name__} has no column '{column}' (translated as '{alias}')"
            )
    return relation


class TranslatedMixin:
    """Routes the configured attribute names to the entity's current translation."""

    __translate__: ClassVar[TranslateOptions]

    def __init__(self, **kwargs: Any):
        attributes = type(self).__translate__.attributes
        translated = {key: kwargs.pop(key) for key in list(kwargs) if key in attributes}
        language = kwargs.pop("language", None)
        super().__init__(**kwargs)
        if language is not None:
            self.language = language
        for key, value in translated.items():
            setattr(self, key, value)

    # ==================== Attribute proxying ====================

    def __getattr__(self, name: str) -> Any:
        options = getattr(type(self), "__translate__", None)
        if options is not None and name in options.attributes:
            return self.translation_coordinator.proxy.get(name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        options = getattr(type(self), "__translate__", None)
        if options is not None and name in options.attributes:
            self.translation_coordinator.proxy.set(name, value)
        else:
            super().__setattr__(name, value)

    @property
    def translation_coordinator(self) -> TranslationCoordinator:
        coordinator = self.__dict__.get(_COORDINATOR_KEY)
        if coordinator is None:
            cls = type(self)
            coordinator = TranslationCoordinator(
                self, cls.__translate__, translation_relation_for(cls)
            )
            self.__dict__[_COORDINATOR_KEY] = coordinator
        return coordinator

    # ==================== Language ====================

    @property
    def language(self) -> str:
        return self.translation_coordinator.language

    @language.setter
    def language(self, value: str) -> None:
        self.translation_coordinator.language = value

    @property
    def source_language(self) -> str:
        return self.translation_coordinator.source_language

    @source_language.setter
    def source_language(self, value: str) -> None:
        self.translation_coordinator.source_language = value

    def is_source_language(self) -> bool:
        return self.translation_coordinator.is_source_language()

    def is_translated(self) -> bool:
        """Whether the current language differs from the source and has a saved row."""
        coordinator = self.translation_coordinator
        return not coordinator.is_source_language() and coordinator.has_translate()

    # ==================== Translations ====================

    def get_translation(self, language: str | None = None) -> Any:
        return self.translation_coordinator.get_translation(language)

    def has_translate(self, language: str | None = None) -> bool:
        return self.translation_coordinator.has_translate(language)

    @property
    def has_translate_map(self) -> dict[str, dict[str, Any]]:
        return self.translation_coordinator.has_translate_map()

    @property
    def current_translate(self) -> dict[str, Any]:
        return self.translation_coordinator.current_translate()

    @property
    def translate_attributes(self) -> dict[str, str]:
        return dict(type(self).__translate__.attributes)

    @classmethod
    def get_translate_attribute_name(cls, name: str) -> str | None:
        """Translation column behind ``name``, or None if it is not translated."""
        return cls.__translate__.attributes.get(name)

    @classmethod
    def is_translated_attribute(cls, name: str) -> bool:
        return name in cls.__translate__.attributes

    def is_attribute_changed(self, name: str) -> bool:
        """Unsaved change check for translated and native attributes alike."""
        if self.is_translated_attribute(name):
            return self.translation_coordinator.proxy.is_changed(name)
        attrs = inspect(self).attrs
        if name not in attrs:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return attrs[name].history.has_changes()

    def translated_dict(self) -> dict[str, Any]:
        """Translated attribute values of the current language."""
        return self.translation_coordinator.proxy.values()

    @classmethod
    def current_translate_condition(cls, languages: list[str] | None = None):
        """
        Join condition restricted to the current and source languages.

        Examples:
            >>> select(Post).outerjoin(PostLang, Post.current_translate_condition())
        """
        relation = translation_relation_for(cls)
        if languages is None:
            languages = cls.__translate__.locale_context().languages
        return and_(relation.primaryjoin, relation.language_column.in_(languages))

    # ==================== Persistence ====================

    def save(self, session: Session) -> "TranslatedMixin":
        """Insert or update the entity, then link its current translation."""
        session.add(self)
        session.flush()
        self.translation_coordinator.after_save(session)
        return self

    def delete(self, session: Session) -> None:
        """Delete the translations, then the entity."""
        self.translation_coordinator.before_delete(session)
        session.delete(self)
        session.flush()


@event.listens_for(TranslatedMixin, "refresh", propagate=True)
def _reset_on_refresh(target: Any, context: Any, attrs: Any) -> None:
    if attrs is not None:
        # Identity-map hits of other queries and reloads of expired columns keep
        # the index; only a refresh that filled the relationship replaces it.
        state = inspect(target)
        relation = target.__translate__.relation
        if context.refresh_state is not state or relation not in attrs or relation in state.unloaded:
            return
    coordinator = target.__dict__.get(_COORDINATOR_KEY)
    if coordinator is not None:
        logger.debug("Dropping translation index of reloaded %s", type(target).__name__)
        coordinator.invalidate()
