"""
Per-instance translation state of a translated entity.

The coordinator owns the language index of one entity instance and wires the
attribute proxy, the resolver and the lifecycle hooks to it. The index is
built on first use from the best source available:

1. rows handed over by a batch prefetch (``populate``)
2. the full relationship collection, when it is already loaded
3. a query for the current and source language rows

Languages the index already covers are never queried again. A language outside
the covered set (for instance after switching ``language``) is fetched once and
merged in. The index is dropped when the entity is reloaded.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session, object_session
from sqlalchemy.orm.exc import DetachedInstanceError

from src.translated.behavior.hooks import LifecycleHooks
from src.translated.behavior.index import attribute_getter, build_index
from src.translated.behavior.proxy import AttributeProxy
from src.translated.behavior.relation import TranslationRelation
from src.translated.behavior.resolver import TranslationResolver
from src.translated.core.locale import LocaleContext
from src.translated.models.options import TranslateOptions

logger = logging.getLogger(__name__)


class TranslationCoordinator:
    """Translation state and operations for one entity instance."""

    def __init__(
        self,
        entity: Any,
        options: TranslateOptions,
        relation: TranslationRelation,
        locale: LocaleContext | None = None,
    ):
        self.entity = entity
        self.options = options
        self.relation = relation
        self.locale = locale or options.locale_context()

        self.resolver = TranslationResolver(
            factory=relation.model,
            language_attribute=relation.language_attribute,
            column_names=relation.column_names,
        )
        self.proxy = AttributeProxy(
            options.attributes,
            resolve=self.get_translation,
            owner=type(entity).__name__,
        )
        self.hooks = LifecycleHooks(relation)

        self._language_of = attribute_getter(relation.language_attribute)
        self._index: dict[str, Any] | None = None
        self._covered: set[str] = set()
        self._complete = False
        self._has_translate: dict[str, dict[str, Any]] | None = None

    # ==================== Locale ====================

    @property
    def language(self) -> str:
        return self.locale.current

    @language.setter
    def language(self, value: str) -> None:
        self.locale = self.locale.with_current(self.options.rule.normalize(value))

    @property
    def source_language(self) -> str:
        return self.locale.source

    @source_language.setter
    def source_language(self, value: str) -> None:
        self.locale = self.locale.with_source(self.options.rule.normalize(value))

    def is_source_language(self) -> bool:
        return self.locale.is_source

    # ==================== Index ====================

    @property
    def is_populated(self) -> bool:
        return self._index is not None

    def _has_identity(self) -> bool:
        state = inspect(self.entity)
        if state.identity is None:
            return False
        # Loads expired columns now, so a pending refresh cannot reset the
        # index half way through building it.
        self.relation.parent_key(self.entity)
        return True

    def _session(self) -> Session:
        session = object_session(self.entity)
        if session is None:
            raise DetachedInstanceError(
                f"{type(self.entity).__name__} is not bound to a Session; "
                "translations cannot be loaded"
            )
        return session

    def _merge(self, rows: Iterable[Any]) -> None:
        fetched = build_index(rows, self._language_of, strict=self.options.is_strict)
        for language, row in fetched.items():
            self._index.setdefault(language, row)

    def translations(self) -> dict[str, Any]:
        """The language index, built from what is already in memory."""
        has_identity = self._has_identity()
        if self._index is None:
            self._index = {}
            self._covered = set()
            self._complete = False
            if not has_identity:
                self._complete = True
            elif self.relation.is_loaded(self.entity):
                self._merge(getattr(self.entity, self.relation.name))
                self._complete = True
            logger.debug(
                "Translation index of %s started (complete: %s)",
                type(self.entity).__name__,
                self._complete,
            )
        return self._index

    def _ensure(self, languages: Iterable[str]) -> dict[str, Any]:
        index = self.translations()
        if self._complete:
            return index

        missing = [language for language in dict.fromkeys(languages) if language not in self._covered]
        if missing and self._has_translate is not None:
            absent = [language for language in missing if language not in self._has_translate]
            self._covered.update(absent)
            missing = [language for language in missing if language not in absent]
        if not missing:
            return index

        rows = self._session().scalars(
            select(self.relation.model)
            .where(
                self.relation.belongs_to(self.entity),
                self.relation.language_column.in_(missing),
            )
            .order_by(self.relation.language_column)
        ).all()
        self._merge(rows)
        self._covered.update(missing)
        logger.debug(
            "Fetched %d %s rows for languages %s",
            len(rows),
            self.relation.model.__name__,
            missing,
        )
        return index

    def populate(self, rows: Iterable[Any], languages: Iterable[str] | None = None) -> None:
        """
        Seed the index with prefetched rows.

        Args:
            rows: Translation rows of this entity
            languages: Languages the rows are complete for; None means all
        """
        if self._index is None:
            self._index = {}
            self._covered = set()
            self._complete = False
        self._merge(rows)
        if languages is None:
            self._complete = True
        else:
            self._covered.update(languages)

    def invalidate(self) -> None:
        """Forget every cached row; the next access rebuilds the index."""
        self._index = None
        self._covered = set()
        self._complete = False
        self._has_translate = None

    # ==================== Resolution ====================

    def get_translation(self, language: str | None = None) -> Any:
        """Translation for ``language`` (default: current), created in memory if missing."""
        language = language or self.locale.current
        index = self._ensure([language, self.locale.source])
        return self.resolver.resolve(index, language, self.locale.source)

    def current_translate(self) -> dict[str, Any]:
        """Rows of the current and source languages, keyed by language."""
        languages = self.locale.languages
        index = self._ensure(languages)
        return {language: row for language, row in index.items() if language in languages}

    # ==================== Existence ====================

    def has_translate_map(self) -> dict[str, dict[str, Any]]:
        """Persisted languages of the entity as foreign key + language rows."""
        has_identity = self._has_identity()
        if self._has_translate is None:
            if not has_identity:
                self._has_translate = {}
            else:
                columns = [
                    getattr(self.relation.model, child).label(child)
                    for _, child in self.relation.link
                ]
                columns.append(self.relation.language_column.label(self.relation.language_attribute))
                rows = self._session().execute(
                    select(*columns)
                    .where(self.relation.belongs_to(self.entity))
                    .order_by(self.relation.language_column)
                ).mappings()
                self.populate_has_translate(dict(row) for row in rows)
        return self._has_translate

    def populate_has_translate(self, rows: Iterable[dict[str, Any]]) -> None:
        self._has_translate = build_index(rows, self._language_of, strict=self.options.is_strict)

    def has_translate(self, language: str | None = None) -> bool:
        language = language or self.locale.current
        return language in self.has_translate_map()

    # ==================== Lifecycle ====================

    def after_save(self, session: Session) -> Any:
        """Link the current translation to the freshly saved entity."""
        translation = self.get_translation()
        self.hooks.link(session, self.entity, translation)

        if self.relation.is_loaded(self.entity):
            collection = getattr(self.entity, self.relation.name)
            if translation not in collection:
                collection.append(translation)

        if self._has_translate is not None:
            language = self._language_of(translation)
            row = {child: getattr(translation, child) for _, child in self.relation.link}
            row[self.relation.language_attribute] = language
            self._has_translate.setdefault(language, row)
        return translation

    def before_delete(self, session: Session) -> int:
        """Delete all translation rows ahead of the entity row."""
        deleted = self.hooks.unlink_all(session, self.entity)
        self._index = {}
        self._covered = set()
        self._complete = True
        self._has_translate = {}
        return deleted
