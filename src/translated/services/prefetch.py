"""
Batch loading of translations for lists of entities.

Loading a page of entities and then touching a translated attribute on each
would issue one query per entity. These helpers fetch the rows for the whole
list at once and hand them to every instance's coordinator:

    posts = session.scalars(select(Post)).all()
    prefetch_current_translate(session, posts)
    titles = [post.title_lang for post in posts]  # no further queries

Loading the full relationship with ``selectinload(Post.post_langs)`` needs no
helper: the coordinator indexes an already loaded collection directly.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import inspect, or_, select
from sqlalchemy.orm import Session

from src.translated.behavior.mixin import TranslatedMixin, translation_relation_for
from src.translated.behavior.relation import TranslationRelation

logger = logging.getLogger(__name__)


def _persisted(entities: Sequence[TranslatedMixin]) -> tuple[type | None, list[TranslatedMixin]]:
    persisted = [entity for entity in entities if inspect(entity).identity is not None]
    if not persisted:
        return None, []
    cls = type(persisted[0])
    if any(type(entity) is not cls for entity in persisted):
        raise ValueError("Entities to prefetch must all be of the same class")
    return cls, persisted


def _belongs_to_any(relation: TranslationRelation, entities: list[TranslatedMixin]):
    if len(relation.link) == 1:
        column = relation.foreign_key_columns[0]
        return column.in_({relation.parent_key(entity)[0] for entity in entities})
    return or_(*(relation.belongs_to(entity) for entity in entities))


def prefetch_current_translate(
    session: Session, entities: Sequence[TranslatedMixin]
) -> int:
    """
    Load the current and source language rows of all ``entities`` in one query.

    Each entity keeps its own current/source languages; the query covers the
    union of them.

    Returns:
        Number of translation rows fetched
    """
    cls, persisted = _persisted(entities)
    if cls is None:
        return 0

    relation = translation_relation_for(cls)
    languages = [entity.translation_coordinator.locale.languages for entity in persisted]
    all_languages = sorted({language for langs in languages for language in langs})

    rows = session.scalars(
        select(relation.model)
        .where(
            _belongs_to_any(relation, persisted),
            relation.language_column.in_(all_languages),
        )
        .order_by(relation.language_column)
    ).all()

    grouped: dict[tuple, list[Any]] = defaultdict(list)
    for row in rows:
        grouped[relation.row_key(row)].append(row)

    for entity, wanted in zip(persisted, languages):
        own = [
            row
            for row in grouped.get(relation.parent_key(entity), [])
            if getattr(row, relation.language_attribute) in wanted
        ]
        entity.translation_coordinator.populate(own, wanted)

    logger.debug(
        "Prefetched %d %s rows for %d %s entities",
        len(rows),
        relation.model.__name__,
        len(persisted),
        cls.__name__,
    )
    return len(rows)


def prefetch_has_translate(session: Session, entities: Sequence[TranslatedMixin]) -> int:
    """
    Load the existing languages of all ``entities`` in one projection query.

    Only the foreign key and language columns are read.

    Returns:
        Number of projection rows fetched
    """
    cls, persisted = _persisted(entities)
    if cls is None:
        return 0

    relation = translation_relation_for(cls)
    columns = [getattr(relation.model, child).label(child) for _, child in relation.link]
    columns.append(relation.language_column.label(relation.language_attribute))

    rows = [
        dict(row)
        for row in session.execute(
            select(*columns)
            .where(_belongs_to_any(relation, persisted))
            .order_by(relation.language_column)
        ).mappings()
    ]

    grouped: dict[tuple, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        grouped[tuple(row[child] for _, child in relation.link)].append(row)

    for entity in persisted:
        entity.translation_coordinator.populate_has_translate(
            grouped.get(relation.parent_key(entity), [])
        )

    logger.debug("Prefetched %d existing languages for %d entities", len(rows), len(persisted))
    return len(rows)
