"""Keep translation rows in step with the entity's save and delete."""

import logging
from typing import Any

from sqlalchemy import delete, inspect
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from src.translated.behavior.relation import TranslationRelation
from src.translated.core.exceptions import TranslationError

logger = logging.getLogger(__name__)


class LifecycleHooks:
    """
    Links the active translation after the entity is inserted or updated and
    removes every translation before the entity is deleted.

    Database errors are not caught: a failed link fails the save.
    """

    def __init__(self, relation: TranslationRelation):
        self.relation = relation

    def link(self, session: Session, entity: Any, translation: Any) -> bool:
        """
        Point ``translation`` at ``entity`` and persist it.

        Must run after the entity is flushed so its primary key is known.

        Returns:
            True if the translation was written, False if it was already up to date
        """
        if inspect(entity).identity is None:
            raise TranslationError(
                f"{type(entity).__name__} must be flushed before its translation is linked"
            )

        for parent, child in self.relation.link:
            value = getattr(entity, parent)
            if getattr(translation, child, None) != value:
                setattr(translation, child, value)

        state = inspect(translation)
        is_new = state.transient or state.pending
        session.add(translation)
        if not is_new and not session.is_modified(translation):
            return False

        session.flush()
        logger.debug(
            "Linked %s translation %s to %s%s",
            getattr(translation, self.relation.language_attribute),
            type(translation).__name__,
            type(entity).__name__,
            self.relation.parent_key(entity),
        )
        return True

    def unlink_all(self, session: Session, entity: Any) -> int:
        """
        Delete every translation row of ``entity`` and empty the loaded relation.

        Returns:
            Number of deleted rows
        """
        deleted = 0
        if inspect(entity).identity is not None:
            result = session.execute(
                delete(self.relation.model).where(self.relation.belongs_to(entity))
            )
            deleted = result.rowcount
            logger.debug(
                "Deleted %d %s rows of %s%s",
                deleted,
                self.relation.model.__name__,
                type(entity).__name__,
                self.relation.parent_key(entity),
            )
        set_committed_value(entity, self.relation.name, [])
        return deleted
