"""Introspection of the one-to-many relationship that holds translations."""

from typing import Any

from sqlalchemy import and_, inspect
from sqlalchemy.orm import RelationshipDirection

from src.translated.core.exceptions import TranslationError


class TranslationRelation:
    """
    Describes ``entity_class.<name>`` as seen by the translation layer.

    Attributes:
        name: Relationship attribute name on the entity
        model: Translation model class
        link: (entity attribute, translation attribute) pairs of the foreign key
        language_attribute: Language attribute of the translation model
        column_names: All column attributes of the translation model
    """

    def __init__(self, entity_class: type, name: str, language_attribute: str):
        mapper = inspect(entity_class)
        try:
            relationship = mapper.relationships[name]
        except KeyError:
            raise TranslationError(
                f"{entity_class.__name__} has no relationship named '{name}'"
            ) from None
        if relationship.direction is not RelationshipDirection.ONETOMANY:
            raise TranslationError(
                f"{entity_class.__name__}.{name} must be a one-to-many relationship"
            )

        target = relationship.mapper
        if language_attribute not in target.column_attrs:
            raise TranslationError(
                f"{target.class_.__name__} has no language column '{language_attribute}'"
            )

        self.name = name
        self.model = target.class_
        self.language_attribute = language_attribute
        self.primaryjoin = relationship.primaryjoin
        self.link = [
            (
                mapper.get_property_by_column(local).key,
                target.get_property_by_column(remote).key,
            )
            for local, remote in relationship.local_remote_pairs
        ]
        self.column_names = [attr.key for attr in target.column_attrs]

    @property
    def language_column(self):
        return getattr(self.model, self.language_attribute)

    @property
    def foreign_key_columns(self) -> list:
        return [getattr(self.model, child) for _, child in self.link]

    def parent_key(self, entity: Any) -> tuple:
        """Values the translation foreign key takes for ``entity``."""
        return tuple(getattr(entity, parent) for parent, _ in self.link)

    def row_key(self, row: Any) -> tuple:
        """Foreign key values held by a translation row."""
        return tuple(getattr(row, child) for _, child in self.link)

    def belongs_to(self, entity: Any):
        """WHERE clause selecting the translation rows of ``entity``."""
        return and_(
            *(getattr(self.model, child) == getattr(entity, parent) for parent, child in self.link)
        )

    def is_loaded(self, entity: Any) -> bool:
        """Whether the full relationship collection is already loaded on ``entity``."""
        return self.name not in inspect(entity).unloaded

    def __repr__(self) -> str:
        return f"TranslationRelation(name={self.name!r}, model={self.model.__name__})"
