"""
Persistence models for SQLAlchemy ORM.

Defines:
- The declarative Base shared by library and application models
- Lang, the language reference table
"""

from enum import IntEnum
from typing import Any

from sqlalchemy import SmallInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class LangStatus(IntEnum):
    """Availability of a language."""

    DISABLED = 0
    ACTIVE = 10


class Lang(Base):
    """
    Model for languages.

    Reference data describing the languages translations can be written in.
    The short code in ``id`` is the value stored in translation language columns.
    """

    __tablename__ = "lang"

    id: Mapped[str] = mapped_column(String(2), primary_key=True)
    locale: Mapped[str] = mapped_column(String(8))
    name: Mapped[str] = mapped_column(String(32), unique=True)
    status: Mapped[int | None] = mapped_column(
        SmallInteger, default=LangStatus.ACTIVE, index=True
    )

    @property
    def is_active(self) -> bool:
        return self.status == LangStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "locale": self.locale,
            "name": self.name,
            "status": self.status,
        }

    def __repr__(self) -> str:
        """Return string representation."""
        return f"Lang(id={self.id!r}, locale={self.locale!r})"
