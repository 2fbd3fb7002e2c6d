"""
Database service for SQLAlchemy sessions.

Provides:
- Engine and session factory management
- Transaction-scoped sessions (commit on success, rollback on error)
- Table creation for the library and application models
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.translated.core.config import get_settings
from src.translated.models.persistence import Base

logger = logging.getLogger(__name__)

# Module-level singleton
_database_service: Optional["DatabaseService"] = None


def get_database_service(db_url: str | None = None) -> "DatabaseService":
    """
    Get or create the singleton DatabaseService instance.

    Args:
        db_url: Database URL. Only used on first call.

    Returns:
        DatabaseService singleton instance
    """
    global _database_service
    if _database_service is None:
        _database_service = DatabaseService(db_url=db_url)
    return _database_service


def reset_database_service() -> None:
    """Dispose and forget the singleton (useful for testing)."""
    global _database_service
    if _database_service is not None:
        _database_service.close()
    _database_service = None


class DatabaseService:
    """
    Synchronous database service.

    Translated entities are saved and deleted through sessions obtained here;
    all translation work runs inside the session's transaction.
    """

    def __init__(self, db_url: str | None = None, echo: bool | None = None):
        """
        Initialize the database service.

        Args:
            db_url: SQLAlchemy database URL. Defaults to the configured URL.
            echo: Log SQL statements. Defaults to the configured value.
        """
        settings = get_settings()
        self._db_url = db_url or settings.database.url
        self._echo = settings.database.echo if echo is None else echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    def initialize(self, create_tables: bool = True) -> None:
        """
        Initialize database connection and optionally create tables.

        Must be called before using the service.
        """
        if self._engine is not None:
            return

        self._engine = create_engine(self._db_url, echo=self._echo)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False)

        if create_tables:
            Base.metadata.create_all(self._engine)

        logger.info("Database initialized: %s", self._db_url)

    def close(self) -> None:
        """Close database connection."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection closed")

    @contextmanager
    def get_session(self) -> Generator[Session]:
        """
        Get a database session.

        Usage:
            with db.get_session() as session:
                post.save(session)
        """
        if not self._session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        with self._session_factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
