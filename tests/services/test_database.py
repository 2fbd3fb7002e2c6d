"""Tests for the database service.

Covers:
1. Engine and session factory management
2. Transaction handling of sessions
3. Saving translated entities through the service
"""

import os
import tempfile
from collections.abc import Generator

import pytest
from sqlalchemy import inspect, select

from src.translated.services.database import (
    DatabaseService,
    get_database_service,
    reset_database_service,
)
from tests.models import Post, PostLang


@pytest.fixture
def temp_db_path() -> Generator[str]:
    """Create a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield db_path
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_service(temp_db_path: str) -> Generator[DatabaseService]:
    """Create a DatabaseService with a temporary database."""
    service = DatabaseService(db_url=f"sqlite:///{temp_db_path}")
    service.initialize()
    yield service
    service.close()


class TestDatabaseService:
    """Test DatabaseService class."""

    def test_initialize_creates_tables(self, temp_db_path: str):
        """Test that initialize creates database tables."""
        service = DatabaseService(db_url=f"sqlite:///{temp_db_path}")

        service.initialize()

        tables = inspect(service.engine).get_table_names()
        assert {"lang", "post", "post_lang"} <= set(tables)

        service.close()

    def test_close_disposes_engine(self, db_service: DatabaseService):
        """Test that close disposes the engine."""
        assert db_service.is_connected

        db_service.close()

        assert not db_service.is_connected
        with pytest.raises(RuntimeError, match="not initialized"):
            db_service.engine

    def test_session_requires_initialize(self, temp_db_path: str):
        """Test that sessions are refused before initialize."""
        service = DatabaseService(db_url=f"sqlite:///{temp_db_path}")

        with pytest.raises(RuntimeError, match="not initialized"):
            with service.get_session():
                pass

    def test_default_url_from_settings(self):
        """Test that the configured URL is used when none is given."""
        service = DatabaseService()
        assert service._db_url == "sqlite:///data/translated.db"
        assert service._echo is False


class TestSessions:
    """Test transaction handling."""

    def test_commits_on_success(self, db_service: DatabaseService):
        """Test that changes are committed when the block exits."""
        with db_service.get_session() as session:
            Post(id=1, title_lang="hello").save(session)

        with db_service.get_session() as session:
            assert session.get(PostLang, (1, "en")).title == "hello"

    def test_rolls_back_on_error(self, db_service: DatabaseService):
        """Test that an exception discards the transaction."""
        with pytest.raises(ValueError):
            with db_service.get_session() as session:
                Post(id=1, title_lang="hello").save(session)
                raise ValueError("boom")

        with db_service.get_session() as session:
            assert session.scalars(select(Post)).all() == []
            assert session.scalars(select(PostLang)).all() == []

    def test_saved_post_readable_after_commit(self, db_service: DatabaseService):
        """Test that a saved entity stays usable outside its session."""
        with db_service.get_session() as session:
            post = Post(id=1, title_lang="hello").save(session)

        assert post.title_lang == "hello"


class TestSingleton:
    """Test the module-level service."""

    def test_returns_same_instance(self):
        """Test that the singleton is shared."""
        reset_database_service()
        try:
            assert get_database_service("sqlite://") is get_database_service()
        finally:
            reset_database_service()
