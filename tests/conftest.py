"""
Pytest configuration and shared fixtures.
"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session

from src.translated.core.config import reset_settings
from src.translated.core.locale import reset_app_locale
from src.translated.models.persistence import Base, Lang, LangStatus
from tests.models import Page, Post, PostLang, Status, StatusLang  # noqa: F401


@pytest.fixture(autouse=True)
def app_locale(monkeypatch):
    """Start every test from the default en-US locale."""
    monkeypatch.delenv("TRANSLATED_CONFIG", raising=False)
    reset_settings()
    reset_app_locale()
    yield
    reset_app_locale()
    reset_settings()


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Session bound to the in-memory engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded(session):
    """
    Reference data: two posts, the first one translated into Russian.

    The session is emptied afterwards so every test loads fresh instances.
    """
    session.add_all([
        Lang(id="en", locale="en-US", name="ENG", status=LangStatus.ACTIVE),
        Lang(id="ru", locale="ru-RU", name="RUS", status=LangStatus.ACTIVE),
        Lang(id="fr", locale="fr-FR", name="FRA", status=LangStatus.DISABLED),
        Status(id=1),
        Status(id=2),
    ])
    session.flush()
    session.add_all([
        StatusLang(status_id=1, lang_id="en", title="published"),
        StatusLang(status_id=1, lang_id="ru", title="опубликовано"),
        StatusLang(status_id=2, lang_id="en", title="draft"),
        Post(id=1, status_id=1),
        Post(id=2, status_id=2),
    ])
    session.flush()
    session.add_all([
        PostLang(
            post_id=1,
            lang_id="en",
            title="title of the first post",
            description="description of the first post",
            tags=["first"],
        ),
        PostLang(
            post_id=1,
            lang_id="ru",
            title="заголовок первой страницы",
            description="описание первого поста",
        ),
        PostLang(
            post_id=2,
            lang_id="en",
            title="title of the second post",
            description="description of the second post",
        ),
    ])
    session.commit()
    session.expunge_all()
    return session


class QueryCounter:
    """Records SQL statements sent to the database."""

    def __init__(self):
        self.statements: list[str] = []

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture
def queries(engine):
    """Count statements executed on the engine."""
    counter = QueryCounter()

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        counter.statements.append(statement)

    event.listen(engine, "before_cursor_execute", before_cursor_execute)
    yield counter
    event.remove(engine, "before_cursor_execute", before_cursor_execute)
