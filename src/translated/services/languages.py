"""Lookups over the language reference table."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.translated.core.locale import PrimaryLanguageRule
from src.translated.models.persistence import Lang, LangStatus

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = {"id": "en", "locale": "en-US", "name": "ENG", "status": LangStatus.ACTIVE}


def list_active(session: Session) -> list[Lang]:
    """Active languages ordered by code."""
    result = session.scalars(
        select(Lang).where(Lang.status == LangStatus.ACTIVE).order_by(Lang.id)
    )
    return list(result.all())


def get_by_code(session: Session, code: str) -> Lang | None:
    return session.get(Lang, code)


def get_by_locale(
    session: Session, locale: str, rule: PrimaryLanguageRule | None = None
) -> Lang | None:
    """
    Find the language for a locale string.

    Matches the locale column first, then the short code derived by ``rule``.
    """
    lang = session.scalars(select(Lang).where(Lang.locale == locale)).first()
    if lang is not None:
        return lang
    rule = rule or PrimaryLanguageRule()
    return session.get(Lang, rule.normalize(locale))


def ensure_default_language(session: Session) -> Lang:
    """Insert the default English row if the table has no entry for it."""
    lang = session.get(Lang, DEFAULT_LANGUAGE["id"])
    if lang is None:
        lang = Lang(**DEFAULT_LANGUAGE)
        session.add(lang)
        session.flush()
        logger.info("Inserted default language %s", lang.id)
    return lang
