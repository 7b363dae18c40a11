"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from payroll_contrib.db.session import get_sessionmaker
from payroll_contrib.repositories.store import SqlAlchemyContributionStore


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Build the session factory on first use rather than at import time."""

    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_store(session: Session = Depends(get_db_session)) -> SqlAlchemyContributionStore:
    """Return the store handle injected into calculation and upload routes."""

    return SqlAlchemyContributionStore(session)
