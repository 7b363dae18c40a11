"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


def get_sessionmaker(url: str | None = None, *, engine: Engine | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to ``engine`` or a freshly created one."""

    bind = engine or create_sync_engine(url, **kwargs)
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Provide a transactional scope for imperative scripts."""

    session = (factory or get_sessionmaker())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
