"""
Deal and property store: engine factory and session helpers.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, StaticPool

from app.config import get_settings
from app.db.models import Base

logger = logging.getLogger(__name__)

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(database_url: str) -> Engine:
    """
    Create an engine suited to the backend in `database_url`.

    Hosted Postgres gets NullPool. SQLite connections are shared across
    threads, and an in-memory database is pinned to a single connection
    so every session sees the same tables.
    """
    if database_url.startswith("postgresql"):
        return create_engine(database_url, poolclass=NullPool)

    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in IN_MEMORY_URLS:
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)

    return create_engine(database_url)


engine = build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Optional[Engine] = None):
    """Create deal and property tables if missing."""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.debug(f"Tables ensured on {target.url.render_as_string(hide_password=True)}")


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Transactional session for scripts: commit on success, roll back on error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Session rolled back")
        raise
    finally:
        db.close()
