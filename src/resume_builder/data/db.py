"""Engine, sessions and schema bootstrap for the resume store.

``DB_URL`` selects the database; without it a ``resumes.db`` SQLite file
next to the project root is used. The engine is built on first use and
creates any missing tables at that point, so callers never run migrations
for a fresh database.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

DEFAULT_DB_FILENAME = "resumes.db"


class Base(DeclarativeBase):
    """Declarative base shared by users, resumes and payments."""


_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_database_url() -> str:
    env_url = os.getenv("DB_URL")
    if env_url:
        return env_url

    db_path = Path(__file__).resolve().parents[3] / DEFAULT_DB_FILENAME
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        engine = create_engine(get_database_url(), echo=False, future=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        from resume_builder.data.models import payment, resume, user  # noqa: F401

        Base.metadata.create_all(bind=engine)
        _engine = engine
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=_get_engine(), autoflush=False, expire_on_commit=False)
    return _SessionLocal


def init_db() -> None:
    """Build the engine now and create missing tables (app startup, tests)."""
    _get_engine()


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
