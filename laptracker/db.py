from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session, DeclarativeBase

from .settings import get_settings

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

_engine = None
_SessionLocal = None

def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def init_db(db_url: str | None = None) -> None:
    global _engine, _SessionLocal
    db_url = db_url or get_settings().LAPTRACKER_DB_URL
    if _engine is not None:
        if make_url(db_url) != _engine.url:
            raise RuntimeError(
                f"database already initialised for {_engine.url!r}; call dispose_db() before switching"
            )
        return
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    _engine = create_engine(db_url, future=True, echo=False, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
    _SessionLocal = sessionmaker(bind=_engine, autoflush=False, autocommit=False, future=True)
    from . import models  # noqa
    Base.metadata.create_all(bind=_engine)
    logger.info("database ready at %r", _engine.url)

def dispose_db() -> None:
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None

def session_factory() -> sessionmaker:
    if _SessionLocal is None:
        init_db()
    return _SessionLocal

def get_session() -> Session:
    db = session_factory()()
    try:
        yield db
    finally:
        db.close()
