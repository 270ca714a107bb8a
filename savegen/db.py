"""Process-wide database connection."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from savegen.config import load_db_config

log = logging.getLogger(__name__)

_engine: Engine | None = None
_session: Session | None = None


def connect(url: str | None = None) -> Session:
    """Open the database, verify it answers and make it the current session.

    Without a URL the settings come from :func:`savegen.config.load_db_config`.
    """
    global _engine, _session

    if url is None:
        url = load_db_config().url()

    engine = create_engine(url, echo=True)
    try:
        with engine.connect():
            pass
    except Exception:
        engine.dispose()
        raise

    close()
    _engine = engine
    _session = Session(engine)
    log.info("Database connected successfully")
    return _session


def get() -> Session | None:
    """Return the current session, or None when not connected."""
    return _session


def close() -> None:
    """Close the current session and release the engine's connections."""
    global _engine, _session

    if _session is not None:
        _session.close()
        _session = None
    if _engine is not None:
        _engine.dispose()
        _engine = None