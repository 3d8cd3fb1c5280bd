"""SQLAlchemy engine and transaction helpers.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; repositories use
`sqlalchemy.text` against the schema created by `migrations/*.sql`.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _db_url() -> str:
    return (
        os.getenv("TEST_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or "sqlite+pysqlite:///:memory:"
    )


# Module-level cached Engine so repositories share one pool
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    For SQLite in-memory URLs, use a StaticPool to keep a single connection
    alive across sessions and threads (TestClient runs handlers in a thread).
    Calling without a URL reuses the current engine when one exists.
    """
    global _ENGINE, _ENGINE_URL
    if url is None and _ENGINE is not None:
        return _ENGINE
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if resolved_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in resolved_url:
                kwargs["poolclass"] = StaticPool
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        logger.info("db_engine_created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


@contextmanager
def transaction() -> Iterator[Connection]:
    """Yield a connection inside a transaction; roll back on any error."""
    engine = get_engine()
    try:
        with engine.begin() as conn:
            yield conn
    except Exception:
        logger.error("DB transaction error; rolled back", exc_info=True)
        raise


__all__ = ["get_engine", "transaction"]
