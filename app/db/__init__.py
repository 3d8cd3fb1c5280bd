"""Database bootstrap utilities for the survey response service.

Exposes engine construction, a transaction helper, and the migrations runner
that applies SQL files from the local migrations/ directory. No ORM models
leak into route handlers.
"""

from app.db.base import get_engine, transaction
from app.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "transaction",
    "apply_migrations",
]
