from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from app.config import AppConfig, load_config
from app.db.base import get_engine
from app.db.migrations_runner import apply_migrations
from app.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from app.http.request_id import RequestIdMiddleware
from app.logging_setup import configure_logging
from app.middleware.cors import apply_cors
from app.routes import api_router

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _migrations_path(config: AppConfig) -> Path:
    path = Path(config.database.migrations_dir)
    return path if path.is_absolute() else PROJECT_ROOT / path


def create_app(config: AppConfig | None = None) -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    config = config or load_config()

    app = FastAPI(title="Survey Skip Logic Service")
    app.state.config = config

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    apply_cors(app, origins=config.public.cors_origins)
    app.add_middleware(RequestIdMiddleware)

    engine = get_engine(config.database.dsn)

    # Apply migrations on startup (guarded) to avoid import-time side effects
    @app.on_event("startup")
    def _apply_migrations() -> None:
        if not config.database.auto_apply_migrations:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(engine, migrations_dir=_migrations_path(config))
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup_migrations applied=%s", applied)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    def health() -> dict:
        try:
            with engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
        except Exception as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}
        return {"status": "ok", "db": True}

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
