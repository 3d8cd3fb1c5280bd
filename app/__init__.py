"""FastAPI application package for the Survey Skip Logic Service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting middleware (request-id, CORS) and mounts the API routers.
Business logic lives in `app/logic/` and route handlers in `app/routes/`;
skip-logic evaluation is shared by both through `app.logic.skip_logic`.
"""

from __future__ import annotations

from app.main import create_app

__all__ = ["create_app"]
