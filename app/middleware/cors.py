"""CORS configuration helpers.

Applies CORS for the survey form origin(s) and exposes the request id
header to browsers.
"""

from __future__ import annotations

from typing import Iterable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


EXPOSE_HEADERS: list[str] = ["X-Request-Id"]


def apply_cors(app: FastAPI, *, origins: Iterable[str] | None = None) -> None:
    allow = list(origins or ["*"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow,
        # Wildcard origins cannot be combined with credentials
        allow_credentials="*" not in allow,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["apply_cors", "EXPOSE_HEADERS"]
