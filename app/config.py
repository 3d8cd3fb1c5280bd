"""Configuration utilities for the survey response service.

This module loads application configuration with the following rules:
- Primary source: `survey_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_SURVEY_CONFIG = Path("survey_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str
    auto_apply_migrations: bool = Field(default=True)
    migrations_dir: str = Field(default="migrations")

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class PublicConfig(BaseModel):
    base_url: str = Field(default="http://localhost:5173")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("base_url")
    @classmethod
    def base_url_must_be_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("public.base_url must start with http:// or https://")
        return v.rstrip("/")


class AppConfig(BaseModel):
    database: DatabaseConfig
    public: PublicConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _truthy(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) survey_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_SURVEY_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(x) for x in cur)
        return str(cur) if cur is not None else default

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or "sqlite+pysqlite:///:memory:"
    )
    auto_migrate_text = (
        _env("AUTO_APPLY_MIGRATIONS")
        or _read_config_file("database.auto_apply_migrations")
        or _base("database.auto_apply_migrations", "true")
    )
    migrations_dir = _env("MIGRATIONS_DIR") or _base("database.migrations_dir", "migrations")

    # Public survey links and browser access
    base_url = _env("PUBLIC_BASE_URL") or _read_config_file("public.base_url") or _base("public.base_url", "http://localhost:5173")
    origins_text = _env("CORS_ORIGINS") or _read_config_file("public.cors_origins") or _base("public.cors_origins", "*")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    try:
        cfg = AppConfig(
            database=DatabaseConfig(
                dsn=dsn,
                auto_apply_migrations=_truthy(auto_migrate_text),
                migrations_dir=str(migrations_dir),
            ),
            public=PublicConfig(base_url=str(base_url), cors_origins=origins or ["*"]),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "PublicConfig",
    "load_config",
]
