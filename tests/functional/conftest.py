from __future__ import annotations

"""Functional test bootstrap.

Points the app at a file-backed SQLite database shared across the process and
applies the SQL migrations once at session start, before tests create the
FastAPI app via TestClient. Tables are emptied between tests.
"""

import os
import pathlib
import tempfile

import pytest

# Ensure the app points to the shared SQLite file before any imports of app.main
_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = pathlib.Path(tempfile.mkdtemp(prefix="survey-tests-")) / "functional_tests.db"

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Disable app startup auto-migrations; migrations are applied explicitly below
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> None:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from app.db.base import get_engine
    from app.db.migrations_runner import apply_migrations

    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    apply_migrations(engine, migrations_dir=str(_ROOT / "migrations"))
    yield
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables(functional_sqlite_bootstrap) -> None:
    from app.db.base import get_engine
    from app.logic.events import get_buffered_events

    with get_engine().begin() as conn:
        conn.exec_driver_sql("DELETE FROM survey_response")
        conn.exec_driver_sql("DELETE FROM survey")
    get_buffered_events(clear=True)
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def _yes_no_survey_payload(**overrides) -> dict:
    """Q1 radio Yes/No (required); Q2 text required only when Q1 == "Yes"."""
    payload = {
        "title": "Follow-up survey",
        "questions": [
            {
                "id": "q1",
                "text": "Did you attend?",
                "type": "radio",
                "required": True,
                "options": [{"text": "Yes", "value": "Yes"}, {"text": "No", "value": "No"}],
            },
            {
                "id": "q2",
                "text": "What did you like most?",
                "type": "text",
                "required": True,
                "skipLogic": {
                    "enabled": True,
                    "condition": {"questionId": "q1", "operator": "equals", "value": "Yes"},
                },
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def yes_no_payload():
    """Builder for the two-question Yes/No survey payload, with overrides."""
    return _yes_no_survey_payload


@pytest.fixture
def create_survey(client):
    """Factory creating a survey over HTTP and returning the survey body."""

    def _create(payload: dict | None = None) -> dict:
        resp = client.post("/api/v1/surveys", json=payload or _yes_no_survey_payload())
        assert resp.status_code == 201, resp.text
        return resp.json()["survey"]

    return _create
