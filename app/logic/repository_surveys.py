"""Survey data access helpers.

Encapsulates survey reads and writes to keep route handlers free of inline
SQL. Questions (including skip-logic rules) round-trip as JSON text in wire
shape, so stored rules are persisted unchanged.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.db.base import get_engine
from app.models.survey import Survey

logger = logging.getLogger(__name__)

_COLUMNS = (
    "survey_id, unique_link, title, description, questions_json, is_active, closing_date, "
    "allow_multiple_responses, participant_limit, created_at, updated_at"
)


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _params(survey: Survey) -> dict:
    return {
        "sid": survey.id,
        "link": survey.unique_link,
        "title": survey.title,
        "description": survey.description,
        "questions": json.dumps(
            [q.model_dump(by_alias=True, exclude_none=True) for q in survey.questions],
            ensure_ascii=False,
        ),
        "active": bool(survey.is_active),
        "closing": _iso(survey.closing_date),
        "multi": bool(survey.allow_multiple_responses),
        "limit": survey.participant_limit,
        "created": _iso(survey.created_at),
        "updated": _iso(survey.updated_at),
    }


def _row_to_survey(row: Any) -> Survey:
    m = row._mapping
    return Survey.model_validate(
        {
            "id": m["survey_id"],
            "uniqueLink": m["unique_link"],
            "title": m["title"],
            "description": m["description"],
            "questions": json.loads(m["questions_json"] or "[]"),
            "isActive": bool(m["is_active"]),
            "closingDate": m["closing_date"],
            "allowMultipleResponses": bool(m["allow_multiple_responses"]),
            "participantLimit": m["participant_limit"],
            "createdAt": m["created_at"],
            "updatedAt": m["updated_at"],
        }
    )


def insert_survey(conn: Connection, survey: Survey) -> None:
    conn.execute(
        sql_text(
            f"""
            INSERT INTO survey ({_COLUMNS})
            VALUES (:sid, :link, :title, :description, :questions, :active, :closing,
                    :multi, :limit, :created, :updated)
            """
        ),
        _params(survey),
    )
    logger.info("survey_inserted survey_id=%s questions=%s", survey.id, len(survey.questions))


def update_survey(conn: Connection, survey: Survey) -> None:
    conn.execute(
        sql_text(
            """
            UPDATE survey
               SET title = :title, description = :description, questions_json = :questions,
                   is_active = :active, closing_date = :closing, allow_multiple_responses = :multi,
                   participant_limit = :limit, updated_at = :updated
             WHERE survey_id = :sid
            """
        ),
        _params(survey),
    )
    logger.info("survey_updated survey_id=%s", survey.id)


def deactivate_survey(conn: Connection, survey_id: str, updated_at: str) -> None:
    conn.execute(
        sql_text("UPDATE survey SET is_active = :active, updated_at = :updated WHERE survey_id = :sid"),
        {"active": False, "updated": updated_at, "sid": survey_id},
    )


def _fetch_one(where: str, params: dict) -> Optional[Survey]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(sql_text(f"SELECT {_COLUMNS} FROM survey WHERE {where}"), params).fetchone()
    return _row_to_survey(row) if row is not None else None


def get_survey(survey_id: str) -> Optional[Survey]:
    return _fetch_one("survey_id = :sid", {"sid": survey_id})


def get_survey_by_link(unique_link: str) -> Optional[Survey]:
    return _fetch_one("unique_link = :link", {"link": unique_link})


__all__ = [
    "insert_survey",
    "update_survey",
    "deactivate_survey",
    "get_survey",
    "get_survey_by_link",
]
