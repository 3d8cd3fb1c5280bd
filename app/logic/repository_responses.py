"""Survey response data access helpers.

Responses are inserted once per accepted submission and never updated.
"""

from __future__ import annotations

import json
import logging
from typing import List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.db.base import get_engine
from app.models.response_types import ResponseRecord

logger = logging.getLogger(__name__)


def insert_response(conn: Connection, record: ResponseRecord) -> None:
    info = record.respondent_info
    conn.execute(
        sql_text(
            """
            INSERT INTO survey_response (response_id, survey_id, answers_json, ip_address,
                                         user_agent, session_id, submitted_at, is_complete)
            VALUES (:rid, :sid, :answers, :ip, :ua, :session, :submitted, :complete)
            """
        ),
        {
            "rid": record.id,
            "sid": record.survey_id,
            "answers": json.dumps(
                [a.model_dump(by_alias=True) for a in record.answers], ensure_ascii=False
            ),
            "ip": info.ip_address,
            "ua": info.user_agent,
            "session": info.session_id,
            "submitted": record.submitted_at.isoformat(),
            "complete": bool(record.is_complete),
        },
    )
    logger.info("response_inserted response_id=%s survey_id=%s", record.id, record.survey_id)


def count_responses(conn: Connection, survey_id: str) -> int:
    row = conn.execute(
        sql_text("SELECT COUNT(*) FROM survey_response WHERE survey_id = :sid"),
        {"sid": survey_id},
    ).fetchone()
    return int(row[0]) if row else 0


def response_exists_for_ip(survey_id: str, ip_address: str | None) -> bool:
    if not ip_address:
        return False
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                "SELECT 1 FROM survey_response WHERE survey_id = :sid AND ip_address = :ip LIMIT 1"
            ),
            {"sid": survey_id, "ip": ip_address},
        ).fetchone()
    return row is not None


def list_responses(survey_id: str) -> List[ResponseRecord]:
    """Return responses for a survey, newest first."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT response_id, survey_id, answers_json, ip_address, user_agent, session_id,
                       submitted_at, is_complete
                  FROM survey_response
                 WHERE survey_id = :sid
                 ORDER BY submitted_at DESC
                """
            ),
            {"sid": survey_id},
        ).fetchall()
    records: List[ResponseRecord] = []
    for row in rows:
        m = row._mapping
        records.append(
            ResponseRecord.model_validate(
                {
                    "id": m["response_id"],
                    "surveyId": m["survey_id"],
                    "answers": json.loads(m["answers_json"] or "[]"),
                    "respondentInfo": {
                        "ipAddress": m["ip_address"],
                        "userAgent": m["user_agent"],
                        "sessionId": m["session_id"],
                    },
                    "submittedAt": m["submitted_at"],
                    "isComplete": bool(m["is_complete"]),
                }
            )
        )
    return records


__all__ = ["insert_response", "count_responses", "response_exists_for_ip", "list_responses"]
