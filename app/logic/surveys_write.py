"""Survey create/update helpers.

Keeps route handlers orchestration-only: link generation, timestamping and
skip-logic normalization happen here before the repository write.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timezone

from app.db.base import transaction
from app.logic.events import SURVEY_CREATED, SURVEY_UPDATED, publish
from app.logic.repository_surveys import insert_survey, update_survey
from app.logic.skip_logic_authoring import normalize_questions
from app.models.survey import Survey, SurveyIn, SurveyUpdate

logger = logging.getLogger(__name__)

# Fields an update may explicitly reset to null
_CLEARABLE_FIELDS = {"description", "participant_limit"}


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def generate_unique_link() -> str:
    """Return an opaque URL-safe token for the public survey link."""
    return secrets.token_urlsafe(12)


def build_survey_link(base_url: str, unique_link: str) -> str:
    return f"{base_url.rstrip('/')}/survey/{unique_link}"


def create_survey(payload: SurveyIn) -> Survey:
    now = utc_now()
    data = payload.model_dump()
    data["questions"] = normalize_questions(payload.questions)
    survey = Survey(
        id=uuid.uuid4().hex,
        unique_link=generate_unique_link(),
        created_at=now,
        updated_at=now,
        **data,
    )
    with transaction() as conn:
        insert_survey(conn, survey)
    publish(SURVEY_CREATED, {"survey_id": survey.id})
    return survey


def apply_survey_update(survey: Survey, payload: SurveyUpdate) -> Survey:
    """Apply only the fields present in the payload and persist the result."""
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in _CLEARABLE_FIELDS
    }
    if payload.questions is not None:
        changes["questions"] = normalize_questions(payload.questions)
    changes["updated_at"] = utc_now()
    updated = survey.model_copy(update=changes)
    with transaction() as conn:
        update_survey(conn, updated)
    publish(SURVEY_UPDATED, {"survey_id": updated.id})
    return updated


__all__ = [
    "utc_now",
    "generate_unique_link",
    "build_survey_link",
    "create_survey",
    "apply_survey_update",
]
