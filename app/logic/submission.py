"""Response submission workflow.

Gates the survey (active, not closed, duplicate respondent), validates the
answers against the visible-question set, then stores the response and
applies the participant limit in one transaction. Any rejection happens
before the write, so a rejected submission leaves nothing behind.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from app.db.base import transaction
from app.logic.events import RESPONSE_SUBMITTED, SURVEY_CLOSED, publish
from app.logic.repository_responses import count_responses, insert_response, response_exists_for_ip
from app.logic.repository_surveys import deactivate_survey
from app.logic.validation import validate_submission
from app.models.response_types import RespondentInfo, ResponseRecord, ResponseSubmission, SubmissionResult
from app.models.survey import Survey

logger = logging.getLogger(__name__)

SURVEY_INACTIVE = "SURVEY_INACTIVE"
SURVEY_CLOSED_CODE = "SURVEY_CLOSED"
RESPONSE_DUPLICATE = "RESPONSE_DUPLICATE"


class SurveyUnavailableError(Exception):
    """The survey does not accept this submission; `code` names the reason."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def is_past_closing_date(survey: Survey, now: Optional[datetime] = None) -> bool:
    if survey.closing_date is None:
        return False
    now = now or datetime.now(timezone.utc)
    return _as_utc(now) > _as_utc(survey.closing_date)


def ensure_accepting_responses(survey: Survey, ip_address: Optional[str] = None) -> None:
    """Raise SurveyUnavailableError when the survey cannot take this response."""
    if not survey.is_active:
        raise SurveyUnavailableError(SURVEY_INACTIVE)
    if is_past_closing_date(survey):
        raise SurveyUnavailableError(SURVEY_CLOSED_CODE)
    if not survey.allow_multiple_responses and response_exists_for_ip(survey.id, ip_address):
        raise SurveyUnavailableError(RESPONSE_DUPLICATE)


def submit_response(
    survey: Survey,
    submission: ResponseSubmission,
    respondent: RespondentInfo,
) -> SubmissionResult:
    """Validate and store one response.

    Raises SurveyUnavailableError or SubmissionValidationError without
    writing anything.
    """
    ensure_accepting_responses(survey, respondent.ip_address)
    answers = validate_submission(survey.questions, submission.answers)

    submitted_at = datetime.now(timezone.utc)
    if not respondent.session_id:
        respondent = respondent.model_copy(
            update={"session_id": f"{respondent.ip_address or 'anonymous'}-{int(submitted_at.timestamp() * 1000)}"}
        )
    record = ResponseRecord(
        id=uuid.uuid4().hex,
        survey_id=survey.id,
        answers=answers,
        respondent_info=respondent,
        submitted_at=submitted_at,
    )

    closed = False
    with transaction() as conn:
        insert_response(conn, record)
        if survey.participant_limit:
            total = count_responses(conn, survey.id)
            if total >= survey.participant_limit:
                deactivate_survey(conn, survey.id, submitted_at.replace(microsecond=0).isoformat())
                closed = True

    publish(RESPONSE_SUBMITTED, {"survey_id": survey.id, "response_id": record.id})
    if closed:
        logger.info(
            "survey_auto_closed survey_id=%s participant_limit=%s", survey.id, survey.participant_limit
        )
        publish(SURVEY_CLOSED, {"survey_id": survey.id, "reason": "participant_limit"})
    return SubmissionResult(response_id=record.id, submitted_at=submitted_at)


__all__ = [
    "SURVEY_INACTIVE",
    "SURVEY_CLOSED_CODE",
    "RESPONSE_DUPLICATE",
    "SurveyUnavailableError",
    "is_past_closing_date",
    "ensure_accepting_responses",
    "submit_response",
]
