"""Public survey routes used by respondents.

The visibility route and the submission route evaluate skip logic through
the same evaluator, so what the form shows and what submission enforces
cannot diverge.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from app.logic.problem_factory import (
    problem_response_duplicate,
    problem_submission_invalid,
    problem_survey_closed,
    problem_survey_inactive,
    problem_survey_not_found,
)
from app.logic.repository_surveys import get_survey_by_link
from app.logic.submission import (
    RESPONSE_DUPLICATE,
    SURVEY_CLOSED_CODE,
    SurveyUnavailableError,
    is_past_closing_date,
    submit_response,
)
from app.logic.validation import SubmissionValidationError, build_answers_map
from app.logic.visibility_rules import build_visibility_view
from app.models.response_types import (
    AnswerIn,
    RespondentInfo,
    ResponseSubmission,
    VisibilityRequest,
    VisibilityView,
)
from app.models.survey import Survey

router = APIRouter()
logger = logging.getLogger(__name__)

_UNAVAILABLE_PROBLEMS = {
    SURVEY_CLOSED_CODE: problem_survey_closed,
    RESPONSE_DUPLICATE: problem_response_duplicate,
}


def load_open_survey(unique_link: str) -> Survey:
    """Resolve an active survey by link; closed surveys yield 400."""
    survey = get_survey_by_link(unique_link)
    if survey is None or not survey.is_active:
        raise HTTPException(status_code=404, detail=problem_survey_not_found())
    if is_past_closing_date(survey):
        raise HTTPException(status_code=400, detail=problem_survey_closed())
    return survey


@router.get("/surveys/public/{unique_link}", summary="Read a survey by its public link")
def read_public_survey(unique_link: str):
    survey = load_open_survey(unique_link)
    return {"survey": survey.model_dump(by_alias=True, exclude_none=True, mode="json")}


@router.post(
    "/surveys/public/{unique_link}/visibility",
    summary="Evaluate visible questions and progress for a live answer map",
    response_model=VisibilityView,
)
def evaluate_visibility(unique_link: str, payload: VisibilityRequest):
    survey = load_open_survey(unique_link)
    # Same answer shaping as submission so both paths see identical input
    answers_map = build_answers_map(
        [AnswerIn(question_id=qid, answer=value) for qid, value in payload.answers.items()],
        survey.questions,
    )
    view = build_visibility_view(survey.questions, answers_map)
    logger.info(
        "visibility_evaluated survey_id=%s visible=%s answered=%s",
        survey.id,
        view.progress.visible,
        view.progress.answered,
    )
    return view


@router.post("/surveys/public/{unique_link}/response", summary="Submit a response")
def submit_public_response(unique_link: str, payload: ResponseSubmission, request: Request):
    survey = get_survey_by_link(unique_link)
    if survey is None:
        raise HTTPException(status_code=404, detail=problem_survey_not_found())

    respondent = RespondentInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        session_id=request.headers.get("x-session-id"),
    )
    try:
        result = submit_response(survey, payload, respondent)
    except SurveyUnavailableError as exc:
        factory = _UNAVAILABLE_PROBLEMS.get(exc.code, problem_survey_inactive)
        raise HTTPException(status_code=400, detail=factory())
    except SubmissionValidationError as exc:
        logger.info("response_rejected survey_id=%s code=%s", survey.id, exc.code)
        raise HTTPException(status_code=400, detail=problem_submission_invalid(exc))

    body = {
        "message": "Thank you for taking part in the survey!",
        "data": result.model_dump(by_alias=True, exclude_none=True, mode="json"),
    }
    return JSONResponse(body, status_code=201)


__all__ = ["router", "load_open_survey"]
