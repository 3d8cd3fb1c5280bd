"""Survey authoring routes.

Create, read and update surveys, and list stored responses. Skip-logic
rules are normalized by the write helpers and otherwise stored unchanged.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from app.logic.problem_factory import problem_survey_not_found
from app.logic.repository_responses import list_responses
from app.logic.repository_surveys import get_survey
from app.logic.surveys_write import apply_survey_update, build_survey_link, create_survey
from app.models.survey import Survey, SurveyIn, SurveyUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


def load_survey_or_404(survey_id: str) -> Survey:
    survey = get_survey(survey_id)
    if survey is None:
        raise HTTPException(status_code=404, detail=problem_survey_not_found())
    return survey


@router.post("/surveys", summary="Create a survey")
def create_survey_route(payload: SurveyIn, request: Request):
    survey = create_survey(payload)
    base_url = request.app.state.config.public.base_url
    body = {
        "survey": survey.model_dump(by_alias=True, exclude_none=True, mode="json"),
        "surveyLink": build_survey_link(base_url, survey.unique_link),
    }
    logger.info("survey_created survey_id=%s link=%s", survey.id, survey.unique_link)
    return JSONResponse(body, status_code=201)


@router.get("/surveys/{survey_id}", summary="Read a survey")
def read_survey(survey_id: str):
    survey = load_survey_or_404(survey_id)
    return {"survey": survey.model_dump(by_alias=True, exclude_none=True, mode="json")}


@router.put("/surveys/{survey_id}", summary="Update a survey")
def update_survey_route(survey_id: str, payload: SurveyUpdate):
    survey = load_survey_or_404(survey_id)
    updated = apply_survey_update(survey, payload)
    return {"survey": updated.model_dump(by_alias=True, exclude_none=True, mode="json")}


@router.get("/surveys/{survey_id}/responses", summary="List responses of a survey")
def read_survey_responses(survey_id: str):
    survey = load_survey_or_404(survey_id)
    responses = list_responses(survey.id)
    return {
        "count": len(responses),
        "survey": {
            "id": survey.id,
            "title": survey.title,
            "questions": [q.model_dump(by_alias=True, exclude_none=True, mode="json") for q in survey.questions],
        },
        "responses": [r.model_dump(by_alias=True, exclude_none=True, mode="json") for r in responses],
    }


__all__ = ["router", "load_survey_or_404"]
