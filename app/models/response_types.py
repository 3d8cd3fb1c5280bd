"""Pydantic models for response submission and visibility bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.survey import AnswerValue


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AnswerIn(_WireModel):
    question_id: str = Field(alias="questionId")
    answer: AnswerValue = None


class ResponseSubmission(_WireModel):
    answers: List[AnswerIn] = Field(default_factory=list)


class VisibilityRequest(_WireModel):
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)


class Progress(_WireModel):
    answered: int
    visible: int
    percent: int


class VisibilityView(_WireModel):
    visible_question_ids: List[str] = Field(alias="visibleQuestionIds")
    required_question_ids: List[str] = Field(alias="requiredQuestionIds")
    progress: Progress


class StoredAnswer(_WireModel):
    question_id: str = Field(alias="questionId")
    question_text: str = Field(alias="questionText")
    question_type: str = Field(alias="questionType")
    answer: AnswerValue = None


class RespondentInfo(_WireModel):
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ResponseRecord(_WireModel):
    id: str
    survey_id: str = Field(alias="surveyId")
    answers: List[StoredAnswer]
    respondent_info: RespondentInfo = Field(alias="respondentInfo")
    submitted_at: datetime = Field(alias="submittedAt")
    is_complete: bool = Field(default=True, alias="isComplete")


class SubmissionResult(_WireModel):
    response_id: str = Field(alias="responseId")
    submitted_at: datetime = Field(alias="submittedAt")


__all__ = [
    "AnswerIn",
    "ResponseSubmission",
    "VisibilityRequest",
    "Progress",
    "VisibilityView",
    "StoredAnswer",
    "RespondentInfo",
    "ResponseRecord",
    "SubmissionResult",
]
