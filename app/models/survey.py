"""Pydantic models for surveys, questions and skip-logic rules.

Field names follow the camelCase wire format used by the survey form
(`skipLogic`, `questionId`, ...). Python attribute names are snake_case and
populated by alias; `model_dump(by_alias=True)` restores the wire shape.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.question_kind import QuestionKind, SkipLogicOperator


AnswerValue = Union[str, int, float, bool, List[Any], None]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuestionOption(_WireModel):
    text: str
    value: str


class SkipLogicCondition(_WireModel):
    question_id: Optional[str] = Field(default=None, alias="questionId")
    # Authoring-only: resolved into question_id when the survey is saved
    question_index: Optional[int] = Field(default=None, alias="questionIndex")
    operator: str = SkipLogicOperator.EQUALS
    value: AnswerValue = None


class SkipLogic(_WireModel):
    enabled: bool = False
    condition: Optional[SkipLogicCondition] = None


class Question(_WireModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    type: str
    options: List[QuestionOption] = Field(default_factory=list)
    required: bool = False
    order: Optional[int] = None
    skip_logic: Optional[SkipLogic] = Field(default=None, alias="skipLogic")

    @field_validator("text")
    @classmethod
    def text_must_be_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("question text is required")
        return v.strip()

    @field_validator("type")
    @classmethod
    def type_must_be_known(cls, v: str) -> str:
        if v not in QuestionKind.ALL:
            raise ValueError(f"question type must be one of {list(QuestionKind.ALL)}")
        return v


class SurveyIn(_WireModel):
    """Create/update payload for a survey."""

    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    questions: List[Question] = Field(min_length=1)
    is_active: bool = Field(default=True, alias="isActive")
    closing_date: Optional[datetime] = Field(default=None, alias="closingDate")
    allow_multiple_responses: bool = Field(default=False, alias="allowMultipleResponses")
    participant_limit: Optional[int] = Field(default=None, ge=1, alias="participantLimit")

    @field_validator("title")
    @classmethod
    def title_must_be_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("survey title is required")
        return v.strip()


class SurveyUpdate(_WireModel):
    """Partial update payload; omitted fields keep their stored values."""

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    questions: Optional[List[Question]] = Field(default=None, min_length=1)
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    closing_date: Optional[datetime] = Field(default=None, alias="closingDate")
    allow_multiple_responses: Optional[bool] = Field(default=None, alias="allowMultipleResponses")
    participant_limit: Optional[int] = Field(default=None, ge=1, alias="participantLimit")


class Survey(SurveyIn):
    id: str
    unique_link: str = Field(alias="uniqueLink")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


__all__ = [
    "AnswerValue",
    "QuestionOption",
    "SkipLogicCondition",
    "SkipLogic",
    "Question",
    "SurveyIn",
    "SurveyUpdate",
    "Survey",
]
