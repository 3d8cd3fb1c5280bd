"""Centralised construction of problem+json payloads for survey errors.

Provides helpers that return dicts with stable `code` tokens to avoid
embedding string literals in route modules.
"""

from __future__ import annotations

from typing import Dict
import logging

from app.logic.validation import SubmissionValidationError


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "title": title,
        "status": status,
        "detail": detail,
        "message": detail,
        "code": code,
    }
    logger.info("error_handler.handle code=%s status=%s", code, status)
    return problem


def problem_survey_not_found() -> Dict[str, object]:
    """Return a 404 problem for an unknown survey id or link."""
    return _problem("Not Found", 404, "Survey not found", "SURVEY_NOT_FOUND")


def problem_survey_inactive() -> Dict[str, object]:
    """Return a 400 problem for a survey that no longer accepts responses."""
    return _problem("Survey Inactive", 400, "Survey is not active", "SURVEY_INACTIVE")


def problem_survey_closed() -> Dict[str, object]:
    """Return a 400 problem for a survey past its closing date."""
    return _problem("Survey Closed", 400, "Survey closing date has passed", "SURVEY_CLOSED")


def problem_response_duplicate() -> Dict[str, object]:
    return _problem(
        "Duplicate Response",
        400,
        "You have already responded to this survey",
        "RESPONSE_DUPLICATE",
    )


def problem_submission_invalid(exc: SubmissionValidationError) -> Dict[str, object]:
    """Return a 400 problem naming the question that failed validation."""
    problem = _problem("Invalid Response", 400, exc.message, exc.code)
    if exc.question is not None:
        problem["question_id"] = exc.question.id
        problem["question_text"] = exc.question.text
    return problem


__all__ = [
    "problem_survey_not_found",
    "problem_survey_inactive",
    "problem_survey_closed",
    "problem_response_duplicate",
    "problem_submission_invalid",
]
