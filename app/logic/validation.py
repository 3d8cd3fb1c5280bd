"""Answer normalization and required-field validation for submissions.

Required questions are only enforced while visible; hiding a question waives
its required constraint. Validation is all-or-nothing: the first offending
question aborts the submission and nothing is stored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from app.logic.skip_logic import SkipLogicEvaluator, is_answered
from app.models.question_kind import QuestionKind
from app.models.response_types import AnswerIn, StoredAnswer
from app.models.survey import Question

logger = logging.getLogger(__name__)


class SubmissionValidationError(ValueError):
    """Submission rejected; carries a stable code and the offending question."""

    def __init__(self, code: str, message: str, question: Question | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.question = question


ANSWERS_MISSING = "RESPONSE_ANSWERS_MISSING"
REQUIRED_QUESTION_UNANSWERED = "RESPONSE_REQUIRED_QUESTION_UNANSWERED"
SINGLE_CHOICE_VIOLATION = "RESPONSE_SINGLE_CHOICE_VIOLATION"


def build_answers_map(answers: Iterable[AnswerIn], questions: Iterable[Question]) -> Dict[str, Any]:
    """Key answers by question id; later duplicates win.

    Scalar answers to checkbox questions are wrapped into one-element lists
    here, before any visibility evaluation. An empty scalar (None or '')
    becomes an empty list so it stays unanswered.
    """
    kinds = {q.id: q.type for q in questions}
    answers_map: Dict[str, Any] = {}
    for item in answers:
        value = item.answer
        if kinds.get(item.question_id) == QuestionKind.CHECKBOX and not isinstance(value, list):
            value = [] if value is None or value == "" else [value]
        answers_map[item.question_id] = value
    return answers_map


def has_required_answer(value: Any) -> bool:
    """Like `is_answered`, but a list needs at least one non-empty choice.

    Unlike a plain falsiness check, 0 and False satisfy a required question.
    """
    if isinstance(value, list):
        return any(is_answered(item) for item in value)
    return is_answered(value)


def validate_required_answers(questions: List[Question], answers_map: Dict[str, Any]) -> None:
    """Raise for the first required, visible question left without an answer."""
    evaluator = SkipLogicEvaluator(questions)
    for question in questions:
        if not question.required:
            continue
        if not evaluator.is_visible(question, answers_map):
            continue
        if not has_required_answer(answers_map.get(question.id)):
            logger.info("required_answer_missing question_id=%s", question.id)
            raise SubmissionValidationError(
                REQUIRED_QUESTION_UNANSWERED,
                f'Question "{question.text}" is required',
                question,
            )


def process_answers(questions: List[Question], answers_map: Dict[str, Any]) -> List[StoredAnswer]:
    """Snapshot answers with question text/type; unknown question ids are dropped."""
    by_id = {q.id: q for q in questions}
    processed: List[StoredAnswer] = []
    for qid, value in answers_map.items():
        question = by_id.get(qid)
        if question is None:
            logger.info("answer_for_unknown_question_ignored question_id=%s", qid)
            continue
        if question.type == QuestionKind.RADIO and isinstance(value, list):
            raise SubmissionValidationError(
                SINGLE_CHOICE_VIOLATION,
                f'Question "{question.text}" allows only one answer',
                question,
            )
        processed.append(
            StoredAnswer(
                question_id=qid,
                question_text=question.text,
                question_type=question.type,
                answer=value,
            )
        )
    return processed


def validate_submission(questions: List[Question], answers: List[AnswerIn]) -> List[StoredAnswer]:
    """Validate a full submission and return the answers to persist."""
    if not answers:
        raise SubmissionValidationError(ANSWERS_MISSING, "Answers are required")
    answers_map = build_answers_map(answers, questions)
    validate_required_answers(questions, answers_map)
    return process_answers(questions, answers_map)


__all__ = [
    "SubmissionValidationError",
    "ANSWERS_MISSING",
    "REQUIRED_QUESTION_UNANSWERED",
    "SINGLE_CHOICE_VIOLATION",
    "build_answers_map",
    "has_required_answer",
    "validate_required_answers",
    "process_answers",
    "validate_submission",
]
