"""Visible-set and progress computations for the response form.

Centralizes the per-survey visibility view so the form rendering path and the
submission path share one evaluator. The full visible set is recomputed from
scratch on every answer change; surveys are small enough that no incremental
diffing is kept.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from app.logic.skip_logic import SkipLogicEvaluator, is_answered, question_id_of
from app.models.response_types import Progress, VisibilityView


def compute_visible_ids(questions: Iterable[Any], answers: Mapping[str, Any] | None) -> list[str]:
    return SkipLogicEvaluator(questions).visible_ids(answers)


def compute_progress(visible_ids: Iterable[str], answers: Mapping[str, Any] | None) -> Progress:
    """Count answered questions among the visible ones.

    `percent` is rounded to the nearest integer and 0 when nothing is visible.
    """
    visible = list(visible_ids)
    answers = answers or {}
    answered = sum(1 for qid in visible if is_answered(answers.get(qid)))
    # Half-up rounding, not banker's rounding
    percent = math.floor(answered / len(visible) * 100 + 0.5) if visible else 0
    return Progress(answered=answered, visible=len(visible), percent=percent)


def build_visibility_view(questions: Iterable[Any], answers: Mapping[str, Any] | None) -> VisibilityView:
    questions = list(questions)
    evaluator = SkipLogicEvaluator(questions)
    visible_ids: list[str] = []
    required_ids: list[str] = []
    for question in questions:
        if not evaluator.is_visible(question, answers):
            continue
        qid = question_id_of(question)
        visible_ids.append(qid)
        if getattr(question, "required", False):
            required_ids.append(qid)
    return VisibilityView(
        visible_question_ids=visible_ids,
        required_question_ids=required_ids,
        progress=compute_progress(visible_ids, answers),
    )


__all__ = ["compute_visible_ids", "compute_progress", "build_visibility_view"]
