"""Authoring-time normalization of skip-logic rules.

The survey editor may reference a source question by its position
(`questionIndex`) before ids exist. On save, positions are converted into
`questionId` values. Rules are otherwise persisted unchanged: forward or self
references are reported but not rejected, since the evaluator leaves such
questions visible.
"""

from __future__ import annotations

import logging
from typing import List

from app.models.survey import Question

logger = logging.getLogger(__name__)


def resolve_question_indexes(questions: List[Question]) -> List[Question]:
    """Return questions with `questionIndex` references converted to ids.

    Out-of-range indices are left in place and resolve to nothing at
    evaluation time.
    """
    resolved: List[Question] = []
    for position, question in enumerate(questions):
        if question.order is None:
            question = question.model_copy(update={"order": position})
        rule = question.skip_logic
        condition = rule.condition if rule else None
        if rule and rule.enabled and condition and condition.question_index is not None:
            index = condition.question_index
            if 0 <= index < len(questions):
                new_condition = condition.model_copy(
                    update={"question_id": questions[index].id, "question_index": None}
                )
                question = question.model_copy(
                    update={"skip_logic": rule.model_copy(update={"condition": new_condition})}
                )
                logger.info("skip_logic_index_resolved question_id=%s index=%s", question.id, index)
            else:
                logger.warning("skip_logic_index_out_of_range question_id=%s index=%s", question.id, index)
        resolved.append(question)
    return resolved


def find_non_backward_references(questions: List[Question]) -> List[str]:
    """Return ids of questions whose rule does not point at an earlier question."""
    positions = {q.id: i for i, q in enumerate(questions)}
    offenders: List[str] = []
    for position, question in enumerate(questions):
        rule = question.skip_logic
        if not rule or not rule.enabled or not rule.condition:
            continue
        source_position = positions.get(rule.condition.question_id or "")
        if source_position is None or source_position >= position:
            offenders.append(question.id)
    return offenders


def normalize_questions(questions: List[Question]) -> List[Question]:
    resolved = resolve_question_indexes(questions)
    for qid in find_non_backward_references(resolved):
        logger.warning("skip_logic_reference_not_backward question_id=%s", qid)
    return resolved


__all__ = ["resolve_question_indexes", "find_non_backward_references", "normalize_questions"]
