"""Skip-logic evaluation for conditional question visibility.

Single shared evaluator used by both the live visibility view and response
submission, so the form and the submit handler can never disagree about
which questions are visible (and therefore required).

The evaluator is pure and never raises: an unresolvable source question or an
unknown operator leaves the question visible. The one fail-closed case is an
unset source answer under `equals`/`not_equals`, which hides the question.

Questions and rules may be pydantic models or plain mappings in wire shape
(`skipLogic`, `questionId`), as stored survey JSON is evaluated too.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Mapping, Optional

from app.models.question_kind import SkipLogicOperator

logger = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_NAN = float("nan")


def _field(obj: Any, attr: str, key: Optional[str] = None) -> Any:
    """Read `attr` from a model or `key` (defaults to `attr`) from a mapping."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        if key is not None and key in obj:
            return obj.get(key)
        return obj.get(attr)
    return getattr(obj, attr, None)


def question_id_of(question: Any) -> Optional[str]:
    qid = _field(question, "id")
    if qid is None and isinstance(question, Mapping):
        qid = question.get("_id")
    return str(qid) if qid is not None else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float:
    """Coerce like JavaScript's Number(); unparseable input yields NaN."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        try:
            return float(value)
        except OverflowError:
            # Integers beyond float range become signed infinity, as Number() does
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return 0.0
        return float(s) if _NUMERIC_RE.match(s) else _NAN
    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            return 0.0
        if len(value) == 1:
            return _to_number(value[0])
    return _NAN


def _is_unset(value: Any) -> bool:
    # Falsy answers except the number 0; an empty list counts as set
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _strict_equal(left: Any, right: Any) -> bool:
    if type(left) is not type(right) and not (_is_number(left) and _is_number(right)):
        return False
    return left == right


def _contains(sequence: Any, value: Any) -> bool:
    return any(_strict_equal(item, value) for item in sequence)


def _values_equal(source: Any, value: Any) -> bool:
    if _is_number(source) or _is_number(value):
        # NaN never compares equal, matching the form's Number() comparison
        return _to_number(source) == _to_number(value)
    return _strict_equal(source, value)


def is_answered(value: Any) -> bool:
    """Return True for a non-empty list or a scalar other than '' / None."""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return value is not None and value != ""


def evaluate_condition(operator: Any, source: Any, value: Any) -> bool:
    """Evaluate one operator against the source answer."""
    if operator == SkipLogicOperator.EQUALS:
        if _is_unset(source):
            return False
        return _values_equal(source, value)
    if operator == SkipLogicOperator.NOT_EQUALS:
        if _is_unset(source):
            return False
        return not _values_equal(source, value)
    if operator == SkipLogicOperator.CONTAINS:
        return isinstance(source, (list, tuple)) and _contains(source, value)
    if operator == SkipLogicOperator.NOT_CONTAINS:
        if isinstance(source, (list, tuple)):
            return not _contains(source, value)
        return True
    if operator == SkipLogicOperator.IS_ANSWERED:
        return is_answered(source)
    logger.info("skip_logic_unknown_operator operator=%r", operator)
    return True


class SkipLogicEvaluator:
    """Visibility evaluator bound to one survey's ordered question list."""

    def __init__(self, questions: Iterable[Any]) -> None:
        self.questions = list(questions or [])
        self._known_ids = {qid for qid in (question_id_of(q) for q in self.questions) if qid}

    def is_visible(self, question: Any, answers: Mapping[str, Any] | None) -> bool:
        skip_logic = _field(question, "skip_logic", "skipLogic")
        if not skip_logic or not _field(skip_logic, "enabled"):
            return True
        condition = _field(skip_logic, "condition")
        if not condition:
            return True

        source_id = _field(condition, "question_id", "questionId")
        if source_id is None or str(source_id) not in self._known_ids:
            logger.warning(
                "skip_logic_source_unresolved question_id=%s source_id=%s",
                question_id_of(question),
                source_id,
            )
            return True

        source = (answers or {}).get(str(source_id))
        return evaluate_condition(_field(condition, "operator"), source, _field(condition, "value"))

    def visible_ids(self, answers: Mapping[str, Any] | None) -> list[str]:
        """Return ids of currently visible questions, in display order."""
        return [question_id_of(q) for q in self.questions if self.is_visible(q, answers)]


def is_visible(question: Any, answers: Mapping[str, Any] | None, questions: Iterable[Any]) -> bool:
    """Convenience wrapper: evaluate one question against its survey's questions."""
    return SkipLogicEvaluator(questions).is_visible(question, answers)


__all__ = [
    "SkipLogicEvaluator",
    "evaluate_condition",
    "is_answered",
    "is_visible",
    "question_id_of",
]
