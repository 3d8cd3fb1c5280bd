"""QuestionKind and SkipLogicOperator constant containers.

Plain constants classes instead of Enums: stored rules carry free-text
operators and the evaluator must tolerate values outside these sets.
"""

from __future__ import annotations


class QuestionKind:
    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    RATING = "rating"

    ALL = (TEXT, TEXTAREA, RADIO, CHECKBOX, RATING)
    WITH_OPTIONS = (RADIO, CHECKBOX)


class SkipLogicOperator:
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IS_ANSWERED = "is_answered"

    ALL = (EQUALS, NOT_EQUALS, CONTAINS, NOT_CONTAINS, IS_ANSWERED)


__all__ = ["QuestionKind", "SkipLogicOperator"]
