"""Functional tests for the visible-set view, progress and required validation.

These exercise the logic layer directly (no HTTP) to pin down how hidden
questions waive their required constraint and how answer shaping feeds the
shared evaluator.
"""

from __future__ import annotations

import pytest

from app.logic.skip_logic_authoring import find_non_backward_references, resolve_question_indexes
from app.logic.validation import (
    ANSWERS_MISSING,
    REQUIRED_QUESTION_UNANSWERED,
    SINGLE_CHOICE_VIOLATION,
    SubmissionValidationError,
    build_answers_map,
    validate_required_answers,
    validate_submission,
)
from app.logic.visibility_rules import build_visibility_view, compute_progress, compute_visible_ids
from app.models.response_types import AnswerIn
from app.models.survey import Question


def _questions() -> list[Question]:
    return [
        Question.model_validate(
            {
                "id": "q1",
                "text": "Did you attend?",
                "type": "radio",
                "required": True,
                "options": [{"text": "Yes", "value": "Yes"}, {"text": "No", "value": "No"}],
            }
        ),
        Question.model_validate(
            {
                "id": "q2",
                "text": "What did you like most?",
                "type": "text",
                "required": True,
                "skipLogic": {
                    "enabled": True,
                    "condition": {"questionId": "q1", "operator": "equals", "value": "Yes"},
                },
            }
        ),
        Question.model_validate(
            {
                "id": "q3",
                "text": "Which topics?",
                "type": "checkbox",
                "options": [{"text": "A", "value": "a"}, {"text": "B", "value": "b"}],
            }
        ),
        Question.model_validate(
            {
                "id": "q4",
                "text": "Why not topic A?",
                "type": "textarea",
                "skipLogic": {
                    "enabled": True,
                    "condition": {"questionId": "q3", "operator": "not_contains", "value": "a"},
                },
            }
        ),
    ]


def _answers(**values) -> list[AnswerIn]:
    return [AnswerIn(question_id=qid, answer=value) for qid, value in values.items()]


# -----------------------------
# Visible set and progress
# -----------------------------


def test_visible_ids_follow_display_order():
    assert compute_visible_ids(_questions(), {"q1": "Yes", "q3": ["a"]}) == ["q1", "q2", "q3"]
    assert compute_visible_ids(_questions(), {"q1": "No", "q3": ["b"]}) == ["q1", "q3", "q4"]


def test_unanswered_form_hides_equality_dependents():
    # q2 hidden (equals on missing answer), q4 visible (not_contains on non-list)
    assert compute_visible_ids(_questions(), {}) == ["q1", "q3", "q4"]


def test_progress_counts_only_visible_answers():
    progress = compute_progress(["q1", "q3", "q4"], {"q1": "No", "q2": "ignored", "q3": []})
    assert (progress.answered, progress.visible, progress.percent) == (1, 3, 33)


def test_progress_rounds_half_up():
    ids = [f"q{i}" for i in range(8)]
    progress = compute_progress(ids, {"q0": "x"})
    assert progress.percent == 13


def test_progress_is_zero_without_visible_questions():
    assert compute_progress([], {"q1": "x"}).percent == 0


def test_visibility_view_lists_required_visible_questions():
    view = build_visibility_view(_questions(), {"q1": "Yes"})
    assert view.visible_question_ids == ["q1", "q2", "q3", "q4"]
    assert view.required_question_ids == ["q1", "q2"]
    assert view.progress.answered == 1


def test_visibility_view_accepts_integers_beyond_float_range():
    questions = [
        Question(id="r", text="Rate us", type="rating"),
        Question.model_validate(
            {
                "id": "why",
                "text": "Why a three?",
                "type": "text",
                "skipLogic": {"enabled": True, "condition": {"questionId": "r", "operator": "equals", "value": "3"}},
            }
        ),
    ]
    view = build_visibility_view(questions, {"r": 10**400})
    assert view.visible_question_ids == ["r"]
    assert view.progress.percent == 100


# -----------------------------
# Required validation
# -----------------------------


def test_hidden_required_question_is_not_enforced():
    questions = _questions()
    validate_required_answers(questions, {"q1": "No"})


def test_visible_required_question_must_be_answered():
    with pytest.raises(SubmissionValidationError) as err:
        validate_required_answers(_questions(), {"q1": "Yes"})
    assert err.value.code == REQUIRED_QUESTION_UNANSWERED
    assert err.value.question.id == "q2"
    assert "What did you like most?" in err.value.message


@pytest.mark.parametrize("empty", ["", None, []])
def test_empty_values_do_not_satisfy_required(empty):
    with pytest.raises(SubmissionValidationError) as err:
        validate_required_answers(_questions(), {"q1": "Yes", "q2": empty})
    assert err.value.question.id == "q2"


def _required_checkbox() -> Question:
    return Question.model_validate(
        {
            "id": "c",
            "text": "Pick any",
            "type": "checkbox",
            "required": True,
            "options": [{"text": "A", "value": "a"}, {"text": "B", "value": "b"}],
        }
    )


@pytest.mark.parametrize("empty", [None, "", [], [None, ""]])
def test_empty_checkbox_answer_does_not_satisfy_required(empty):
    with pytest.raises(SubmissionValidationError) as err:
        validate_submission([_required_checkbox()], [AnswerIn(question_id="c", answer=empty)])
    assert err.value.code == REQUIRED_QUESTION_UNANSWERED
    assert err.value.question.id == "c"


def test_empty_checkbox_scalar_maps_to_empty_list():
    answers_map = build_answers_map(_answers(c=None, q3=""), [_required_checkbox(), *_questions()])
    assert answers_map == {"c": [], "q3": []}


@pytest.mark.parametrize("answer", [["a"], "a"])
def test_checkbox_choice_satisfies_required(answer):
    stored = validate_submission([_required_checkbox()], [AnswerIn(question_id="c", answer=answer)])
    assert stored[0].answer == ["a"]


@pytest.mark.parametrize("answer", [0, False])
def test_zero_and_false_satisfy_required(answer):
    question = Question(id="r", text="Rate us", type="rating", required=True)
    stored = validate_submission([question], [AnswerIn(question_id="r", answer=answer)])
    assert stored[0].answer == answer


def test_first_offending_question_is_reported():
    with pytest.raises(SubmissionValidationError) as err:
        validate_required_answers(_questions(), {})
    assert err.value.question.id == "q1"


def test_submission_without_answers_is_rejected():
    with pytest.raises(SubmissionValidationError) as err:
        validate_submission(_questions(), [])
    assert err.value.code == ANSWERS_MISSING


def test_radio_answer_must_be_single_value():
    with pytest.raises(SubmissionValidationError) as err:
        validate_submission(_questions(), _answers(q1=["Yes", "No"], q2="x"))
    assert err.value.code == SINGLE_CHOICE_VIOLATION


def test_checkbox_scalar_is_wrapped_before_visibility():
    answers_map = build_answers_map(_answers(q3="a"), _questions())
    assert answers_map["q3"] == ["a"]
    assert "q4" not in compute_visible_ids(_questions(), answers_map)


def test_unknown_questions_are_dropped_and_duplicates_override():
    stored = validate_submission(
        _questions(),
        _answers(q1="No") + [AnswerIn(question_id="ghost", answer="boo"), AnswerIn(question_id="q1", answer="Yes"),
                             AnswerIn(question_id="q2", answer="The talks")],
    )
    by_id = {a.question_id: a for a in stored}
    assert set(by_id) == {"q1", "q2"}
    assert by_id["q1"].answer == "Yes"
    assert by_id["q2"].question_text == "What did you like most?"
    assert by_id["q2"].question_type == "text"


# -----------------------------
# Authoring normalization
# -----------------------------


def test_question_index_is_converted_to_question_id():
    questions = [
        Question(id="a", text="First", type="radio"),
        Question.model_validate(
            {
                "id": "b",
                "text": "Second",
                "type": "text",
                "skipLogic": {"enabled": True, "condition": {"questionIndex": 0, "operator": "is_answered"}},
            }
        ),
    ]
    resolved = resolve_question_indexes(questions)
    condition = resolved[1].skip_logic.condition
    assert condition.question_id == "a"
    assert condition.question_index is None
    assert [q.order for q in resolved] == [0, 1]


def test_out_of_range_question_index_is_left_unresolved():
    question = Question.model_validate(
        {
            "id": "b",
            "text": "Second",
            "type": "text",
            "skipLogic": {"enabled": True, "condition": {"questionIndex": 7, "operator": "equals", "value": "x"}},
        }
    )
    resolved = resolve_question_indexes([question])
    assert resolved[0].skip_logic.condition.question_id is None
    assert compute_visible_ids(resolved, {}) == ["b"]


def test_forward_and_self_references_are_reported():
    questions = [
        Question.model_validate(
            {
                "id": "a",
                "text": "First",
                "type": "text",
                "skipLogic": {"enabled": True, "condition": {"questionId": "b", "operator": "is_answered"}},
            }
        ),
        Question.model_validate(
            {
                "id": "b",
                "text": "Second",
                "type": "text",
                "skipLogic": {"enabled": True, "condition": {"questionId": "b", "operator": "is_answered"}},
            }
        ),
    ]
    assert find_non_backward_references(questions) == ["a", "b"]
