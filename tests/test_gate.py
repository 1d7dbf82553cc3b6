"""Tests for the required-answer completion gate."""

from __future__ import annotations

from formwizard.gate import can_advance, has_answer, missing_required
from formwizard.models import AnswerSet, Question


def test_required_question_blocks_until_answered() -> None:
    questions = [Question(id="name", required=True), Question(id="nickname")]
    answers = AnswerSet()

    assert can_advance(questions, answers) is False
    assert [q.id for q in missing_required(questions, answers)] == ["name"]

    answers.set("name", "Ada")

    assert can_advance(questions, answers) is True
    assert answers.to_dict() == {"name": "Ada"}


def test_optional_questions_never_block() -> None:
    assert can_advance([Question(id="nickname")], {}) is True


def test_empty_values_count_as_missing() -> None:
    question = Question(id="skills", type="multiselect", required=True)

    assert has_answer(question, {"skills": []}) is False
    assert has_answer(question, {"skills": ""}) is False
    assert has_answer(question, {"skills": ["react"]}) is True
    assert can_advance([question], {"skills": []}) is False


def test_no_questions_can_always_advance() -> None:
    assert can_advance([], {}) is True
