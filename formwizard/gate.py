"""Required-answer checks for the questions on the current step."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, List

from formwizard.models import Question, to_answer


def has_answer(question: Question, answers: Mapping[str, Any]) -> bool:
    """Return ``True`` if ``answers`` holds a non-empty value for ``question``."""

    raw = answers.get(question.id)
    if raw is None:
        return False
    return not to_answer(raw).is_empty()


def missing_required(questions: Iterable[Question], answers: Mapping[str, Any]) -> List[Question]:
    """Return the required questions from ``questions`` without an answer."""

    return [question for question in questions if question.required and not has_answer(question, answers)]


def can_advance(questions: Iterable[Question], answers: Mapping[str, Any]) -> bool:
    """Return whether every required question in ``questions`` is answered.

    Only presence is checked. Pattern and length validation belongs to the
    field renderer.
    """

    return not missing_required(questions, answers)
