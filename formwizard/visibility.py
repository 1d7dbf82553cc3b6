"""Decide whether questions are shown given their branching rules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, List

from formwizard.conditions import evaluate_all
from formwizard.models import Question


def is_visible(question: Question, answers: Mapping[str, Any]) -> bool:
    """Determine whether ``question`` should be displayed.

    Questions without branching, or with an empty condition list, are always
    visible. Otherwise all conditions are combined with AND: a ``show`` rule
    displays the question when they all hold and a ``hide`` rule hides it in
    exactly that case.
    """

    branching = question.branching
    if branching is None or not branching.conditions:
        return True

    all_met = evaluate_all(branching.conditions, answers)
    if branching.action == "hide":
        return not all_met
    return all_met


def visible_questions(questions: Sequence[Question], answers: Mapping[str, Any]) -> List[Question]:
    """Return the questions from ``questions`` that are currently visible."""

    return [question for question in questions if is_visible(question, answers)]
