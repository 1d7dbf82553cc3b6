"""Evaluate branching conditions against collected answers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Tuple, Union

from formwizard.models import Condition, to_answer

log = logging.getLogger("formwizard.rules")


def _joined(value: Union[str, Tuple[str, ...]]) -> str:
    if isinstance(value, tuple):
        return ",".join(value)
    return value


def evaluate(condition: Condition, answers: Mapping[str, Any]) -> bool:
    """Return whether ``condition`` holds for ``answers``.

    A missing or empty answer never satisfies a condition, whatever the
    operator. Sequence answers and values are joined with ``","`` before
    comparing. ``equals`` is case-sensitive, ``contains`` is not.

    Operators outside the known set count as satisfied so that forms authored
    with newer operators keep rendering. :class:`~formwizard.navigator.StepNavigator`
    reports such operators once per form.
    """

    raw = answers.get(condition.question_id)
    if raw is None:
        return False
    answer = to_answer(raw)
    if answer.is_empty():
        return False

    answer_text = answer.joined()
    expected = _joined(condition.value)
    operator = condition.operator

    if operator == "equals":
        return answer_text == expected
    if operator == "not_equals":
        return answer_text != expected
    if operator == "contains":
        return expected.lower() in answer_text.lower()
    if operator == "not_contains":
        return expected.lower() not in answer_text.lower()

    log.debug(
        "rules unknown operator • qid=%s • operator=%s • treated=satisfied",
        condition.question_id,
        operator,
    )
    return True


def evaluate_all(conditions: Iterable[Condition], answers: Mapping[str, Any]) -> bool:
    """Return ``True`` if every condition holds (an empty list holds trivially)."""

    return all(evaluate(condition, answers) for condition in conditions)
