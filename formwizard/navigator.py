"""Step sequencing over a form's flat question list.

A step is one screen of the wizard: a single ungrouped question, or every
visible member of a group. Steps are addressed by an index into
``form.questions``; the index of a grouped step is the position of the
group's first visible member (its *anchor*). Later members of the same group
are never navigated to on their own, so a group consumes exactly one
navigational position even when its members are not contiguous.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from formwizard.models import OPERATORS, Form, Group, Question
from formwizard.visibility import is_visible

log = logging.getLogger("formwizard.navigation")


class StepNavigator:
    """Compute step indexes and display sets for ``form``.

    The navigator keeps no pointer of its own; every query takes the index to
    start from and the live answers.
    """

    def __init__(self, form: Form) -> None:
        self.form = form
        self._questions: Tuple[Question, ...] = tuple(form.questions)
        self._group_ids: List[Optional[str]] = [
            group.id if group is not None else None
            for group in (form.group_for(question) for question in self._questions)
        ]
        self._report_definition_issues()

    def __len__(self) -> int:
        return len(self._questions)

    def _report_definition_issues(self) -> None:
        for question, group_id in zip(self._questions, self._group_ids):
            if question.group and group_id is None:
                log.warning(
                    "navigation dangling group • form=%s • qid=%s • group=%s • treated=ungrouped",
                    self.form.id,
                    question.id,
                    question.group,
                )
        for group_id, indexes in self.contiguity_issues().items():
            log.warning(
                "navigation non-contiguous group • form=%s • group=%s • indexes=%s",
                self.form.id,
                group_id,
                indexes,
            )
        for operator, question_ids in self.unknown_operators().items():
            log.warning(
                "navigation unknown operator • form=%s • operator=%s • qids=%s • treated=satisfied",
                self.form.id,
                operator,
                question_ids,
            )

    def unknown_operators(self) -> Dict[str, List[str]]:
        """Return ``operator -> question ids`` for branching operators outside the known set."""

        found: Dict[str, List[str]] = {}
        for question in self._questions:
            if question.branching is None:
                continue
            for condition in question.branching.conditions:
                if condition.operator not in OPERATORS:
                    found.setdefault(condition.operator, []).append(question.id)
        return found

    def contiguity_issues(self) -> Dict[str, List[int]]:
        """Return ``group_id -> member indexes`` for groups with gaps between members."""

        members: Dict[str, List[int]] = {}
        for index, group_id in enumerate(self._group_ids):
            if group_id is not None:
                members.setdefault(group_id, []).append(index)
        return {
            group_id: indexes
            for group_id, indexes in members.items()
            if indexes[-1] - indexes[0] + 1 != len(indexes)
        }

    def _visible(self, index: int, answers: Mapping[str, Any]) -> bool:
        return is_visible(self._questions[index], answers)

    def _step_anchor(self, index: int, answers: Mapping[str, Any]) -> Optional[int]:
        """Return the anchor index of the step containing ``index`` if it is visible."""

        if not self._visible(index, answers):
            return None
        group_id = self._group_ids[index]
        if group_id is None:
            return index
        for candidate in range(index):
            if self._group_ids[candidate] == group_id and self._visible(candidate, answers):
                return candidate
        return index

    def is_anchor(self, index: int, answers: Mapping[str, Any]) -> bool:
        if index < 0 or index >= len(self._questions):
            return False
        return self._step_anchor(index, answers) == index

    def anchors(self, answers: Mapping[str, Any]) -> List[int]:
        """Return the indexes of every navigable step in order."""

        return [index for index in range(len(self._questions)) if self.is_anchor(index, answers)]

    def visible_index_from(self, pointer: int, answers: Mapping[str, Any]) -> Optional[int]:
        """Return the step index a renderer should show for ``pointer``.

        This is the anchor of the pointer's own step when it is visible,
        otherwise the next visible step, otherwise the closest earlier one.
        ``None`` means no question in the form is visible.
        """

        if not self._questions:
            return None
        pointer = min(max(pointer, 0), len(self._questions) - 1)
        anchor = self._step_anchor(pointer, answers)
        if anchor is not None:
            return anchor
        forward = self.next_index(pointer, answers)
        if forward != pointer:
            return forward
        backward = self.previous_index(pointer, answers)
        if backward != pointer:
            return backward
        return None

    def next_index(self, index: int, answers: Mapping[str, Any]) -> int:
        """Return the first step after ``index``, or ``index`` when there is none."""

        for candidate in range(index + 1, len(self._questions)):
            if self.is_anchor(candidate, answers):
                return candidate
        return index

    def previous_index(self, index: int, answers: Mapping[str, Any]) -> int:
        """Return the closest step before ``index``, or ``index`` when there is none."""

        for candidate in range(min(index, len(self._questions)) - 1, -1, -1):
            if self.is_anchor(candidate, answers):
                return candidate
        return index

    def is_first(self, index: int, answers: Mapping[str, Any]) -> bool:
        return self.previous_index(index, answers) == index

    def is_last(self, index: int, answers: Mapping[str, Any]) -> bool:
        return self.next_index(index, answers) == index

    def group_at(self, index: int) -> Optional[Group]:
        if index < 0 or index >= len(self._questions):
            return None
        return self.form.group_for(self._questions[index])

    def display_at(
        self, index: Optional[int], answers: Mapping[str, Any]
    ) -> Tuple[List[Question], Optional[Group]]:
        """Return the visible questions shown at ``index`` and their group."""

        if index is None or index < 0 or index >= len(self._questions):
            return [], None
        group = self.group_at(index)
        if group is None:
            question = self._questions[index]
            return ([question] if is_visible(question, answers) else []), None
        members = [
            question
            for question, group_id in zip(self._questions, self._group_ids)
            if group_id == group.id and is_visible(question, answers)
        ]
        return members, group
