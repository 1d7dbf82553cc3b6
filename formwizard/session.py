"""Stateful wizard session combining navigation, visibility and the completion gate.

One :class:`FormSession` belongs to exactly one respondent run. A preview
shown next to a live run needs its own instance; sharing a session between
logical runs is not supported and is not detected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from formwizard.gate import can_advance
from formwizard.models import AnswerSet, Form, Group, Question
from formwizard.navigator import StepNavigator

log = logging.getLogger("formwizard.session")

CompletionCallback = Callable[[Dict[str, Union[str, List[str]]]], Any]


class NavigationResult(str, Enum):
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    RETREATED = "retreated"
    STAYED = "stayed"


@dataclass(frozen=True)
class StepView:
    """Everything a renderer needs to draw the current step."""

    questions: Tuple[Question, ...]
    group: Optional[Group]
    can_advance: bool
    is_first_step: bool
    is_last_step: bool
    index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questions": [question.to_dict() for question in self.questions],
            "group": self.group.to_dict() if self.group is not None else None,
            "canAdvance": self.can_advance,
            "isFirstStep": self.is_first_step,
            "isLastStep": self.is_last_step,
        }


class FormSession:
    """Drive a respondent through ``form`` one step at a time.

    ``on_complete`` receives the plain answer dict when :meth:`advance` is
    called on the last step. It is invoked once; if it raises, the error
    propagates and the session stays open so the caller can retry.
    """

    def __init__(self, form: Form, on_complete: Optional[CompletionCallback] = None) -> None:
        self.form = form
        self.on_complete = on_complete
        self.navigator = StepNavigator(form)
        self.answers = AnswerSet()
        self.pointer = 0
        self.completed = False

    def record_answer(self, question_id: str, value: Any) -> None:
        """Store ``value`` for ``question_id``; an empty value clears the answer.

        A completed session is frozen; call :meth:`reset` to start again.
        """

        if self.completed:
            log.warning("session closed • form=%s • qid=%s • ignored=answer", self.form.id, question_id)
            return
        if self.form.question(question_id) is None:
            log.warning("session unknown question • form=%s • qid=%s", self.form.id, question_id)
        self.answers.set(question_id, value)
        log.debug("session answer • form=%s • qid=%s", self.form.id, question_id)

    def clear_answer(self, question_id: str) -> None:
        if self.completed:
            log.warning("session closed • form=%s • qid=%s • ignored=clear", self.form.id, question_id)
            return
        self.answers.discard(question_id)

    def _current_index(self) -> Optional[int]:
        return self.navigator.visible_index_from(self.pointer, self.answers)

    def current_display(self) -> StepView:
        """Return the current step without changing the stored pointer.

        The view is recomputed on every call because visibility depends on the
        live answers.
        """

        index = self._current_index()
        questions, group = self.navigator.display_at(index, self.answers)
        if index is None:
            return StepView(
                questions=(),
                group=None,
                can_advance=True,
                is_first_step=True,
                is_last_step=True,
                index=None,
            )
        return StepView(
            questions=tuple(questions),
            group=group,
            can_advance=can_advance(questions, self.answers),
            is_first_step=self.navigator.is_first(index, self.answers),
            is_last_step=self.navigator.is_last(index, self.answers),
            index=index,
        )

    def can_advance(self) -> bool:
        return self.current_display().can_advance

    def sync_pointer(self) -> int:
        """Move the stored pointer onto the step :meth:`current_display` shows."""

        index = self._current_index()
        if index is not None and index != self.pointer:
            log.debug("session snap • form=%s • from=%s • to=%s", self.form.id, self.pointer, index)
            self.pointer = index
        return self.pointer

    def advance(self) -> NavigationResult:
        """Move to the next visible step, or complete the form on the last one."""

        if self.completed:
            return NavigationResult.COMPLETED

        view = self.current_display()
        if not view.can_advance:
            log.debug("session blocked • form=%s • index=%s", self.form.id, view.index)
            return NavigationResult.BLOCKED

        if view.index is None:
            return self._complete()

        target = self.navigator.next_index(view.index, self.answers)
        if target == view.index:
            return self._complete()

        log.info("session advance • form=%s • from=%s • to=%s", self.form.id, view.index, target)
        self.pointer = target
        return NavigationResult.ADVANCED

    def retreat(self) -> NavigationResult:
        """Move to the previous visible step; never completes the form."""

        if self.completed:
            return NavigationResult.STAYED
        index = self._current_index()
        if index is None:
            return NavigationResult.STAYED
        target = self.navigator.previous_index(index, self.answers)
        if target == index:
            self.pointer = index
            return NavigationResult.STAYED
        log.info("session retreat • form=%s • from=%s • to=%s", self.form.id, index, target)
        self.pointer = target
        return NavigationResult.RETREATED

    def progress(self) -> float:
        """Return the fraction of steps reached, counting the current one."""

        anchors = self.navigator.anchors(self.answers)
        index = self._current_index()
        if not anchors or index is None:
            return 1.0
        return (anchors.index(index) + 1) / len(anchors)

    def reset(self) -> None:
        self.answers.clear()
        self.pointer = 0
        self.completed = False

    def _complete(self) -> NavigationResult:
        payload = self.answers.to_dict()
        if self.on_complete is not None:
            self.on_complete(payload)
        self.completed = True
        log.info("session completed • form=%s • answers=%s", self.form.id, len(payload))
        return NavigationResult.COMPLETED
