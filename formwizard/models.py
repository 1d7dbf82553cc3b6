"""Form definitions, answer values and helpers for loading them from JSON."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

log = logging.getLogger("formwizard.models")

QUESTION_TYPES = frozenset({"text", "email", "phone", "select", "multiselect", "date"})
OPTION_QUESTION_TYPES = frozenset({"select", "multiselect"})
FORM_STATUSES = frozenset({"draft", "scheduled", "published"})
GROUP_LAYOUTS = frozenset({"vertical", "horizontal", "grid"})
BRANCHING_ACTIONS = frozenset({"show", "hide"})
OPERATORS = frozenset({"equals", "not_equals", "contains", "not_contains"})


def _ensure_mapping(value: Any) -> Dict[str, Any]:
    """Return ``value`` as a dict if it is a mapping, otherwise an empty dict."""

    return dict(value) if isinstance(value, Mapping) else {}


def _ensure_list(value: Any) -> List[Any]:
    """Return ``value`` if it is a list, otherwise an empty list."""

    return list(value) if isinstance(value, (list, tuple)) else []


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _choice(value: Any, allowed: frozenset, default: str, *, what: str) -> str:
    text = _text(value).strip()
    if text in allowed:
        return text
    if text:
        log.warning("model fallback • field=%s • value=%s • using=%s", what, text, default)
    return default


# ---------------------------------------------------------------------------
# Answer values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Single:
    """An answer holding one string."""

    text: str

    def joined(self) -> str:
        return self.text

    def is_empty(self) -> bool:
        return not self.text

    def to_plain(self) -> str:
        return self.text


@dataclass(frozen=True)
class Multiple:
    """An ordered multiselect answer."""

    values: Tuple[str, ...] = ()

    def joined(self) -> str:
        return ",".join(self.values)

    def is_empty(self) -> bool:
        return not self.values

    def to_plain(self) -> List[str]:
        return list(self.values)


AnswerValue = Union[Single, Multiple]


def to_answer(raw: Any) -> AnswerValue:
    """Coerce ``raw`` into an :data:`AnswerValue`.

    Strings become :class:`Single`; lists, tuples and sets become
    :class:`Multiple` with every element rendered as text. ``None`` becomes an
    empty :class:`Single` so callers can treat it as a cleared answer.
    """

    if isinstance(raw, (Single, Multiple)):
        return raw
    if raw is None:
        return Single("")
    if isinstance(raw, str):
        return Single(raw)
    if isinstance(raw, (set, frozenset)):
        return Multiple(tuple(sorted(str(item) for item in raw)))
    if isinstance(raw, Sequence):
        return Multiple(tuple(str(item) for item in raw if item is not None))
    return Single(str(raw))


class AnswerSet(Mapping):
    """Answers collected during a session keyed by question id.

    Empty answers are never stored: recording one removes the entry instead.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Dict[str, AnswerValue] = {}
        for question_id, value in (initial or {}).items():
            self.set(question_id, value)

    def __getitem__(self, question_id: str) -> AnswerValue:
        return self._values[question_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AnswerSet({self.to_dict()!r})"

    def set(self, question_id: str, value: Any) -> None:
        answer = to_answer(value)
        if answer.is_empty():
            self._values.pop(question_id, None)
            return
        self._values[question_id] = answer

    def discard(self, question_id: str) -> None:
        self._values.pop(question_id, None)

    def clear(self) -> None:
        self._values.clear()

    def has_answer(self, question_id: str) -> bool:
        answer = self._values.get(question_id)
        return answer is not None and not answer.is_empty()

    def to_dict(self) -> Dict[str, Union[str, List[str]]]:
        """Return the answers as plain ``str`` / ``list[str]`` values."""

        return {key: value.to_plain() for key, value in self._values.items()}


# ---------------------------------------------------------------------------
# Form definition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnswerOption:
    id: str
    label: str
    value: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AnswerOption":
        data = _ensure_mapping(payload)
        value = _text(data.get("value"))
        return cls(
            id=_text(data.get("id"), value),
            label=_text(data.get("label"), value),
            value=value,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "value": self.value}


@dataclass(frozen=True)
class Validation:
    """Advisory validation metadata consumed by field renderers."""

    pattern: Optional[str] = None
    message: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["Validation"]:
        data = _ensure_mapping(payload)
        if not data:
            return None
        return cls(
            pattern=_optional_text(data.get("pattern")),
            message=_optional_text(data.get("message")),
            min_length=_optional_int(data.get("minLength")),
            max_length=_optional_int(data.get("maxLength")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.pattern is not None:
            payload["pattern"] = self.pattern
        if self.message is not None:
            payload["message"] = self.message
        if self.min_length is not None:
            payload["minLength"] = self.min_length
        if self.max_length is not None:
            payload["maxLength"] = self.max_length
        return payload

    def check(self, value: str) -> bool:
        """Return ``True`` if ``value`` satisfies the pattern and length bounds.

        An invalid regular expression is ignored rather than rejecting input.
        """

        if self.min_length is not None and len(value) < self.min_length:
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        if self.pattern:
            try:
                return re.search(self.pattern, value) is not None
            except re.error:
                log.warning("validation pattern invalid • pattern=%s", self.pattern)
        return True


@dataclass(frozen=True)
class Condition:
    question_id: str
    operator: str
    value: Union[str, Tuple[str, ...]]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Condition":
        data = _ensure_mapping(payload)
        raw_value = data.get("value")
        if isinstance(raw_value, (list, tuple)):
            value: Union[str, Tuple[str, ...]] = tuple(str(item) for item in raw_value)
        else:
            value = _text(raw_value)
        return cls(
            question_id=_text(data.get("questionId")),
            operator=_text(data.get("operator")).strip(),
            value=value,
        )

    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"questionId": self.question_id, "operator": self.operator, "value": value}


@dataclass(frozen=True)
class Branching:
    conditions: Tuple[Condition, ...] = ()
    action: str = "show"

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["Branching"]:
        data = _ensure_mapping(payload)
        if not data:
            return None
        conditions = tuple(
            Condition.from_dict(item)
            for item in _ensure_list(data.get("conditions"))
            if isinstance(item, Mapping)
        )
        action = _choice(data.get("action"), BRANCHING_ACTIONS, "show", what="branching.action")
        return cls(conditions=conditions, action=action)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conditions": [condition.to_dict() for condition in self.conditions],
            "action": self.action,
        }


@dataclass(frozen=True)
class Question:
    id: str
    type: str = "text"
    label: str = ""
    required: bool = False
    placeholder: Optional[str] = None
    options: Tuple[AnswerOption, ...] = ()
    group: Optional[str] = None
    branching: Optional[Branching] = None
    validation: Optional[Validation] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Question":
        data = _ensure_mapping(payload)
        qtype = _choice(data.get("type"), QUESTION_TYPES, "text", what="question.type")
        options: Tuple[AnswerOption, ...] = ()
        if qtype in OPTION_QUESTION_TYPES:
            options = tuple(
                AnswerOption.from_dict(item)
                for item in _ensure_list(data.get("options"))
                if isinstance(item, Mapping)
            )
        question_id = _text(data.get("id"))
        return cls(
            id=question_id,
            type=qtype,
            label=_text(data.get("label"), question_id),
            required=bool(data.get("required")),
            placeholder=_optional_text(data.get("placeholder")),
            options=options,
            group=_optional_text(data.get("group")),
            branching=Branching.from_dict(data.get("branching")),
            validation=Validation.from_dict(data.get("validation")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "required": self.required,
        }
        if self.placeholder is not None:
            payload["placeholder"] = self.placeholder
        if self.type in OPTION_QUESTION_TYPES:
            payload["options"] = [option.to_dict() for option in self.options]
        if self.group is not None:
            payload["group"] = self.group
        if self.branching is not None:
            payload["branching"] = self.branching.to_dict()
        if self.validation is not None:
            payload["validation"] = self.validation.to_dict()
        return payload


@dataclass(frozen=True)
class Group:
    id: str
    title: str = ""
    description: Optional[str] = None
    layout: str = "vertical"
    columns: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Group":
        data = _ensure_mapping(payload)
        group_id = _text(data.get("id"))
        return cls(
            id=group_id,
            title=_text(data.get("title"), group_id),
            description=_optional_text(data.get("description")),
            layout=_choice(data.get("layout"), GROUP_LAYOUTS, "vertical", what="group.layout"),
            columns=_optional_int(data.get("columns")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "title": self.title, "layout": self.layout}
        if self.description is not None:
            payload["description"] = self.description
        if self.columns is not None:
            payload["columns"] = self.columns
        return payload


@dataclass(frozen=True)
class Form:
    """An immutable form definition handed to a session.

    ``theme`` is carried through untouched; see :mod:`formwizard.theme` for
    turning it into styles.
    """

    id: str
    title: str = ""
    description: Optional[str] = None
    status: str = "draft"
    scheduled_date: Optional[str] = None
    questions: Tuple[Question, ...] = ()
    groups: Tuple[Group, ...] = ()
    theme: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Form":
        data = _ensure_mapping(payload)
        form_id = _text(data.get("id"))
        return cls(
            id=form_id,
            title=_text(data.get("title"), form_id),
            description=_optional_text(data.get("description")),
            status=_choice(data.get("status"), FORM_STATUSES, "draft", what="form.status"),
            scheduled_date=_optional_text(data.get("scheduledDate")),
            questions=tuple(
                Question.from_dict(item)
                for item in _ensure_list(data.get("questions"))
                if isinstance(item, Mapping)
            ),
            groups=tuple(
                Group.from_dict(item)
                for item in _ensure_list(data.get("groups"))
                if isinstance(item, Mapping)
            ),
            theme=_ensure_mapping(data.get("theme")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "questions": [question.to_dict() for question in self.questions],
            "groups": [group.to_dict() for group in self.groups],
            "theme": dict(self.theme),
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.scheduled_date is not None:
            payload["scheduledDate"] = self.scheduled_date
        return payload

    def group_for(self, question: Question) -> Optional[Group]:
        """Return the group ``question`` belongs to, or ``None``.

        Dangling references resolve to ``None`` so the question is treated as
        standalone.
        """

        if not question.group:
            return None
        for group in self.groups:
            if group.id == question.group:
                return group
        return None

    def question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None
