"""Multi-step registration form engine."""

from .conditions import evaluate, evaluate_all  # noqa: F401
from .gate import can_advance, missing_required  # noqa: F401
from .models import (  # noqa: F401
    AnswerSet,
    Condition,
    Form,
    Group,
    Multiple,
    Question,
    Single,
)
from .navigator import StepNavigator  # noqa: F401
from .session import FormSession, NavigationResult, StepView  # noqa: F401
from .visibility import is_visible  # noqa: F401
