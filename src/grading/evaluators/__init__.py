"""
Evaluators for each question type.

Each question type has its own module with an evaluator class exposing:
- evaluate(): compare a canonical answer with the question content
- blank_details(): the detail shape used when the answer was unreadable

Importing this package fails if any QuestionType has no evaluator.
"""

from typing import TYPE_CHECKING

from ..errors import UnsupportedQuestionType
from ..types import QuestionType

if TYPE_CHECKING:
    from .base import Evaluator


# Evaluator registry - populated by @register decorator
EVALUATORS: dict[QuestionType, "Evaluator"] = {}


def register(question_type: QuestionType):
    """Decorator to register an evaluator."""
    def decorator(cls):
        if question_type in EVALUATORS:
            raise RuntimeError(f"Evaluator for {question_type.value} registered twice")
        EVALUATORS[question_type] = cls()
        return cls
    return decorator


def get_evaluator(question_type: "str | QuestionType") -> "Evaluator":
    """
    Get the evaluator for a question type.

    Raises:
        UnsupportedQuestionType: unknown type or no evaluator registered
    """
    qt = QuestionType.parse(question_type)
    try:
        return EVALUATORS[qt]
    except KeyError:
        raise UnsupportedQuestionType(question_type) from None


# Import evaluators to trigger registration
from . import multiple_choice
from . import true_false
from . import matching
from . import ordering
from . import fill_in_blank
from . import short_answer
from . import program_submission

_missing = [qt.value for qt in QuestionType if qt not in EVALUATORS]
if _missing:
    raise RuntimeError(f"Question types without an evaluator: {_missing}")

__all__ = [
    "EVALUATORS",
    "get_evaluator",
    "register",
]
