"""
Enumerations shared across the grading engine.
"""

from enum import Enum

from .errors import UnsupportedQuestionType


def to_snake(name: str) -> str:
    """"FillInBlank" / "fill-in blank" / "FILL_IN_BLANK" -> "fill_in_blank"."""
    key = name.strip().replace("-", "_").replace(" ", "_")
    if key.isupper() or key.islower() or "_" in key:
        return key.lower()
    return "".join(f"_{c}" if c.isupper() and i else c for i, c in enumerate(key)).lower()


class QuestionType(str, Enum):
    """Supported question types."""
    MULTIPLE_CHOICE_SINGLE = "multiple_choice_single"
    MULTIPLE_CHOICE_MULTI = "multiple_choice_multi"
    TRUE_FALSE = "true_false"
    MATCHING = "matching"
    ORDERING = "ordering"
    FILL_IN_BLANK = "fill_in_blank"
    SHORT_ANSWER = "short_answer"
    PROGRAM_SUBMISSION = "program_submission"

    @classmethod
    def parse(cls, value: "str | QuestionType") -> "QuestionType":
        """
        Resolve a question type from its wire name.

        Accepts snake_case ("fill_in_blank"), PascalCase ("FillInBlank") and
        any casing of either. Raises UnsupportedQuestionType otherwise.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnsupportedQuestionType(value)
        try:
            return cls(to_snake(value))
        except ValueError:
            raise UnsupportedQuestionType(value) from None


class PartialCreditStrategy(str, Enum):
    """Named policies for turning partial matches into a fractional score."""
    PROPORTIONAL = "proportional"
    PER_PAIR = "per_pair"
    ADJACENT_PAIRS = "adjacent_pairs"
    POSITION_ACCURACY = "position_accuracy"
    ALL_OR_NOTHING = "all_or_nothing"


class ResponseState(str, Enum):
    """Lifecycle of a submitted response."""
    SUBMITTED = "submitted"
    AUTO_GRADED = "auto_graded"
    PENDING_MANUAL_REVIEW = "pending_manual_review"
    GRADED = "graded"
