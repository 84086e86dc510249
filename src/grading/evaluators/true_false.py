"""
True/False evaluator.
"""

from typing import Any

from ..questions import TrueFalseQuestion
from ..results import TrueFalseDetails
from ..types import QuestionType
from . import register
from .base import Evaluation


@register(QuestionType.TRUE_FALSE)
class TrueFalseEvaluator:
    """Evaluator for true/false statements."""

    def evaluate(self, question: TrueFalseQuestion, answer: bool, **context: Any) -> Evaluation:
        expected = question.content.correct_answer
        is_correct = answer is expected

        return Evaluation(
            correct=is_correct,
            details=TrueFalseDetails(submitted=answer, correct_answer=expected),
            feedback="Correct!" if is_correct else f"Incorrect. The statement is {str(expected).lower()}.",
        )

    def blank_details(self, question: TrueFalseQuestion) -> TrueFalseDetails:
        return TrueFalseDetails(correct_answer=question.content.correct_answer)
