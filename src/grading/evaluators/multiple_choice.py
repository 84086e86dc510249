"""
Multiple choice evaluators.

- Single: one option id, exact case-sensitive match.
- Multi: a set of option ids; correct only when the set equals the key.

Multi content declares a partialCreditRule ("proportional", "penalty", ...),
but no formula for it has been agreed, so every rule grades all-or-nothing
and the rule is only echoed in the details.
"""

from typing import Any

from loguru import logger

from ..questions import MultipleChoiceMultiQuestion, MultipleChoiceSingleQuestion
from ..results import MultipleChoiceMultiDetails, MultipleChoiceSingleDetails
from ..types import PartialCreditStrategy, QuestionType
from . import register
from .base import Evaluation


@register(QuestionType.MULTIPLE_CHOICE_SINGLE)
class MultipleChoiceSingleEvaluator:
    """Evaluator for single-answer multiple choice."""

    def evaluate(self, question: MultipleChoiceSingleQuestion, answer: str, **context: Any) -> Evaluation:
        expected = question.content.correct_answer
        is_correct = answer == expected

        return Evaluation(
            correct=is_correct,
            details=MultipleChoiceSingleDetails(selected_option=answer, correct_answer=expected),
            feedback="Correct!" if is_correct else "Incorrect.",
        )

    def blank_details(self, question: MultipleChoiceSingleQuestion) -> MultipleChoiceSingleDetails:
        return MultipleChoiceSingleDetails(correct_answer=question.content.correct_answer)


@register(QuestionType.MULTIPLE_CHOICE_MULTI)
class MultipleChoiceMultiEvaluator:
    """Evaluator for multi-select multiple choice (set semantics)."""

    def evaluate(self, question: MultipleChoiceMultiQuestion, answer: frozenset[str], **context: Any) -> Evaluation:
        content = question.content
        expected = frozenset(content.correct_answers)
        is_correct = answer == expected

        rule = content.partial_credit_rule
        if rule != PartialCreditStrategy.ALL_OR_NOTHING.value:
            logger.debug(f"partialCreditRule '{rule}' not applied; grading all-or-nothing")

        details = MultipleChoiceMultiDetails(
            selected_options=sorted(answer),
            correct_selections=len(answer & expected),
            total_correct=len(expected),
            incorrect_selections=len(answer - expected),
            partial_credit_rule=rule,
            partial_credit_applied=False,
        )

        if is_correct:
            feedback = "Correct!"
        else:
            feedback = f"Incorrect. {details.correct_selections}/{details.total_correct} correct options selected"
            if details.incorrect_selections:
                feedback += f", {details.incorrect_selections} wrong"
            feedback += "."

        return Evaluation(correct=is_correct, details=details, feedback=feedback)

    def blank_details(self, question: MultipleChoiceMultiQuestion) -> MultipleChoiceMultiDetails:
        return MultipleChoiceMultiDetails(
            total_correct=len(set(question.content.correct_answers)),
            partial_credit_rule=question.content.partial_credit_rule,
        )
