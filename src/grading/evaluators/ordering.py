"""
Ordering evaluator.

Full credit requires the exact sequence. Partial credit strategies:
- adjacent_pairs: submitted neighbours that are also neighbours, in the same
  direction, in the correct order, over (n - 1)
- position_accuracy: items at their correct index, over n
- anything else: all-or-nothing
"""

from typing import Any

from ..partial_credit import (
    adjacent_pairs,
    all_or_nothing,
    count_adjacent_pairs,
    count_correct_positions,
    parse_strategy,
    position_accuracy,
)
from ..questions import OrderingQuestion
from ..results import OrderingDetails
from ..types import PartialCreditStrategy, QuestionType
from . import register
from .base import Evaluation


@register(QuestionType.ORDERING)
class OrderingEvaluator:
    """Evaluator for ordering / sequencing questions."""

    def evaluate(self, question: OrderingQuestion, answer: tuple[str, ...], **context: Any) -> Evaluation:
        content = question.content
        correct_order = list(content.correct_order)
        submitted = list(answer)
        is_correct = submitted == correct_order

        correct_positions = count_correct_positions(submitted, correct_order)
        adjacent_correct = count_adjacent_pairs(submitted, correct_order)
        n = len(correct_order)

        strategy = parse_strategy(content.partial_credit_strategy)
        if strategy is PartialCreditStrategy.ADJACENT_PAIRS:
            fraction = adjacent_pairs(submitted, correct_order)
        elif strategy is PartialCreditStrategy.POSITION_ACCURACY:
            fraction = position_accuracy(submitted, correct_order)
        else:
            fraction = all_or_nothing(is_correct)

        if is_correct:
            feedback = "Correct order!"
        else:
            feedback = f"Incorrect. {correct_positions}/{n} in correct position."

        return Evaluation(
            correct=is_correct,
            fraction=fraction,
            details=OrderingDetails(
                correct_positions=correct_positions,
                total_positions=n,
                adjacent_pairs_correct=adjacent_correct,
                total_adjacent_pairs=max(n - 1, 0),
                partial_credit_strategy=content.partial_credit_strategy,
                partial_credit_applied=not is_correct and fraction > 0,
            ),
            feedback=feedback,
        )

    def blank_details(self, question: OrderingQuestion) -> OrderingDetails:
        n = len(question.content.correct_order)
        return OrderingDetails(
            total_positions=n,
            total_adjacent_pairs=max(n - 1, 0),
            partial_credit_strategy=question.content.partial_credit_strategy,
        )
