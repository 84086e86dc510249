"""
Matching evaluator.

Each submitted left/right pair is checked against the declared correct pairs.
With the "per_pair" strategy the score is the share of correct pairs;
any other strategy grades all-or-nothing.
"""

from typing import Any

from ..partial_credit import all_or_nothing, parse_strategy, per_pair
from ..questions import MatchingQuestion, MatchPair
from ..results import MatchingDetails, PairResult
from ..types import PartialCreditStrategy, QuestionType
from . import register
from .base import Evaluation


@register(QuestionType.MATCHING)
class MatchingEvaluator:
    """Evaluator for matching questions."""

    def evaluate(self, question: MatchingQuestion, answer: tuple[MatchPair, ...], **context: Any) -> Evaluation:
        content = question.content
        correct_set = set(content.correct_pairs)
        total = len(correct_set)

        pair_results = [
            PairResult(left=p.left, right=p.right, correct=p in correct_set)
            for p in answer
        ]
        correct_count = sum(1 for r in pair_results if r.correct)
        is_correct = correct_count == len(answer) and len(answer) == total

        strategy = parse_strategy(content.partial_credit_strategy)
        if strategy is PartialCreditStrategy.PER_PAIR:
            fraction = per_pair(correct_count, total, len(answer))
            applied = not is_correct and correct_count > 0
        else:
            fraction = all_or_nothing(is_correct)
            applied = False

        return Evaluation(
            correct=is_correct,
            fraction=fraction,
            details=MatchingDetails(
                correct_pairs=correct_count,
                total_pairs=total,
                pair_results=pair_results,
                partial_credit_strategy=content.partial_credit_strategy,
                partial_credit_applied=applied,
            ),
            feedback="All pairs matched!" if is_correct else f"{correct_count}/{total} pairs correct",
        )

    def blank_details(self, question: MatchingQuestion) -> MatchingDetails:
        return MatchingDetails(
            total_pairs=len(set(question.content.correct_pairs)),
            partial_credit_strategy=question.content.partial_credit_strategy,
        )
