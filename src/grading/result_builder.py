"""
Grading result builder.

Turns an evaluator's Evaluation into the GradingResult callers persist:
fraction -> pointsEarned, the full-credit rule for isCorrect, and the
ungraded / unreadable variants.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from pydantic import BaseModel

from .evaluators.base import Evaluation
from .partial_credit import all_or_nothing, quantum, to_points
from .results import GradingResult
from .types import ResponseState

MALFORMED_FEEDBACK = "Your answer could not be read, so it was marked incorrect."
UNJUDGED_FEEDBACK = "This answer could not be graded automatically and has been sent for review."
SANDBOX_REVIEW_FEEDBACK = "The code runner returned results that could not be read; this submission will be reviewed."


def score_percentage(points_earned: Decimal, points_possible: Decimal) -> Decimal:
    """
    pointsEarned as a percentage of pointsPossible; 0 for zero-point questions.
    Only full points show as 100.
    """
    if points_possible <= 0:
        return Decimal("0")
    raw = points_earned / points_possible * 100
    percentage = raw.quantize(quantum(), rounding=ROUND_HALF_UP)
    if percentage >= 100 and points_earned < points_possible:
        percentage = raw.quantize(quantum(), rounding=ROUND_DOWN)
    return percentage


def build_result(evaluation: Evaluation, points_possible: Decimal) -> GradingResult:
    """Combine an evaluation with the question's authoritative point value."""
    if evaluation.state is ResponseState.PENDING_MANUAL_REVIEW:
        points_earned = Decimal("0")
    else:
        fraction = evaluation.fraction
        if fraction is None:
            fraction = all_or_nothing(evaluation.correct)
        points_earned = to_points(fraction, points_possible)

    is_correct = (
        evaluation.correct
        and evaluation.state is ResponseState.AUTO_GRADED
        and points_earned == points_possible
    )

    return GradingResult(
        points_earned=points_earned,
        points_possible=points_possible,
        is_correct=is_correct,
        auto_graded=evaluation.auto_graded and not evaluation.needs_review,
        status=evaluation.state,
        grading_details=evaluation.details,
        feedback=evaluation.feedback,
        score_percentage=score_percentage(points_earned, points_possible),
    )


def build_malformed_result(details: BaseModel, points_possible: Decimal) -> GradingResult:
    """Unreadable answer: scored as not correct, zero points."""
    return GradingResult(
        points_earned=Decimal("0"),
        points_possible=points_possible,
        is_correct=False,
        auto_graded=True,
        status=ResponseState.AUTO_GRADED,
        grading_details=details,
        feedback=MALFORMED_FEEDBACK,
    )


def build_review_result(
    details: BaseModel,
    points_possible: Decimal,
    feedback: str = UNJUDGED_FEEDBACK,
) -> GradingResult:
    """The engine could not judge: zero provisional points, pending manual review."""
    return GradingResult(
        points_earned=Decimal("0"),
        points_possible=points_possible,
        is_correct=False,
        auto_graded=False,
        status=ResponseState.PENDING_MANUAL_REVIEW,
        grading_details=details,
        feedback=feedback,
    )
