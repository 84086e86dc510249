"""
Review workflow helpers.

Responses the engine cannot finalize (short answers, sandbox failures) wait
in pending_manual_review until a human assigns a score. Attempt totals are
summed from the individual results.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .errors import InvalidStateTransition
from .result_builder import score_percentage
from .results import GradingResult
from .types import ResponseState


def apply_manual_grade(
    result: GradingResult,
    points_earned: Decimal | int | float | str,
    feedback: str | None = None,
) -> GradingResult:
    """
    Move a pending response to graded with a human-assigned score.

    Points are clamped to [0, pointsPossible]; full points make it correct.

    Raises:
        InvalidStateTransition: the result is not pending manual review
    """
    if result.status is not ResponseState.PENDING_MANUAL_REVIEW:
        raise InvalidStateTransition(
            f"Cannot grade a response in state '{result.status.value}'"
        )

    points = Decimal(str(points_earned))
    points = max(Decimal("0"), min(result.points_possible, points))

    return GradingResult(
        points_earned=points,
        points_possible=result.points_possible,
        is_correct=points == result.points_possible,
        auto_graded=False,
        status=ResponseState.GRADED,
        grading_details=result.grading_details,
        feedback=feedback if feedback is not None else result.feedback,
        score_percentage=score_percentage(points, result.points_possible),
    )


@dataclass(frozen=True)
class AttemptScore:
    """Totals for one quiz attempt."""
    total_score: Decimal
    max_possible_score: Decimal
    score_percentage: Decimal
    correct_count: int
    response_count: int
    pending_review: int

    @property
    def is_final(self) -> bool:
        return self.pending_review == 0


def summarize_attempt(results: Iterable[GradingResult]) -> AttemptScore:
    """Sum points over an attempt's responses. Pending responses count as zero."""
    total = Decimal("0")
    maximum = Decimal("0")
    correct = 0
    count = 0
    pending = 0

    for result in results:
        count += 1
        total += result.points_earned
        maximum += result.points_possible
        if result.is_correct:
            correct += 1
        if result.status is ResponseState.PENDING_MANUAL_REVIEW:
            pending += 1

    return AttemptScore(
        total_score=total,
        max_possible_score=maximum,
        score_percentage=score_percentage(total, maximum),
        correct_count=correct,
        response_count=count,
        pending_review=pending,
    )
