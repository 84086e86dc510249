"""
Fill-in-the-blank evaluator.

Submitted answers are matched to blanks by position. Both sides are trimmed
and lower-cased before comparison, so "  Paris " matches "paris" but
"paris!" does not. Every blank must match; there is no per-blank credit.
A blank without acceptedAnswers takes any answer; an empty list accepts none.

Content may carry caseSensitive / regexPattern per blank; matching ignores
them and always compares trimmed, case-folded text.
"""

from typing import Any

from ..questions import FillInBlankQuestion
from ..results import BlankResult, FillInBlankDetails
from ..types import QuestionType
from . import register
from .base import Evaluation


def _fold(text: str) -> str:
    return text.strip().lower()


@register(QuestionType.FILL_IN_BLANK)
class FillInBlankEvaluator:
    """Evaluator for fill-in-the-blank questions."""

    def evaluate(self, question: FillInBlankQuestion, answer: tuple[str, ...], **context: Any) -> Evaluation:
        blanks = question.content.ordered_blanks()

        results = []
        for i, blank in enumerate(blanks):
            submitted = answer[i] if i < len(answer) else ""
            if blank.accepted_answers is None:
                matched = True
            else:
                matched = _fold(submitted) in {_fold(a) for a in blank.accepted_answers}
            results.append(BlankResult(
                position=blank.position,
                correct=i < len(answer) and matched,
                submitted=submitted,
                accepted=list(blank.accepted_answers or []),
            ))

        count_matches = len(answer) == len(blanks)
        is_correct = count_matches and all(r.correct for r in results)

        if is_correct:
            feedback = "Correct!"
        elif not count_matches:
            feedback = f"Expected {len(blanks)} answers, got {len(answer)}."
        else:
            right = sum(1 for r in results if r.correct)
            feedback = f"{right}/{len(blanks)} blanks correct."

        return Evaluation(
            correct=is_correct,
            details=FillInBlankDetails(blank_results=results, partial_credit_applied=False),
            feedback=feedback,
        )

    def blank_details(self, question: FillInBlankQuestion) -> FillInBlankDetails:
        return FillInBlankDetails()
