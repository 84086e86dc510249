"""
Short answer evaluator (assistive only).

Short answers are never auto-finalized. The evaluator gathers statistics a
human grader uses: length, keyword hits (including synonyms), a weighted
keyword score and whether every required keyword appeared. The response is
always routed to manual review with zero points.
"""

import re
from decimal import Decimal
from fractions import Fraction
from typing import Any

from ..partial_credit import proportional, to_points
from ..questions import Keyword, ShortAnswerQuestion
from ..results import KeywordMatch, ShortAnswerDetails
from ..types import QuestionType
from . import register
from .base import Evaluation


def _find_keyword(text: str, keyword: Keyword) -> str | None:
    """Return the first matching text of the keyword or a synonym, whole words, any case."""
    for term in [keyword.word, *keyword.synonyms]:
        term = term.strip()
        if not term:
            continue
        match = re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text, re.IGNORECASE)
        if match:
            return match.group(0)
    return None


@register(QuestionType.SHORT_ANSWER)
class ShortAnswerEvaluator:
    """Evaluator that prepares short answers for manual grading."""

    def evaluate(self, question: ShortAnswerQuestion, answer: str, **context: Any) -> Evaluation:
        content = question.content

        matches = []
        for keyword in content.keywords:
            matched = _find_keyword(answer, keyword)
            matches.append(KeywordMatch(
                keyword=keyword.word,
                found=matched is not None,
                matched_text=matched,
                weight=keyword.weight,
                points_earned=keyword.weight if matched is not None else Decimal("0"),
            ))

        earned = sum((m.points_earned for m in matches), Decimal("0"))
        total = sum((k.weight for k in content.keywords), Decimal("0"))
        fraction = proportional(earned, total)
        required_found = all(m.found for m, k in zip(matches, content.keywords) if k.required)

        character_count = len(answer)
        details = ShortAnswerDetails(
            keyword_matches=matches,
            total_keyword_score=earned,
            keyword_score_fraction=round(float(fraction), 4),
            required_keywords_found=required_found,
            word_count=len(answer.split()),
            character_count=character_count,
            within_length_limits=content.min_length <= character_count <= content.max_length,
            meets_score_threshold=fraction >= Fraction(content.min_score_threshold),
            suggested_points=to_points(fraction, question.points_possible),
            manual_review_needed=True,
        )

        found = sum(1 for m in matches if m.found)
        return Evaluation(
            correct=False,
            details=details,
            feedback=f"Awaiting manual review ({found}/{len(matches)} keywords found).",
            auto_graded=False,
            needs_review=True,
        )

    def blank_details(self, question: ShortAnswerQuestion) -> ShortAnswerDetails:
        return ShortAnswerDetails(
            keyword_matches=[KeywordMatch(keyword=k.word, weight=k.weight) for k in question.content.keywords],
            required_keywords_found=not any(k.required for k in question.content.keywords),
        )
