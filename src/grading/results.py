"""
Grading output models.

GradingResult is what callers persist. gradingDetails carries one
type-specific detail shape so UIs can render per-pair / per-blank feedback.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Union

from pydantic import Field, model_validator

from .questions import CamelModel
from .types import ResponseState


# ========================================
# Sandbox execution records
# ========================================


class TestResult(CamelModel):
    """Outcome of one test case, as produced by the execution sandbox."""

    __test__ = False

    test_number: int
    input: str = ""
    expected: str = ""
    actual: str | None = None
    passed: bool = False
    weight: Decimal = Field(default=Decimal("1"), ge=0)
    execution_time_ms: int = 0
    error: str | None = None


class ExecutionReport(CamelModel):
    """Everything the sandbox reported back for one submission."""

    test_results: list[TestResult] = Field(default_factory=list)
    syntax_errors: list[str] = Field(default_factory=list)
    runtime_errors: list[str] = Field(default_factory=list)
    communication_error: str | None = None


# ========================================
# Type-specific grading details
# ========================================


class MultipleChoiceSingleDetails(CamelModel):
    selected_option: str | None = None
    correct_answer: str = ""


class MultipleChoiceMultiDetails(CamelModel):
    selected_options: list[str] = Field(default_factory=list)
    correct_selections: int = 0
    total_correct: int = 0
    incorrect_selections: int = 0
    partial_credit_rule: str = ""
    partial_credit_applied: bool = False


class TrueFalseDetails(CamelModel):
    submitted: bool | None = None
    correct_answer: bool | None = None


class PairResult(CamelModel):
    left: str
    right: str
    correct: bool


class MatchingDetails(CamelModel):
    correct_pairs: int = 0
    total_pairs: int = 0
    pair_results: list[PairResult] = Field(default_factory=list)
    partial_credit_strategy: str = ""
    partial_credit_applied: bool = False


class OrderingDetails(CamelModel):
    correct_positions: int = 0
    total_positions: int = 0
    adjacent_pairs_correct: int = 0
    total_adjacent_pairs: int = 0
    partial_credit_strategy: str = ""
    partial_credit_applied: bool = False


class BlankResult(CamelModel):
    position: int
    correct: bool
    submitted: str = ""
    accepted: list[str] = Field(default_factory=list)


class FillInBlankDetails(CamelModel):
    blank_results: list[BlankResult] = Field(default_factory=list)
    partial_credit_applied: bool = False


class KeywordMatch(CamelModel):
    keyword: str
    found: bool = False
    matched_text: str | None = None
    weight: Decimal = Decimal("0")
    points_earned: Decimal = Decimal("0")


class ShortAnswerDetails(CamelModel):
    keyword_matches: list[KeywordMatch] = Field(default_factory=list)
    total_keyword_score: Decimal = Decimal("0")
    keyword_score_fraction: float = 0.0
    required_keywords_found: bool = False
    word_count: int = 0
    character_count: int = 0
    within_length_limits: bool = False
    meets_score_threshold: bool = False
    suggested_points: Decimal = Decimal("0")
    manual_review_needed: bool = True


class ProgramSubmissionDetails(CamelModel):
    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    test_results: list[TestResult] = Field(default_factory=list)
    syntax_errors: list[str] = Field(default_factory=list)
    runtime_errors: list[str] = Field(default_factory=list)
    total_execution_time_ms: int = 0
    weighted_score: float = 0.0
    sandbox_error: str | None = None


GradingDetails = Union[
    MultipleChoiceSingleDetails,
    MultipleChoiceMultiDetails,
    TrueFalseDetails,
    MatchingDetails,
    OrderingDetails,
    FillInBlankDetails,
    ShortAnswerDetails,
    ProgramSubmissionDetails,
]


# ========================================
# Final result
# ========================================


class GradingResult(CamelModel):
    """Score, correctness flag and structured explanation for one response."""

    points_earned: Decimal
    points_possible: Decimal
    is_correct: bool
    auto_graded: bool
    status: ResponseState
    grading_details: GradingDetails | None = None
    feedback: str | None = None
    score_percentage: Decimal = Decimal("0")

    @model_validator(mode="after")
    def _check_invariants(self) -> "GradingResult":
        if not (Decimal("0") <= self.points_earned <= self.points_possible):
            raise ValueError(
                f"pointsEarned {self.points_earned} outside [0, {self.points_possible}]"
            )
        if self.is_correct and self.points_earned != self.points_possible:
            raise ValueError("isCorrect requires full credit")
        return self

    @property
    def is_graded(self) -> bool:
        """True once a final score exists (auto or manual)."""
        return self.status in (ResponseState.AUTO_GRADED, ResponseState.GRADED)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible camelCase dict (Decimals rendered as strings)."""
        return self.model_dump(mode="json", by_alias=True)
