"""
Base protocol and types for evaluators.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Protocol

from pydantic import BaseModel

from ..types import ResponseState


@dataclass(frozen=True)
class Evaluation:
    """Outcome of comparing one canonical answer against its question."""
    correct: bool
    details: BaseModel
    fraction: Fraction | None = None  # None: no partial credit, score follows `correct`
    feedback: str | None = None
    auto_graded: bool = True
    needs_review: bool = False  # engine could not (or must not) finalize the score

    @property
    def state(self) -> ResponseState:
        if self.needs_review or not self.auto_graded:
            return ResponseState.PENDING_MANUAL_REVIEW
        return ResponseState.AUTO_GRADED


class Evaluator(Protocol):
    """Protocol for question type evaluators."""

    def evaluate(self, question: Any, answer: Any, **context: Any) -> Evaluation:
        """Compare the canonical answer with the question's content."""
        ...

    def blank_details(self, question: Any) -> BaseModel:
        """Detail shape reported when the answer could not be read."""
        ...
