"""
Grading: answer evaluation and auto-grading for quiz responses.

Given a question's correct-answer definition and a learner's answer payload,
determines correctness, computes a (possibly partial) score and explains it.

Components:
- normalizer: raw-or-wrapped payloads -> one canonical value per type
- evaluators: one evaluator per question type, registered by type
- partial_credit: proportional / per_pair / adjacent_pairs / position_accuracy
- result_builder: Evaluation -> GradingResult
- engine: evaluate() and the async program submission path
- review: manual grading transition and attempt totals
"""

from .engine import evaluate, grade_program_submission
from .errors import (
    GradingError,
    InvalidStateTransition,
    MalformedAnswerPayload,
    SandboxCommunicationError,
    UnsupportedQuestionType,
)
from .evaluators import EVALUATORS, get_evaluator
from .questions import QuestionBase, QuestionDefinition, parse_question
from .results import ExecutionReport, GradingResult, TestResult
from .review import AttemptScore, apply_manual_grade, summarize_attempt
from .types import PartialCreditStrategy, QuestionType, ResponseState

# Supported types derived from registered evaluators
SUPPORTED_QUESTION_TYPES = list(EVALUATORS.keys())

__all__ = [
    "AttemptScore",
    "EVALUATORS",
    "ExecutionReport",
    "GradingError",
    "GradingResult",
    "InvalidStateTransition",
    "MalformedAnswerPayload",
    "PartialCreditStrategy",
    "QuestionBase",
    "QuestionDefinition",
    "QuestionType",
    "ResponseState",
    "SUPPORTED_QUESTION_TYPES",
    "SandboxCommunicationError",
    "TestResult",
    "UnsupportedQuestionType",
    "apply_manual_grade",
    "evaluate",
    "get_evaluator",
    "grade_program_submission",
    "parse_question",
    "summarize_attempt",
]
