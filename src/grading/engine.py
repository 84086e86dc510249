"""
Answer evaluation engine.

evaluate() is the single entry point for grading one response:

    payload -> normalize -> dispatch -> evaluator -> partial credit -> GradingResult

It is a pure function of its inputs: no shared state, safe to call
concurrently, and two calls with the same inputs return equal results.
Bad client input never raises; an unknown question type always does.

Usage:
    result = evaluate(question, {"selectedOptionId": "b"})
    result.to_dict()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from loguru import logger
from pydantic import ValidationError

from .errors import MalformedAnswerPayload
from .evaluators import get_evaluator
from .normalizer import normalize
from .questions import ProgramSubmissionQuestion, QuestionBase, parse_question
from .result_builder import (
    SANDBOX_REVIEW_FEEDBACK,
    build_malformed_result,
    build_result,
    build_review_result,
)
from .results import ExecutionReport, GradingResult, ProgramSubmissionDetails
from .types import QuestionType

if TYPE_CHECKING:
    from src.integrations.sandbox_client import SandboxClient


def evaluate(
    question: QuestionBase | Mapping[str, Any],
    payload: Any,
    *,
    execution: ExecutionReport | Mapping[str, Any] | None = None,
) -> GradingResult:
    """
    Grade one answer payload against its question.

    Args:
        question: QuestionDefinition model or its stored JSON. pointsPossible
            always comes from here, never from the payload.
        payload: the learner's answer, bare or wrapped
        execution: sandbox results (program submissions only)

    Returns:
        GradingResult

    Raises:
        UnsupportedQuestionType: no evaluator for the question type
        pydantic.ValidationError: question content does not fit its type
    """
    question = parse_question(question)
    question_type = question.question_type
    evaluator = get_evaluator(question_type)

    try:
        answer = normalize(question_type, payload)
    except MalformedAnswerPayload as e:
        logger.warning(f"Malformed answer payload: {e.reason} (type={question_type.value})")
        details = evaluator.blank_details(question)
        if question_type is QuestionType.SHORT_ANSWER:
            # Short answers are never finalized by the engine, readable or not
            return build_review_result(details, question.points_possible)
        return build_malformed_result(details, question.points_possible)

    if isinstance(execution, Mapping):
        try:
            execution = ExecutionReport.model_validate(execution)
        except ValidationError as e:
            # Garbled sandbox output is a communication failure, not a wrong answer
            reason = f"Unreadable execution report: {e.error_count()} invalid field(s)"
            logger.error(f"{reason} (type={question_type.value})")
            details = evaluator.blank_details(question)
            if isinstance(details, ProgramSubmissionDetails):
                details = details.model_copy(update={"sandbox_error": reason})
            return build_review_result(details, question.points_possible, SANDBOX_REVIEW_FEEDBACK)

    try:
        evaluation = evaluator.evaluate(question, answer, execution=execution)
    except Exception:
        logger.exception(f"Evaluator for {question_type.value} failed; routing to manual review")
        return build_review_result(evaluator.blank_details(question), question.points_possible)

    result = build_result(evaluation, question.points_possible)
    logger.debug(
        f"Graded {question_type.value}: {result.points_earned}/{result.points_possible} "
        f"correct={result.is_correct} status={result.status.value}"
    )
    return result


async def grade_program_submission(
    question: ProgramSubmissionQuestion | Mapping[str, Any],
    payload: Any,
    sandbox: "SandboxClient",
    *,
    timeout_ms: int | None = None,
) -> GradingResult:
    """
    Run a program submission through the sandbox, then grade the report.

    Each test case is bounded by timeout_ms; cancelling the awaiting task
    cancels the in-flight sandbox call.
    """
    question = parse_question(question)
    if not isinstance(question, ProgramSubmissionQuestion):
        raise TypeError(f"Expected a program_submission question, got {question.question_type.value}")

    try:
        code = normalize(QuestionType.PROGRAM_SUBMISSION, payload)
    except MalformedAnswerPayload:
        # Nothing to run; evaluate() records the malformed payload
        return evaluate(question, payload)

    report = await sandbox.run_tests(code, question.content, timeout_ms=timeout_ms)
    return evaluate(question, code, execution=report)
