"""
Program submission evaluator (aggregation only).

Code is never executed here. The external sandbox runs the test cases and
hands back an ExecutionReport; this evaluator aggregates it:

    weighted score = sum(weight of passed tests) / sum(weight of all tests)

A missing report, an empty one, or a sandbox communication failure sends the
response to manual review instead of scoring the learner on the sandbox's
behalf.
"""

from typing import Any

from ..partial_credit import proportional
from ..questions import ProgramSubmissionQuestion
from ..results import ExecutionReport, ProgramSubmissionDetails, TestResult
from ..types import QuestionType
from . import register
from .base import Evaluation

SANDBOX_FAILURE_PREFIX = "Sandbox communication failure"


def _fill_outstanding(question: ProgramSubmissionQuestion, report: ExecutionReport) -> tuple[list[TestResult], list[str]]:
    """Mark every test case the sandbox never reported as runtime-errored."""
    reported = {r.test_number for r in report.test_results}
    results = list(report.test_results)
    errors = list(report.runtime_errors)

    for number, case in enumerate(question.content.test_cases, start=1):
        if number in reported:
            continue
        message = f"{SANDBOX_FAILURE_PREFIX}: {report.communication_error}"
        results.append(TestResult(
            test_number=number,
            input=case.input,
            expected=case.expected,
            passed=False,
            weight=case.weight,
            error=message,
        ))
        errors.append(f"Test {number}: {message}")

    return results, errors


@register(QuestionType.PROGRAM_SUBMISSION)
class ProgramSubmissionEvaluator:
    """Evaluator that aggregates sandbox test results."""

    def evaluate(
        self,
        question: ProgramSubmissionQuestion,
        answer: str,
        execution: ExecutionReport | None = None,
        **context: Any,
    ) -> Evaluation:
        if execution is None:
            return Evaluation(
                correct=False,
                details=self.blank_details(question),
                feedback="No execution results available; awaiting review.",
                auto_graded=False,
                needs_review=True,
            )

        if execution.communication_error is not None:
            results, runtime_errors = _fill_outstanding(question, execution)
            results.sort(key=lambda r: r.test_number)
            passed = sum(1 for r in results if r.passed)
            return Evaluation(
                correct=False,
                details=ProgramSubmissionDetails(
                    total_tests=len(results),
                    passed_tests=passed,
                    failed_tests=len(results) - passed,
                    test_results=results,
                    syntax_errors=list(execution.syntax_errors),
                    runtime_errors=runtime_errors,
                    total_execution_time_ms=sum(r.execution_time_ms for r in results),
                    weighted_score=0.0,
                    sandbox_error=execution.communication_error,
                ),
                feedback="The code runner could not be reached; this submission will be reviewed.",
                auto_graded=False,
                needs_review=True,
            )

        results = sorted(execution.test_results, key=lambda r: r.test_number)
        if not results:
            return Evaluation(
                correct=False,
                details=ProgramSubmissionDetails(
                    syntax_errors=list(execution.syntax_errors),
                    runtime_errors=list(execution.runtime_errors),
                ),
                feedback="No test results reported; awaiting review.",
                auto_graded=False,
                needs_review=True,
            )

        passed = [r for r in results if r.passed]
        total_weight = sum(r.weight for r in results)
        if total_weight > 0:
            fraction = proportional(sum(r.weight for r in passed), total_weight)
        else:
            fraction = proportional(len(passed), len(results))
        is_correct = len(passed) == len(results)

        if is_correct:
            feedback = "All tests passed!"
        elif execution.syntax_errors:
            feedback = "Your code has syntax errors."
        else:
            feedback = f"{len(passed)} of {len(results)} tests passed."

        return Evaluation(
            correct=is_correct,
            fraction=fraction,
            details=ProgramSubmissionDetails(
                total_tests=len(results),
                passed_tests=len(passed),
                failed_tests=len(results) - len(passed),
                test_results=results,
                syntax_errors=list(execution.syntax_errors),
                runtime_errors=list(execution.runtime_errors),
                total_execution_time_ms=sum(r.execution_time_ms for r in results),
                weighted_score=round(float(fraction), 4),
            ),
            feedback=feedback,
        )

    def blank_details(self, question: ProgramSubmissionQuestion) -> ProgramSubmissionDetails:
        return ProgramSubmissionDetails(total_tests=len(question.content.test_cases))
