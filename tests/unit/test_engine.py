"""
Unit tests for the evaluation engine entry points and result building.
"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.grading import evaluate, grade_program_submission
from src.grading.errors import UnsupportedQuestionType
from src.grading.evaluators import EVALUATORS
from src.grading.questions import (
    MultipleChoiceSingleContent,
    MultipleChoiceSingleQuestion,
    parse_question,
)
from src.grading.result_builder import (
    MALFORMED_FEEDBACK,
    SANDBOX_REVIEW_FEEDBACK,
    UNJUDGED_FEEDBACK,
    score_percentage,
)
from src.grading.results import ExecutionReport, GradingResult, TestResult
from src.grading.types import QuestionType, ResponseState


class TestParseQuestion:
    """Question definitions from stored JSON."""

    def test_pascal_case_type_and_string_content(self, mcs_question):
        mcs_question["questionType"] = "MultipleChoiceSingle"
        mcs_question["content"] = json.dumps(mcs_question["content"])
        question = parse_question(mcs_question)
        assert isinstance(question, MultipleChoiceSingleQuestion)
        assert question.content.correct_answer == "b"

    def test_snake_case_keys(self):
        question = parse_question({
            "question_type": "true_false",
            "points_possible": 4,
            "content": {"correct_answer": False},
        })
        assert question.points_possible == Decimal("4")
        assert question.content.correct_answer is False

    def test_points_default(self, true_false_question):
        del true_false_question["pointsPossible"]
        assert parse_question(true_false_question).points_possible == Decimal("10")

    def test_model_passes_through(self):
        question = MultipleChoiceSingleQuestion(
            question_type=QuestionType.MULTIPLE_CHOICE_SINGLE,
            content=MultipleChoiceSingleContent(correct_answer="a"),
        )
        assert parse_question(question) is question

    def test_unknown_type(self):
        with pytest.raises(UnsupportedQuestionType):
            parse_question({"questionType": "essay", "content": {}})

    def test_missing_type(self):
        with pytest.raises(UnsupportedQuestionType):
            parse_question({"content": {}})

    def test_content_must_fit_type(self):
        with pytest.raises(ValidationError):
            parse_question({"questionType": "matching", "content": {"correctAnswer": "a"}})


class TestEvaluate:
    """evaluate() contract."""

    def test_unsupported_type_raises(self):
        with pytest.raises(UnsupportedQuestionType):
            evaluate({"questionType": "hotspot", "content": {}}, "a")

    @pytest.mark.parametrize(
        "fixture,payload",
        [
            ("mcs_question", {"selectedOptionIds": ["a"]}),
            ("mcm_question", "a"),
            ("true_false_question", "yes"),
            ("matching_question", [["L1", "R1"]]),
            ("ordering_question", {"order": None}),
            ("fill_in_blank_question", 42),
            ("program_question", None),
        ],
    )
    def test_malformed_never_raises(self, request, fixture, payload):
        result = evaluate(request.getfixturevalue(fixture), payload)
        assert not result.is_correct
        assert result.points_earned == 0
        assert result.status is ResponseState.AUTO_GRADED
        assert result.feedback == MALFORMED_FEEDBACK
        assert result.grading_details is not None

    def test_idempotent(self, matching_question):
        pairs = [{"left": "L1", "right": "R1"}, {"left": "L2", "right": "R3"}]
        first = evaluate(matching_question, pairs)
        second = evaluate(matching_question, pairs)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_points_come_from_question(self, mcs_question):
        result = evaluate(mcs_question, {"selectedOptionId": "b", "pointsPossible": 1000})
        assert result.points_possible == Decimal("10")

    def test_zero_point_question(self, mcs_question):
        mcs_question["pointsPossible"] = 0
        result = evaluate(mcs_question, "b")
        assert result.is_correct
        assert result.points_earned == 0
        assert result.score_percentage == 0

    def test_to_dict_is_camel_case(self, mcs_question):
        data = evaluate(mcs_question, "b").to_dict()
        assert data["pointsEarned"] == "10"
        assert data["isCorrect"] is True
        assert data["autoGraded"] is True
        assert data["status"] == "auto_graded"
        assert data["gradingDetails"] == {"selectedOption": "b", "correctAnswer": "b"}

    def test_unreadable_execution_report_goes_to_review(self, program_question):
        # testNumber is missing from the only test result
        result = evaluate(program_question, "print(1)", execution={"testResults": [{"passed": True}]})

        assert result.status is ResponseState.PENDING_MANUAL_REVIEW
        assert result.auto_graded is False
        assert not result.is_correct
        assert result.points_earned == 0
        assert result.feedback == SANDBOX_REVIEW_FEEDBACK
        assert result.grading_details.total_tests == 3
        assert result.grading_details.sandbox_error.startswith("Unreadable execution report")

    def test_evaluator_crash_goes_to_review(self, mcs_question, monkeypatch):
        evaluator = EVALUATORS[QuestionType.MULTIPLE_CHOICE_SINGLE]

        def boom(question, answer, **context):
            raise RuntimeError("boom")

        monkeypatch.setattr(evaluator, "evaluate", boom)
        result = evaluate(mcs_question, "b")
        assert result.status is ResponseState.PENDING_MANUAL_REVIEW
        assert result.feedback == UNJUDGED_FEEDBACK
        assert result.points_earned == 0


class TestGradingResultInvariants:

    def test_points_within_range(self):
        with pytest.raises(ValidationError):
            GradingResult(
                points_earned=Decimal("11"),
                points_possible=Decimal("10"),
                is_correct=False,
                auto_graded=True,
                status=ResponseState.AUTO_GRADED,
            )

    def test_correct_requires_full_credit(self):
        with pytest.raises(ValidationError):
            GradingResult(
                points_earned=Decimal("5"),
                points_possible=Decimal("10"),
                is_correct=True,
                auto_graded=True,
                status=ResponseState.AUTO_GRADED,
            )

    def test_near_full_score_stays_below_full_points(self, program_question):
        program_question["pointsPossible"] = 1
        program_question["content"]["testCases"] = [
            {"input": "1", "expected": "1", "weight": 999},
            {"input": "2", "expected": "2", "weight": 1},
        ]
        report = {"testResults": [
            {"testNumber": 1, "passed": True, "weight": 999},
            {"testNumber": 2, "passed": False, "weight": 1},
        ]}
        result = evaluate(program_question, "print(input())", execution=report)

        assert not result.is_correct
        assert result.points_earned == Decimal("0.99")
        assert result.points_earned < result.points_possible
        assert result.score_percentage == Decimal("99.00")

    def test_percentage_hits_100_only_at_full_points(self):
        assert score_percentage(Decimal("999.99"), Decimal("1000")) == Decimal("99.99")
        assert score_percentage(Decimal("1000"), Decimal("1000")) == Decimal("100")

    def test_is_graded(self):
        result = GradingResult(
            points_earned=Decimal("0"),
            points_possible=Decimal("10"),
            is_correct=False,
            auto_graded=False,
            status=ResponseState.PENDING_MANUAL_REVIEW,
        )
        assert not result.is_graded


class FakeSandbox:
    """Stands in for SandboxClient.run_tests."""

    def __init__(self, report):
        self.report = report
        self.calls = []

    async def run_tests(self, code, content, timeout_ms=None):
        self.calls.append((code, timeout_ms))
        return self.report


class TestGradeProgramSubmission:

    @pytest.mark.asyncio
    async def test_runs_sandbox_then_grades(self, program_question):
        report = ExecutionReport(test_results=[
            TestResult(test_number=n, passed=True, weight=w)
            for n, w in ((1, 1), (2, 1), (3, 2))
        ])
        sandbox = FakeSandbox(report)

        result = await grade_program_submission(program_question, {"code": "print(input())"}, sandbox, timeout_ms=250)

        assert sandbox.calls == [("print(input())", 250)]
        assert result.is_correct
        assert result.points_earned == Decimal("10")

    @pytest.mark.asyncio
    async def test_malformed_payload_skips_sandbox(self, program_question):
        sandbox = FakeSandbox(ExecutionReport())
        result = await grade_program_submission(program_question, {"source": 1}, sandbox)
        assert sandbox.calls == []
        assert result.feedback == MALFORMED_FEEDBACK

    @pytest.mark.asyncio
    async def test_rejects_other_types(self, mcs_question):
        with pytest.raises(TypeError):
            await grade_program_submission(mcs_question, "b", FakeSandbox(ExecutionReport()))
