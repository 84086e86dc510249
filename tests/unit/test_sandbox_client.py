"""
Unit tests for the code execution sandbox client.
"""

import asyncio

import httpx
import pytest
from httpx import Request, Response

from src.grading import grade_program_submission
from src.grading.errors import SandboxCommunicationError
from src.grading.questions import ProgramSubmissionContent
from src.grading.types import ResponseState
from src.integrations.sandbox_client import ExecutionRequest, SandboxClient

API_URL = "http://sandbox.test"


@pytest.fixture
def content():
    """Two test cases, python."""
    return ProgramSubmissionContent.model_validate({
        "language": "python",
        "testCases": [
            {"input": "1", "expected": "1"},
            {"input": "2", "expected": "2", "weight": 3},
        ],
        "timeLimitMs": 500,
        "memoryLimitMb": 32,
    })


@pytest.fixture
def client():
    return SandboxClient(api_url=API_URL, timeout_ms=1000, retry_attempts=3, backoff_base_seconds=0)


def verdict(passed=True, actual="1", error=None, error_type=None):
    return {
        "passed": passed,
        "actual": actual,
        "executionTimeMs": 12,
        "error": error,
        "errorType": error_type,
    }


def ok(data):
    return Response(200, json=data, request=Request("POST", f"{API_URL}/execute"))


class TestExecutionRequest:

    def test_to_dict(self):
        request = ExecutionRequest(
            language="python",
            code="print(1)",
            input="",
            expected="1",
            time_limit_ms=500,
            memory_limit_mb=32,
        )
        assert request.to_dict() == {
            "language": "python",
            "code": "print(1)",
            "input": "",
            "expected": "1",
            "timeLimitMs": 500,
            "memoryLimitMb": 32,
        }


class TestSandboxClient:

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("SANDBOX_URL", "http://runner:9000/")
        monkeypatch.setenv("SANDBOX_TIMEOUT_MS", "2500")
        client = SandboxClient()
        assert client.api_url == "http://runner:9000"
        assert client.timeout_ms == 2500
        assert client.retry_attempts == 3

    @pytest.mark.asyncio
    async def test_run_tests_all_passed(self, client, content, monkeypatch):
        sent = []

        async def mock_post(url, json):
            sent.append((url, json))
            return ok(verdict(actual=json["expected"]))

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("print(input())", content)

        assert [r.passed for r in report.test_results] == [True, True]
        assert [r.test_number for r in report.test_results] == [1, 2]
        assert str(report.test_results[1].weight) == "3"
        assert report.communication_error is None
        assert sent[0][0] == f"{API_URL}/execute"
        assert sent[0][1]["timeLimitMs"] == 500
        assert sent[0][1]["memoryLimitMb"] == 32

    @pytest.mark.asyncio
    async def test_syntax_errors_are_deduplicated(self, client, content, monkeypatch):
        async def mock_post(url, json):
            return ok(verdict(passed=False, actual=None, error="invalid syntax", error_type="syntax"))

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("print(", content)

        assert report.syntax_errors == ["invalid syntax"]
        assert report.runtime_errors == []

    @pytest.mark.asyncio
    async def test_runtime_errors_per_test(self, client, content, monkeypatch):
        async def mock_post(url, json):
            return ok(verdict(passed=False, actual=None, error="ZeroDivisionError", error_type="runtime"))

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("1/0", content)

        assert report.runtime_errors == ["Test 1: ZeroDivisionError", "Test 2: ZeroDivisionError"]

    @pytest.mark.asyncio
    async def test_timeout_fails_test_and_continues(self, content, monkeypatch):
        client = SandboxClient(api_url=API_URL, retry_attempts=1, backoff_base_seconds=0)
        calls = 0

        async def mock_post(url, json):
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(1)
            return ok(verdict(actual=json["expected"]))

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("print(input())", content, timeout_ms=50)

        first, second = report.test_results
        assert not first.passed
        assert first.error == "Timed out after 50 ms"
        assert second.passed
        assert report.runtime_errors == ["Test 1: Timed out after 50 ms"]
        assert report.communication_error is None

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, client, monkeypatch):
        attempts = 0

        async def mock_post(url, json):
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                return Response(503, request=Request("POST", url))
            return ok(verdict())

        monkeypatch.setattr(client.client, "post", mock_post)
        request = ExecutionRequest("python", "print(1)", "", "1", 500, 32)

        result = await client.execute(request)
        assert result["passed"] is True
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, client, monkeypatch):
        attempts = 0

        async def mock_post(url, json):
            nonlocal attempts
            attempts += 1
            return Response(400, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)
        with pytest.raises(SandboxCommunicationError):
            await client.execute(ExecutionRequest("python", "x", "", "", 500, 32))
        assert attempts == 1

    @pytest.mark.asyncio
    async def test_invalid_verdict(self, client, monkeypatch):
        async def mock_post(url, json):
            return ok({"status": "done"})

        monkeypatch.setattr(client.client, "post", mock_post)
        with pytest.raises(SandboxCommunicationError):
            await client.execute(ExecutionRequest("python", "x", "", "", 500, 32))

    @pytest.mark.asyncio
    async def test_unreachable_sandbox_reports_communication_error(self, client, content, monkeypatch):
        async def mock_post(url, json):
            raise httpx.ConnectError("connection refused", request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("print(input())", content)

        assert report.test_results == []
        assert "Sandbox unavailable after 3 attempts" in report.communication_error

    @pytest.mark.asyncio
    async def test_bad_verdict_field_reports_communication_error(self, client, content, monkeypatch):
        calls = 0

        async def mock_post(url, json):
            nonlocal calls
            calls += 1
            if calls == 1:
                return ok(verdict(actual=json["expected"]))
            return ok({"passed": True, "executionTimeMs": "fast"})

        monkeypatch.setattr(client.client, "post", mock_post)
        report = await client.run_tests("print(input())", content)

        assert [r.test_number for r in report.test_results] == [1]
        assert "Unexpected sandbox verdict for test 2" in report.communication_error

    @pytest.mark.asyncio
    async def test_bad_verdict_sends_submission_to_review(self, client, monkeypatch):
        question = {
            "questionType": "program_submission",
            "pointsPossible": 10,
            "content": {"testCases": [{"input": "1", "expected": "1"}]},
        }

        async def mock_post(url, json):
            return ok({"passed": True, "executionTimeMs": "fast"})

        monkeypatch.setattr(client.client, "post", mock_post)
        result = await grade_program_submission(question, {"code": "print(input())"}, client)

        assert result.status is ResponseState.PENDING_MANUAL_REVIEW
        assert result.points_earned == 0
        assert not result.is_correct
        assert result.grading_details.test_results[0].error.startswith("Sandbox communication failure")

    @pytest.mark.asyncio
    async def test_health_check(self, client, monkeypatch):
        async def mock_get(url, timeout):
            return Response(200, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)
        assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self, client, monkeypatch):
        async def mock_get(url, timeout):
            raise httpx.ConnectError("down", request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)
        assert await client.health_check() is False
