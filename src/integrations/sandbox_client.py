"""
Code execution sandbox client.

Handles HTTP communication with the external sandbox that runs program
submissions against their test cases. The grading engine never executes code
itself; it only consumes the ExecutionReport built here.

Every test case round trip is bounded by a timeout. A test that runs out of
time is recorded as failed and the remaining tests still run. When the
sandbox cannot be reached after all retries, or answers with a verdict that
does not fit a TestResult, the report carries communicationError and the
tests finished so far.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from config import get_settings
from src.grading.errors import SandboxCommunicationError
from src.grading.questions import ProgramSubmissionContent, TestCase
from src.grading.results import ExecutionReport, TestResult


@dataclass
class ExecutionRequest:
    """Request payload for running one test case."""

    language: str
    code: str
    input: str
    expected: str
    time_limit_ms: int
    memory_limit_mb: int

    def to_dict(self) -> dict[str, Any]:
        """Convert request to API payload format."""
        return {
            "language": self.language,
            "code": self.code,
            "input": self.input,
            "expected": self.expected,
            "timeLimitMs": self.time_limit_ms,
            "memoryLimitMb": self.memory_limit_mb,
        }


def _append_once(errors: list[str], message: str) -> None:
    if message not in errors:
        errors.append(message)


class SandboxClient:
    """HTTP client for the code execution sandbox."""

    def __init__(
        self,
        api_url: str | None = None,
        timeout_ms: int | None = None,
        retry_attempts: int | None = None,
        backoff_base_seconds: float | None = None,
    ):
        """
        Initialize sandbox client.

        Args:
            api_url: Base URL for the sandbox API
            timeout_ms: Default bound for one test case round trip
            retry_attempts: Number of attempts on transport failure
            backoff_base_seconds: Base of the exponential backoff between attempts

        Unset arguments fall back to settings.
        """
        settings = get_settings()
        self.api_url = (api_url or settings.sandbox_url).rstrip("/")
        self.timeout_ms = timeout_ms or settings.sandbox_timeout_ms
        self.retry_attempts = retry_attempts or settings.sandbox_retry_attempts
        self.backoff_base_seconds = (
            settings.sandbox_backoff_base_seconds if backoff_base_seconds is None else backoff_base_seconds
        )
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_ms / 1000.0),
            follow_redirects=True,
        )

    async def __aenter__(self) -> "SandboxClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def execute(self, request: ExecutionRequest) -> dict[str, Any]:
        """
        Run one test case with retry logic.

        Returns:
            The sandbox's verdict: {passed, actual, executionTimeMs, error, errorType}

        Raises:
            SandboxCommunicationError: sandbox unreachable, rejecting requests,
                or answering with something that is not a verdict
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.post(
                    f"{self.api_url}/execute",
                    json=request.to_dict(),
                )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict) or not isinstance(data.get("passed"), bool):
                    raise SandboxCommunicationError(f"Unexpected sandbox response: {data!r}")
                return data

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code < 500:
                    # Don't retry on 4xx client errors
                    logger.error(f"Sandbox rejected request: {e.response.status_code}")
                    raise SandboxCommunicationError(
                        f"Sandbox rejected request with status {e.response.status_code}"
                    ) from e
                logger.warning(
                    f"Sandbox server error {e.response.status_code} on attempt "
                    f"{attempt + 1}/{self.retry_attempts}"
                )

            except ValueError as e:
                # Body was not JSON
                raise SandboxCommunicationError(f"Unreadable sandbox response: {e}") from e

            except httpx.RequestError as e:
                # Includes httpx.TimeoutException
                last_error = e
                logger.warning(
                    f"Sandbox request error on attempt {attempt + 1}/{self.retry_attempts}: {e!r}"
                )

            if attempt < self.retry_attempts - 1:
                await asyncio.sleep(self.backoff_base_seconds * 2 ** attempt)

        raise SandboxCommunicationError(
            f"Sandbox unavailable after {self.retry_attempts} attempts: {last_error!r}"
        )

    async def run_tests(
        self,
        code: str,
        content: ProgramSubmissionContent,
        timeout_ms: int | None = None,
    ) -> ExecutionReport:
        """
        Run every test case of a question against the submitted code.

        Args:
            code: learner's source code
            content: question content carrying the test cases and limits
            timeout_ms: bound for each test case (defaults to the client's)

        Returns:
            ExecutionReport; communicationError is set when the sandbox was lost
        """
        timeout_ms = timeout_ms or self.timeout_ms
        results: list[TestResult] = []
        syntax_errors: list[str] = []
        runtime_errors: list[str] = []

        for number, case in enumerate(content.test_cases, start=1):
            request = ExecutionRequest(
                language=content.language,
                code=code,
                input=case.input,
                expected=case.expected,
                time_limit_ms=content.time_limit_ms,
                memory_limit_mb=content.memory_limit_mb,
            )
            try:
                verdict = await asyncio.wait_for(self.execute(request), timeout=timeout_ms / 1000.0)
                result = self._to_result(number, case, verdict)
            except asyncio.TimeoutError:
                message = f"Timed out after {timeout_ms} ms"
                logger.warning(f"Test {number} {message.lower()}")
                results.append(self._failed(number, case, message, execution_time_ms=timeout_ms))
                runtime_errors.append(f"Test {number}: {message}")
                continue
            except SandboxCommunicationError as e:
                logger.error(f"Sandbox communication failed at test {number}: {e}")
                return ExecutionReport(
                    test_results=results,
                    syntax_errors=syntax_errors,
                    runtime_errors=runtime_errors,
                    communication_error=str(e),
                )

            results.append(result)
            if result.error:
                if verdict.get("errorType") == "syntax":
                    _append_once(syntax_errors, result.error)
                else:
                    runtime_errors.append(f"Test {number}: {result.error}")

        return ExecutionReport(
            test_results=results,
            syntax_errors=syntax_errors,
            runtime_errors=runtime_errors,
        )

    @staticmethod
    def _to_result(number: int, case: TestCase, verdict: dict[str, Any]) -> TestResult:
        """
        Build a TestResult from a verdict.

        Raises:
            SandboxCommunicationError: a verdict field has the wrong type
        """
        actual = verdict.get("actual")
        error = verdict.get("error")
        try:
            return TestResult(
                test_number=number,
                input=case.input,
                expected=case.expected,
                actual=None if actual is None else str(actual),
                passed=verdict["passed"],
                weight=case.weight,
                execution_time_ms=int(verdict.get("executionTimeMs") or 0),
                error=None if error is None else str(error),
            )
        except (TypeError, ValueError) as e:
            raise SandboxCommunicationError(f"Unexpected sandbox verdict for test {number}: {e}") from e

    @staticmethod
    def _failed(number: int, case: TestCase, error: str, execution_time_ms: int = 0) -> TestResult:
        return TestResult(
            test_number=number,
            input=case.input,
            expected=case.expected,
            passed=False,
            weight=case.weight,
            execution_time_ms=execution_time_ms,
            error=error,
        )

    async def health_check(self) -> bool:
        """
        Check if the sandbox API is available.

        Returns:
            True if API is healthy, False otherwise
        """
        try:
            response = await self.client.get(
                f"{self.api_url}/health",
                timeout=5.0,
            )
            return response.status_code == 200

        except httpx.HTTPError:
            return False
