"""
Error classification for the grading engine.

Every failure inside an evaluation ends up as one of these, so callers can
tell "the learner was wrong" apart from "the engine could not judge".
"""


class GradingError(Exception):
    """Base class for grading engine errors."""
    pass


class UnsupportedQuestionType(GradingError):
    """Raised when no evaluator exists for a question type. The response is ungraded."""

    def __init__(self, question_type: object):
        self.question_type = question_type
        super().__init__(f"Unsupported question type: {question_type!r}")


class MalformedAnswerPayload(GradingError):
    """Raised by the normalizer when a payload has the wrong shape for its type."""

    def __init__(self, question_type: str, reason: str):
        self.question_type = question_type
        self.reason = reason
        super().__init__(f"Malformed {question_type} answer: {reason}")


class SandboxCommunicationError(GradingError):
    """Raised when the code execution sandbox cannot be reached or answers garbage."""
    pass


class InvalidStateTransition(GradingError):
    """Raised when a response is moved to a state it cannot reach from its current one."""
    pass
