"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared question fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (require a running sandbox)")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test so env overrides apply."""
    from config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mcs_question():
    """Single-answer multiple choice, stored JSON form."""
    return {
        "questionType": "multiple_choice_single",
        "pointsPossible": 10,
        "content": {
            "options": [
                {"id": "a", "text": "Physical"},
                {"id": "b", "text": "Network"},
                {"id": "c", "text": "Transport"},
            ],
            "correctAnswer": "b",
        },
    }


@pytest.fixture
def mcm_question():
    """Multi-select multiple choice."""
    return {
        "questionType": "multiple_choice_multi",
        "pointsPossible": 10,
        "content": {
            "options": [{"id": i, "text": i.upper()} for i in "abcd"],
            "correctAnswers": ["a", "c"],
            "partialCreditRule": "proportional",
        },
    }


@pytest.fixture
def true_false_question():
    return {
        "questionType": "true_false",
        "pointsPossible": 5,
        "content": {"correctAnswer": True},
    }


@pytest.fixture
def matching_question():
    """Three-pair matching with per-pair credit."""
    return {
        "questionType": "matching",
        "pointsPossible": 9,
        "content": {
            "leftItems": [{"id": "L1"}, {"id": "L2"}, {"id": "L3"}],
            "rightItems": [{"id": "R1"}, {"id": "R2"}, {"id": "R3"}],
            "correctPairs": [
                {"left": "L1", "right": "R1"},
                {"left": "L2", "right": "R2"},
                {"left": "L3", "right": "R3"},
            ],
            "partialCreditStrategy": "per_pair",
        },
    }


@pytest.fixture
def ordering_question():
    """Four items with adjacent-pair credit."""
    return {
        "questionType": "ordering",
        "pointsPossible": 10,
        "content": {
            "items": [{"id": i} for i in "abcd"],
            "correctOrder": ["a", "b", "c", "d"],
            "partialCreditStrategy": "adjacent_pairs",
        },
    }


@pytest.fixture
def fill_in_blank_question():
    return {
        "questionType": "fill_in_blank",
        "pointsPossible": 10,
        "content": {
            "template": "The capital of France is ___ and of Italy is ___.",
            "blanks": [
                {"position": 1, "acceptedAnswers": ["Rome", "Roma"]},
                {"position": 0, "acceptedAnswers": ["Paris"]},
            ],
        },
    }


@pytest.fixture
def short_answer_question():
    return {
        "questionType": "short_answer",
        "pointsPossible": 10,
        "content": {
            "minLength": 10,
            "maxLength": 200,
            "keywords": [
                {"word": "router", "weight": 2, "required": True},
                {"word": "packet", "weight": 1, "synonyms": ["datagram"]},
                {"word": "subnet", "weight": 1},
            ],
            "minScoreThreshold": 0.5,
        },
    }


@pytest.fixture
def program_question():
    """Three weighted test cases."""
    return {
        "questionType": "program_submission",
        "pointsPossible": 10,
        "content": {
            "prompt": "Echo the input.",
            "language": "python",
            "testCases": [
                {"input": "1", "expected": "1", "weight": 1},
                {"input": "2", "expected": "2", "weight": 1},
                {"input": "3", "expected": "3", "weight": 2},
            ],
            "timeLimitMs": 1000,
            "memoryLimitMb": 64,
        },
    }
