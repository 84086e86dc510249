"""
Answer payload normalizer.

Clients send each answer either as the bare value ("a", ["a", "c"], true, ...)
or wrapped in an object ({"selectedOptionId": "a"}). Both reduce to one
canonical value per question type so evaluators never see shape variance:

- multiple_choice_single -> str
- multiple_choice_multi  -> frozenset[str]
- true_false             -> bool
- matching               -> tuple[MatchPair, ...]
- ordering               -> tuple[str, ...]
- fill_in_blank          -> tuple[str, ...]
- short_answer           -> str
- program_submission     -> str

Anything else raises MalformedAnswerPayload.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .errors import MalformedAnswerPayload
from .questions import MatchPair
from .types import QuestionType

# Wrapper keys seen from the quiz front-end and the stored answer models
WRAPPER_KEYS: dict[QuestionType, tuple[str, ...]] = {
    QuestionType.MULTIPLE_CHOICE_SINGLE: ("selectedOptionId", "selectedOption", "selected_option_id"),
    QuestionType.MULTIPLE_CHOICE_MULTI: ("selectedOptionIds", "selectedOptions", "selected_option_ids"),
    QuestionType.TRUE_FALSE: ("answer",),
    QuestionType.MATCHING: ("pairs",),
    QuestionType.ORDERING: ("order",),
    QuestionType.FILL_IN_BLANK: ("answers", "blanks"),
    QuestionType.SHORT_ANSWER: ("text", "answer"),
    QuestionType.PROGRAM_SUBMISSION: ("code",),
}


def _unwrap(question_type: QuestionType, payload: Any) -> tuple[str | None, Any]:
    """
    Return (wrapper_key, inner_value).

    A mapping must carry one of the type's wrapper keys; other keys next to
    it (timing metadata and the like) are ignored.
    """
    if isinstance(payload, Mapping):
        for key in WRAPPER_KEYS[question_type]:
            if key in payload:
                return key, payload[key]
        raise MalformedAnswerPayload(
            question_type.value,
            f"expected one of {list(WRAPPER_KEYS[question_type])}, got keys {sorted(map(str, payload))}",
        )
    return None, payload


def _require_str(question_type: QuestionType, value: Any, what: str = "value") -> str:
    if not isinstance(value, str):
        raise MalformedAnswerPayload(question_type.value, f"{what} must be a string, got {type(value).__name__}")
    return value


def _require_list(question_type: QuestionType, value: Any) -> list:
    if not isinstance(value, (list, tuple)):
        raise MalformedAnswerPayload(question_type.value, f"expected a list, got {type(value).__name__}")
    return list(value)


def _single(payload: Any) -> str:
    qt = QuestionType.MULTIPLE_CHOICE_SINGLE
    _, value = _unwrap(qt, payload)
    return _require_str(qt, value, "option id")


def _multi(payload: Any) -> frozenset[str]:
    qt = QuestionType.MULTIPLE_CHOICE_MULTI
    _, value = _unwrap(qt, payload)
    return frozenset(_require_str(qt, v, "option id") for v in _require_list(qt, value))


def _true_false(payload: Any) -> bool:
    qt = QuestionType.TRUE_FALSE
    _, value = _unwrap(qt, payload)
    # bool only: 1, 0 and "true" are not answers
    if not isinstance(value, bool):
        raise MalformedAnswerPayload(qt.value, f"expected a boolean, got {type(value).__name__}")
    return value


def _matching(payload: Any) -> tuple[MatchPair, ...]:
    qt = QuestionType.MATCHING
    _, value = _unwrap(qt, payload)
    pairs: list[MatchPair] = []
    for item in _require_list(qt, value):
        if not isinstance(item, Mapping) or "left" not in item or "right" not in item:
            raise MalformedAnswerPayload(qt.value, "each pair needs 'left' and 'right'")
        pair = MatchPair(
            left=_require_str(qt, item["left"], "left"),
            right=_require_str(qt, item["right"], "right"),
        )
        if pair not in pairs:
            pairs.append(pair)
    return tuple(pairs)


def _ordering(payload: Any) -> tuple[str, ...]:
    qt = QuestionType.ORDERING
    _, value = _unwrap(qt, payload)
    return tuple(_require_str(qt, v, "item id") for v in _require_list(qt, value))


def _fill_in_blank(payload: Any) -> tuple[str, ...]:
    qt = QuestionType.FILL_IN_BLANK
    key, value = _unwrap(qt, payload)
    items = _require_list(qt, value)

    if key == "blanks":
        # [{"position": 1, "answer": "on"}, ...]
        entries = []
        for item in items:
            if not isinstance(item, Mapping) or "answer" not in item:
                raise MalformedAnswerPayload(qt.value, "each blank needs an 'answer'")
            position = item.get("position", 0)
            if isinstance(position, bool) or not isinstance(position, int):
                raise MalformedAnswerPayload(qt.value, "blank position must be an integer")
            entries.append((position, _require_str(qt, item["answer"], "blank answer")))
        entries.sort(key=lambda e: e[0])
        return tuple(answer for _, answer in entries)

    return tuple(_require_str(qt, v, "blank answer") for v in items)


def _text(question_type: QuestionType) -> Callable[[Any], str]:
    def normalize_text(payload: Any) -> str:
        _, value = _unwrap(question_type, payload)
        return _require_str(question_type, value)
    return normalize_text


NORMALIZERS: dict[QuestionType, Callable[[Any], Any]] = {
    QuestionType.MULTIPLE_CHOICE_SINGLE: _single,
    QuestionType.MULTIPLE_CHOICE_MULTI: _multi,
    QuestionType.TRUE_FALSE: _true_false,
    QuestionType.MATCHING: _matching,
    QuestionType.ORDERING: _ordering,
    QuestionType.FILL_IN_BLANK: _fill_in_blank,
    QuestionType.SHORT_ANSWER: _text(QuestionType.SHORT_ANSWER),
    QuestionType.PROGRAM_SUBMISSION: _text(QuestionType.PROGRAM_SUBMISSION),
}


def normalize(question_type: str | QuestionType, payload: Any) -> Any:
    """
    Reduce a raw or wrapped payload to its canonical value.

    Raises:
        UnsupportedQuestionType: unknown question type
        MalformedAnswerPayload: payload does not fit the type
    """
    qt = QuestionType.parse(question_type)
    if payload is None:
        raise MalformedAnswerPayload(qt.value, "no answer submitted")
    return NORMALIZERS[qt](payload)
