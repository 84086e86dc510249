"""
Question definitions: the authoritative, type-tagged description of a question.

Content is authored elsewhere and arrives either as a model or as the JSON
stored by the content service. Stored content mixes camelCase and snake_case
keys, so every model accepts both.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .types import PartialCreditStrategy, QuestionType


class CamelModel(BaseModel):
    """Immutable model with camelCase aliases that also accepts snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ========================================
# Shared content parts
# ========================================


class McOption(CamelModel):
    id: str
    text: str = ""
    image: str | None = None


class MatchItem(CamelModel):
    id: str
    text: str = ""
    image: str | None = None
    audio: str | None = None


class MatchPair(CamelModel):
    """A left/right association. Hashable, so pairs can live in sets."""
    left: str
    right: str


class OrderItem(CamelModel):
    id: str
    text: str = ""
    image: str | None = None


class Blank(CamelModel):
    position: int = 0
    accepted_answers: list[str] | None = None  # None: any answer fills the blank
    case_sensitive: bool = False
    hint: str | None = None
    regex_pattern: str | None = None


class Keyword(CamelModel):
    word: str
    weight: Decimal = Decimal("1")
    required: bool = False
    synonyms: list[str] = Field(default_factory=list)


class TestCase(CamelModel):
    __test__ = False  # keep pytest from collecting this model

    input: str = ""
    expected: str = ""
    weight: Decimal = Field(default=Decimal("1"), ge=0)
    visible: bool = True
    description: str | None = None


# ========================================
# Type-specific content
# ========================================


class MultipleChoiceSingleContent(CamelModel):
    options: list[McOption] = Field(default_factory=list)
    correct_answer: str
    shuffle_options: bool = True


class MultipleChoiceMultiContent(CamelModel):
    options: list[McOption] = Field(default_factory=list)
    correct_answers: list[str]
    shuffle_options: bool = True
    partial_credit_rule: str = PartialCreditStrategy.PROPORTIONAL.value


class TrueFalseContent(CamelModel):
    correct_answer: bool


class MatchingContent(CamelModel):
    left_items: list[MatchItem] = Field(default_factory=list)
    right_items: list[MatchItem] = Field(default_factory=list)
    correct_pairs: list[MatchPair]
    partial_credit_strategy: str = PartialCreditStrategy.PER_PAIR.value
    shuffle_items: bool = True


class OrderingContent(CamelModel):
    items: list[OrderItem] = Field(default_factory=list)
    correct_order: list[str]
    partial_credit_strategy: str = PartialCreditStrategy.ADJACENT_PAIRS.value


class FillInBlankContent(CamelModel):
    template: str = ""
    blanks: list[Blank]

    def ordered_blanks(self) -> list[Blank]:
        """Blanks in position order (stable for equal positions)."""
        return sorted(self.blanks, key=lambda b: b.position)


class ShortAnswerContent(CamelModel):
    min_length: int = 50
    max_length: int = 500
    keywords: list[Keyword] = Field(default_factory=list)
    min_score_threshold: Decimal = Decimal("0.5")
    rubric_description: str | None = None


class ProgramSubmissionContent(CamelModel):
    prompt: str = ""
    starter_code: str | None = None
    language: str = "python"
    test_cases: list[TestCase] = Field(default_factory=list)
    time_limit_ms: int = 1000
    memory_limit_mb: int = 64
    allowed_imports: list[str] | None = None
    forbidden_keywords: list[str] | None = None


# ========================================
# Question definitions (tagged union)
# ========================================


class QuestionBase(CamelModel):
    points_possible: Decimal = Field(
        default=Decimal("10"),
        ge=0,
        validation_alias=AliasChoices("pointsPossible", "points_possible", "points"),
        serialization_alias="pointsPossible",
    )


class MultipleChoiceSingleQuestion(QuestionBase):
    question_type: Literal[QuestionType.MULTIPLE_CHOICE_SINGLE]
    content: MultipleChoiceSingleContent


class MultipleChoiceMultiQuestion(QuestionBase):
    question_type: Literal[QuestionType.MULTIPLE_CHOICE_MULTI]
    content: MultipleChoiceMultiContent


class TrueFalseQuestion(QuestionBase):
    question_type: Literal[QuestionType.TRUE_FALSE]
    content: TrueFalseContent


class MatchingQuestion(QuestionBase):
    question_type: Literal[QuestionType.MATCHING]
    content: MatchingContent


class OrderingQuestion(QuestionBase):
    question_type: Literal[QuestionType.ORDERING]
    content: OrderingContent


class FillInBlankQuestion(QuestionBase):
    question_type: Literal[QuestionType.FILL_IN_BLANK]
    content: FillInBlankContent


class ShortAnswerQuestion(QuestionBase):
    question_type: Literal[QuestionType.SHORT_ANSWER]
    content: ShortAnswerContent


class ProgramSubmissionQuestion(QuestionBase):
    question_type: Literal[QuestionType.PROGRAM_SUBMISSION]
    content: ProgramSubmissionContent


QuestionDefinition = Annotated[
    Union[
        MultipleChoiceSingleQuestion,
        MultipleChoiceMultiQuestion,
        TrueFalseQuestion,
        MatchingQuestion,
        OrderingQuestion,
        FillInBlankQuestion,
        ShortAnswerQuestion,
        ProgramSubmissionQuestion,
    ],
    Field(discriminator="question_type"),
]

_QUESTION_ADAPTER: TypeAdapter[QuestionDefinition] = TypeAdapter(QuestionDefinition)

_TYPE_KEYS = ("questionType", "question_type", "type")


def parse_question(data: QuestionBase | Mapping[str, Any]) -> QuestionBase:
    """
    Build a QuestionDefinition from a model or stored JSON.

    Raises:
        UnsupportedQuestionType: the type discriminator names no known type
        pydantic.ValidationError: the content does not fit its declared type
    """
    if isinstance(data, QuestionBase):
        return data

    raw = dict(data)
    type_value = next((raw.pop(k) for k in _TYPE_KEYS if k in raw), None)
    raw["questionType"] = QuestionType.parse(type_value)

    # The content service stores content as a JSON string column
    if isinstance(raw.get("content"), str):
        raw["content"] = json.loads(raw["content"])

    return _QUESTION_ADAPTER.validate_python(raw)
