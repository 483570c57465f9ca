"""
Exam definition and submission models.

The exam definition is authoritative for iteration: groups are visited in
order, and each group's questions in order. Submissions reference
questions by (group_index, question_index).

Serialized names are camelCase (acceptedAnswers, groupIndex, ...); both
camelCase and snake_case are accepted on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .errors import UnknownQuestionError


class GradingModel(BaseModel):
    """Base for all engine data: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        Keys are camelCase and appear in field declaration order, so the
        same model always serializes to the same bytes.
        """
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Rebuild a model from to_dict() output."""
        return cls.model_validate(data)


class QuestionType(str, Enum):
    """Closed set of question kinds."""

    OBJECTIVE = "objective"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"
    TRUE_FALSE = "true_false"

    @classmethod
    def _missing_(cls, value: object) -> QuestionType | None:
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if member.value == key:
                return member
        return _TYPE_ALIASES.get(key)

    @property
    def is_objective(self) -> bool:
        """True for fixed-choice kinds graded by exact set equality."""
        return self in (QuestionType.OBJECTIVE, QuestionType.TRUE_FALSE)


# Labels used by existing exam data
_TYPE_ALIASES: dict[str, QuestionType] = {
    "객관식": QuestionType.OBJECTIVE,
    "단답형": QuestionType.SHORT_ANSWER,
    "서술형": QuestionType.ESSAY,
    "ox": QuestionType.TRUE_FALSE,
    "short-answer": QuestionType.SHORT_ANSWER,
    "true-false": QuestionType.TRUE_FALSE,
}

TRUE_FALSE_OPTIONS: tuple[str, str] = ("O", "X")


class Question(GradingModel):
    """
    A single gradable question.

    Attributes:
        id: Optional identity (question bank id)
        text: Prompt shown to the student
        type: Question kind
        options: Choices, objective and true/false only
        accepted_answers: Canonical answers (option indices for objective)
        explanation: General explanation shown after grading
        wrong_answer_explanations: Option index -> targeted remediation
    """

    id: str | None = None
    text: str = ""
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    accepted_answers: list[str] = Field(min_length=1)
    explanation: str | None = None
    wrong_answer_explanations: dict[str, str] = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> Any:
        """Accept legacy labels such as 객관식 or short-answer."""
        if isinstance(v, str) and not isinstance(v, QuestionType):
            return QuestionType(v)
        return v

    @field_validator("wrong_answer_explanations", mode="before")
    @classmethod
    def validate_explanations(cls, v: Any) -> Any:
        if v is None:
            return {}
        return v

    @model_validator(mode="after")
    def check_options(self) -> Question:
        if self.type is QuestionType.TRUE_FALSE and not self.options:
            self.options = list(TRUE_FALSE_OPTIONS)

        if self.type.is_objective:
            if len(self.options) < 2:
                raise ValueError(
                    f"{self.type.value} questions need at least 2 options, "
                    f"got {len(self.options)}"
                )
        elif self.options:
            raise ValueError(f"{self.type.value} questions do not take options")
        return self


class QuestionGroup(GradingModel):
    """Questions sharing an optional prompt (e.g. a reading passage)."""

    prompt: str | None = None
    questions: list[Question] = Field(min_length=1)


class QuestionRef(GradingModel):
    """Position of a question inside an exam definition."""

    model_config = ConfigDict(frozen=True)

    group_index: int = Field(ge=0)
    question_index: int = Field(ge=0)


class ExamDefinition(GradingModel):
    """An ordered list of question groups."""

    id: str
    title: str = ""
    category: str | None = None
    groups: list[QuestionGroup] = Field(default_factory=list)

    @property
    def total_questions(self) -> int:
        return sum(len(group.questions) for group in self.groups)

    def iter_questions(self) -> Iterator[tuple[QuestionRef, Question]]:
        """Yield every question with its reference, in definition order."""
        for group_index, group in enumerate(self.groups):
            for question_index, question in enumerate(group.questions):
                yield QuestionRef(group_index=group_index, question_index=question_index), question

    def question_at(self, ref: QuestionRef) -> Question:
        """
        Look up a question by reference.

        Raises:
            UnknownQuestionError: If the reference is outside the exam
        """
        if ref.group_index < len(self.groups):
            questions = self.groups[ref.group_index].questions
            if ref.question_index < len(questions):
                return questions[ref.question_index]
        raise UnknownQuestionError(ref.group_index, ref.question_index)


class SubmittedAnswer(GradingModel):
    """A student's answer to one question. Empty values means unanswered."""

    group_index: int = Field(ge=0)
    question_index: int = Field(ge=0)
    values: list[str] = Field(default_factory=list)

    @property
    def ref(self) -> QuestionRef:
        return QuestionRef(group_index=self.group_index, question_index=self.question_index)


class Submission(GradingModel):
    """All answers for one exam attempt."""

    answers: list[SubmittedAnswer]
    elapsed_time: float = Field(default=0.0, ge=0)
