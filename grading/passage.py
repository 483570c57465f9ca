"""
Reading-passage self-study grading.

A passage has content blocks (a paragraph with a comprehension prompt and
a reference answer) plus attached questions. Paragraph answers and
question answers are each worth half of a 100-point score, rounded to one
decimal. Everything here uses the fuzzy path: self-study is practice, not
an exam submission.
"""

from __future__ import annotations

import math
from typing import Sequence

from pydantic import ConfigDict, Field, computed_field, model_validator

from .grader import ExamGrader, grade_retry, retry_grader
from .models import GradingModel, Question, QuestionRef
from .recorder import build_miss
from .similarity import similarity
from .verdict import MissRecord, Verdict

PARAGRAPH_THRESHOLD = 0.7
SECTION_WEIGHT = 50


class PassageBlock(GradingModel):
    """One paragraph with its comprehension prompt and reference answer."""

    paragraph: str = ""
    prompt: str = ""
    reference_answer: str
    explanation: str | None = None


class Passage(GradingModel):
    id: str
    title: str = ""
    category: str | None = None
    blocks: list[PassageBlock] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_question_ids(self) -> Passage:
        missing = [i for i, question in enumerate(self.questions) if not question.id]
        if missing:
            raise ValueError(f"passage questions need an id (positions {missing})")
        return self


class PassageAttempt(GradingModel):
    """A student's answers: one per block, and per question id."""

    paragraph_answers: list[str] = Field(default_factory=list)
    question_answers: dict[str, str] = Field(default_factory=dict)
    reading_time: float = Field(default=0.0, ge=0)


class ParagraphVerdict(GradingModel):
    model_config = ConfigDict(frozen=True)

    block_index: int
    prompt: str = ""
    answer: str = ""
    reference_answer: str = ""
    is_correct: bool = False
    explanation: str | None = None


def section_points(correct: int, total: int) -> float:
    """Share of SECTION_WEIGHT earned; an empty section earns nothing."""
    if total <= 0:
        return 0.0
    return correct / total * SECTION_WEIGHT


class PassageResult(GradingModel):
    model_config = ConfigDict(frozen=True)

    passage_id: str
    reading_time: float = 0.0
    paragraph_verdicts: tuple[ParagraphVerdict, ...] = ()
    question_verdicts: tuple[Verdict, ...] = ()
    misses: tuple[MissRecord, ...] = ()

    @computed_field(alias="paragraphScore")
    @property
    def paragraph_score(self) -> int:
        return sum(1 for verdict in self.paragraph_verdicts if verdict.is_correct)

    @computed_field(alias="questionScore")
    @property
    def question_score(self) -> int:
        return sum(1 for verdict in self.question_verdicts if verdict.is_correct)

    @computed_field(alias="score")
    @property
    def score(self) -> float:
        points = section_points(self.paragraph_score, len(self.paragraph_verdicts)) + section_points(
            self.question_score, len(self.question_verdicts)
        )
        return math.floor(points * 10 + 0.5) / 10


def grade_paragraphs(
    blocks: Sequence[PassageBlock], answers: Sequence[str]
) -> list[ParagraphVerdict]:
    """Grade each block's answer by similarity to its reference answer."""
    verdicts = []
    for index, block in enumerate(blocks):
        answer = answers[index] if index < len(answers) else ""
        is_correct = bool(answer.strip()) and similarity(answer, block.reference_answer) >= PARAGRAPH_THRESHOLD
        verdicts.append(
            ParagraphVerdict(
                block_index=index,
                prompt=block.prompt,
                answer=answer,
                reference_answer=block.reference_answer,
                is_correct=is_correct,
                explanation=block.explanation,
            )
        )
    return verdicts


def grade_passage(
    passage: Passage, attempt: PassageAttempt, grader: ExamGrader | None = None
) -> PassageResult:
    """
    Grade a passage study attempt.

    Args:
        passage: Passage with blocks and questions
        attempt: Student answers
        grader: Fuzzy grader to use (defaults to retry_grader())

    Returns:
        PassageResult including miss records for incorrect questions
    """
    grader = grader or retry_grader()
    question_verdicts = []
    misses = []
    for index, question in enumerate(passage.questions):
        ref = QuestionRef(group_index=0, question_index=index)
        verdict = grade_retry(question, attempt.question_answers.get(question.id, ""), ref, grader)
        question_verdicts.append(verdict)
        if not verdict.is_correct:
            misses.append(build_miss(question, verdict, passage.category))

    return PassageResult(
        passage_id=passage.id,
        reading_time=attempt.reading_time,
        paragraph_verdicts=tuple(grade_paragraphs(passage.blocks, attempt.paragraph_answers)),
        question_verdicts=tuple(question_verdicts),
        misses=tuple(misses),
    )
