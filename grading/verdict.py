"""
Grading results (the engine's output records).

Verdict, SubmissionResult and MissRecord are frozen: regrading produces new
objects rather than mutating old ones, so a persisted record always matches
what was shown to the student.

SubmissionResult carries no counters of its own. total_questions,
correct_count and score are computed from the verdict list and serialized
alongside it.
"""

from __future__ import annotations

import math
from typing import Sequence

from pydantic import ConfigDict, Field, computed_field

from .models import GradingModel, Question, QuestionRef, QuestionType


def compute_score(correct_count: int, total_questions: int) -> int:
    """
    Percentage score rounded half up to an integer.

    Args:
        correct_count: Number of correct verdicts
        total_questions: Number of graded questions

    Returns:
        Score in 0..100 (0 when there are no questions)
    """
    if total_questions <= 0:
        return 0
    return math.floor(correct_count / total_questions * 100 + 0.5)


class Verdict(GradingModel):
    """
    Decision for one question in one grading pass.

    Attributes:
        group_index: Group position in the exam
        question_index: Question position in the group
        question_type: Kind of question graded
        submitted_values: What the student submitted
        accepted_answers: Accepted answers, echoed for display
        is_correct: Outcome
        matcher: Name of the strategy that decided (exact, strict, fuzzy, manual)
    """

    model_config = ConfigDict(frozen=True)

    group_index: int
    question_index: int
    question_type: QuestionType
    submitted_values: tuple[str, ...] = ()
    accepted_answers: tuple[str, ...] = ()
    is_correct: bool = False
    matcher: str = ""

    @property
    def ref(self) -> QuestionRef:
        return QuestionRef(group_index=self.group_index, question_index=self.question_index)


class SubmissionResult(GradingModel):
    """Aggregate of one grading pass over an exam."""

    model_config = ConfigDict(frozen=True)

    exam_id: str | None = None
    elapsed_time: float = 0.0
    verdicts: tuple[Verdict, ...] = ()

    @computed_field(alias="totalQuestions")
    @property
    def total_questions(self) -> int:
        return len(self.verdicts)

    @computed_field(alias="correctCount")
    @property
    def correct_count(self) -> int:
        return sum(1 for verdict in self.verdicts if verdict.is_correct)

    @computed_field(alias="score")
    @property
    def score(self) -> int:
        return compute_score(self.correct_count, self.total_questions)

    def verdict_for(self, ref: QuestionRef) -> Verdict | None:
        for verdict in self.verdicts:
            if verdict.group_index == ref.group_index and verdict.question_index == ref.question_index:
                return verdict
        return None


class MissRecord(GradingModel):
    """
    Snapshot of an incorrectly answered question, for later review.

    Carries enough context to render the review item without the exam
    definition.
    """

    model_config = ConfigDict(frozen=True)

    group_index: int
    question_index: int
    question_id: str | None = None
    question_text: str = ""
    question_type: QuestionType
    options: tuple[str, ...] = ()
    submitted_values: tuple[str, ...] = ()
    accepted_answers: tuple[str, ...] = ()
    explanation: str | None = None
    targeted_explanation: str | None = None
    category: str | None = None

    @property
    def ref(self) -> QuestionRef:
        return QuestionRef(group_index=self.group_index, question_index=self.question_index)

    def to_question(self) -> Question:
        """Rebuild the question as it was when the miss was recorded."""
        return Question(
            id=self.question_id,
            text=self.question_text,
            type=self.question_type,
            options=list(self.options),
            accepted_answers=list(self.accepted_answers),
            explanation=self.explanation,
        )


class GradedSubmission(GradingModel):
    """A result and its miss records. Persist both or neither."""

    model_config = ConfigDict(frozen=True)

    result: SubmissionResult
    misses: tuple[MissRecord, ...] = Field(default_factory=tuple)

    @classmethod
    def build(cls, result: SubmissionResult, misses: Sequence[MissRecord]) -> GradedSubmission:
        return cls(result=result, misses=tuple(misses))
