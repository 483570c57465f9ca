"""
Fuzzy matcher: similarity thresholds, used by review and retry flows.

Note: this matcher is more lenient than StrictMatcher for the same
question. An answer marked wrong at submission can pass on retry without
changing.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import Field

from ..matcher import AnswerMatcher
from ..models import Question, QuestionType
from ..similarity import best_similarity

SHORT_ANSWER_THRESHOLD = 0.9
ESSAY_THRESHOLD = 0.7


class FuzzyMatcher(AnswerMatcher):
    """
    Token-overlap matcher for short-answer and essay questions.

    Attributes:
        short_answer_threshold: Minimum similarity for short answers
        essay_threshold: Minimum similarity for essays
    """

    matcher_name = "fuzzy"

    short_answer_threshold: float = Field(default=SHORT_ANSWER_THRESHOLD, gt=0, le=1)
    essay_threshold: float = Field(default=ESSAY_THRESHOLD, gt=0, le=1)

    def threshold_for(self, question_type: QuestionType) -> float:
        if question_type is QuestionType.ESSAY:
            return self.essay_threshold
        return self.short_answer_threshold

    def score(self, question: Question, candidate: str) -> float:
        """Best similarity of candidate across the accepted answers."""
        return best_similarity(candidate, question.accepted_answers)

    def compare(self, question: Question, values: Sequence[str]) -> bool:
        if not values or not values[0].strip():
            return False
        return self.score(question, values[0]) >= self.threshold_for(question.type)
