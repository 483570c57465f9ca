"""
Exact matcher for fixed-choice questions.

Order-independent but cardinality-exact: ["2", "1"] matches ["1", "2"],
while a subset or superset of the accepted choices never matches.
"""

from __future__ import annotations

from typing import Sequence

from ..matcher import AnswerMatcher
from ..models import Question


def exact_match(values: Sequence[str], accepted_answers: Sequence[str]) -> bool:
    """Compare two value lists as sorted sequences of equal length."""
    if not values or len(values) != len(accepted_answers):
        return False
    return sorted(values) == sorted(accepted_answers)


class ExactMatcher(AnswerMatcher):
    """Matcher for objective and true/false questions."""

    matcher_name = "exact"

    def compare(self, question: Question, values: Sequence[str]) -> bool:
        return exact_match(values, question.accepted_answers)
