"""
Strict matcher: normalized equality, used when an exam is submitted.

Grading is two-stage. try_split() first tries to read a single
comma-joined value as one piece per blank; if that succeeds every blank
must match its accepted answer. Otherwise compare_whole() accepts the
first value when it equals any accepted answer.
"""

from __future__ import annotations

from typing import Sequence

from ..matcher import AnswerMatcher
from ..models import Question
from ..normalize import normalize
from ..splitter import try_split


class StrictMatcher(AnswerMatcher):
    """Case- and whitespace-insensitive equality against accepted answers."""

    matcher_name = "strict"

    def compare(self, question: Question, values: Sequence[str]) -> bool:
        if not values:
            return False

        pairing = try_split(values, question.accepted_answers)
        if pairing is not None:
            return self.compare_blanks(pairing)

        return self.compare_whole(values[0], question.accepted_answers)

    def compare_blanks(self, pairing: Sequence[tuple[str, str]]) -> bool:
        """Every (piece, accepted) pair must match."""
        return all(normalize(piece) == normalize(accepted) for piece, accepted in pairing)

    def compare_whole(self, value: str, accepted_answers: Sequence[str]) -> bool:
        """The value must match at least one accepted answer."""
        candidate = normalize(value)
        return any(candidate == normalize(accepted) for accepted in accepted_answers)
