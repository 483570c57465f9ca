"""Engine exceptions.

Grading itself never raises: ambiguous answers resolve through fallback
rules. These cover lookups made by callers that hold a stale reference.
"""

from __future__ import annotations


class UnknownQuestionError(LookupError):
    """Raised when a (group, question) reference is not in the exam."""

    def __init__(self, group_index: int, question_index: int):
        self.group_index = group_index
        self.question_index = question_index
        super().__init__(
            f"No question at group {group_index}, question {question_index}"
        )
