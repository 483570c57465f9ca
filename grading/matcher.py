"""
Base answer matcher framework.

Provides the abstract base class shared by every comparison strategy and
a registry for name-based lookup. Call sites pick a strategy by name:
submission grading uses "strict", review and retry flows use "fuzzy",
fixed-choice questions always use "exact".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Sequence

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .models import Question, QuestionRef
from .verdict import Verdict


class AnswerMatcher(BaseModel, ABC):
    """
    Abstract base class for answer matchers.

    A matcher decides whether submitted values answer a question
    correctly. Matchers hold configuration only (thresholds); they keep no
    state between calls.

    Subclasses must implement:
    - compare(): Core correctness decision
    - matcher_name: Class variable for registry lookup and audit
    """

    model_config = ConfigDict(validate_assignment=True)

    matcher_name: ClassVar[str] = "unknown"

    @abstractmethod
    def compare(self, question: Question, values: Sequence[str]) -> bool:
        """
        Decide correctness of values against question.accepted_answers.

        Args:
            question: Question being graded
            values: Submitted values (may be empty)

        Returns:
            True if the answer is correct
        """

    def evaluate(
        self, question: Question, values: Sequence[str], ref: QuestionRef
    ) -> Verdict:
        """
        Grade values and wrap the outcome in a Verdict.

        Empty submissions are incorrect without consulting compare().
        """
        is_correct = bool(values) and self.compare(question, values)
        return Verdict(
            group_index=ref.group_index,
            question_index=ref.question_index,
            question_type=question.type,
            submitted_values=tuple(values),
            accepted_answers=tuple(question.accepted_answers),
            is_correct=is_correct,
            matcher=self.matcher_name,
        )


class MatcherRegistry(BaseModel):
    """Registry mapping strategy names to matcher classes."""

    _matchers: dict[str, type[AnswerMatcher]] = PrivateAttr(default_factory=dict)

    def register(self, name: str, matcher_class: type[AnswerMatcher]) -> None:
        """
        Register a matcher class under a name.

        Raises:
            TypeError: If matcher_class is not an AnswerMatcher subclass
        """
        if not (isinstance(matcher_class, type) and issubclass(matcher_class, AnswerMatcher)):
            raise TypeError(f"matcher_class must be a subclass of AnswerMatcher, got {matcher_class}")
        self._matchers[name] = matcher_class

    def get_matcher(self, name: str) -> type[AnswerMatcher] | None:
        return self._matchers.get(name)

    def create_matcher(self, name: str, **options: Any) -> AnswerMatcher:
        """
        Instantiate the matcher registered under name.

        Args:
            name: Strategy name
            **options: Matcher fields (e.g. thresholds)

        Raises:
            ValueError: If no matcher is registered under name
        """
        matcher_class = self.get_matcher(name)
        if matcher_class is None:
            raise ValueError(f"No matcher registered for name: {name}")
        return matcher_class(**options)

    def get_registered_names(self) -> list[str]:
        return list(self._matchers.keys())


# Global registry instance
_global_registry = MatcherRegistry()


def register_matcher(name: str, matcher_class: type[AnswerMatcher]) -> None:
    """Register a matcher in the global registry."""
    _global_registry.register(name, matcher_class)


def get_matcher(name: str) -> type[AnswerMatcher] | None:
    """Get a matcher class from the global registry."""
    return _global_registry.get_matcher(name)


def create_matcher(name: str, **options: Any) -> AnswerMatcher:
    """Create a matcher instance from the global registry."""
    return _global_registry.create_matcher(name, **options)


def registered_matchers() -> list[str]:
    return _global_registry.get_registered_names()
