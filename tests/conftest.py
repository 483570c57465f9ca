"""
Shared pytest fixtures and utilities for testing the grading engine.

This module provides:
- Utilities for testing Pydantic validation
- Question and exam builders used across test modules
"""

import pytest
from typing import Any, Type
from pydantic import BaseModel, ValidationError

from grading import ExamDefinition, Question, QuestionGroup, Submission, SubmittedAnswer


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
        expected_message: str | None = None,
    ) -> ValidationError:
        """
        Assert that creating a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field (serialized name) in error (optional)
            expected_message: Substring expected in some error message (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class.model_validate(data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'] and e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        if expected_message:
            assert any(
                expected_message in e['msg'] for e in error.errors()
            ), f"Expected message containing '{expected_message}' not found"

        return error

    return _assert_validation


@pytest.fixture
def make_question():
    """Build a Question with sensible defaults per type."""
    def _make(question_type: str = "short_answer", accepted=("산",), **kwargs: Any) -> Question:
        if question_type in ("objective", "객관식") and "options" not in kwargs:
            kwargs["options"] = ["학습 능력", "크기", "가격", "색상"]
        return Question(type=question_type, accepted_answers=list(accepted), **kwargs)
    return _make


@pytest.fixture
def make_exam():
    """Wrap questions into a single-group exam."""
    def _make(*questions: Question, exam_id: str = "exam-1", category: str | None = None) -> ExamDefinition:
        return ExamDefinition(
            id=exam_id,
            title="Test exam",
            category=category,
            groups=[QuestionGroup(questions=list(questions))] if questions else [],
        )
    return _make


@pytest.fixture
def submit():
    """Build a Submission for group 0 from a list of value lists."""
    def _submit(*answers: list[str], elapsed_time: float = 0.0) -> Submission:
        return Submission(
            answers=[
                SubmittedAnswer(group_index=0, question_index=i, values=list(values))
                for i, values in enumerate(answers)
            ],
            elapsed_time=elapsed_time,
        )
    return _submit


@pytest.fixture
def reading_exam() -> ExamDefinition:
    """Two groups: a passage with two questions, then a standalone essay."""
    return ExamDefinition(
        id="reading-1",
        title="Reading check",
        category="독해",
        groups=[
            QuestionGroup(
                prompt="인공지능은 인간의 지능을 모방하는 시스템이다.",
                questions=[
                    Question(
                        id="q1",
                        text="인공지능에 필요한 것은?",
                        type="객관식",
                        options=["학습 능력", "크기", "가격", "색상"],
                        accepted_answers=["1"],
                        explanation="인공지능은 학습 능력이 핵심이다.",
                        wrong_answer_explanations={"2": "크기는 관련이 없다.", "3": "가격은 관련이 없다."},
                    ),
                    Question(
                        id="q2",
                        text="빈칸에 들어갈 말을 쓰시오.",
                        type="단답형",
                        accepted_answers=["표준설", "과실"],
                    ),
                ],
            ),
            QuestionGroup(
                questions=[
                    Question(
                        id="q3",
                        text="인공지능을 정의하시오.",
                        type="서술형",
                        accepted_answers=["인간의 지능을 모방하는 시스템을 만드는 기술"],
                        explanation="핵심은 인간 지능의 모방이다.",
                    ),
                ],
            ),
        ],
    )
