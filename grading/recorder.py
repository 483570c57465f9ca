"""
Verdict recorder: turns incorrect verdicts into miss records.

Miss records are produced in question order, one per incorrect verdict,
and are self-contained so a review screen can render them without the
exam definition.
"""

from __future__ import annotations

from typing import Sequence

from .models import ExamDefinition, Question
from .verdict import MissRecord, SubmissionResult, Verdict


def targeted_explanation(question: Question, values: Sequence[str]) -> str | None:
    """Remediation text for the first submitted value that has one."""
    for value in values:
        text = question.wrong_answer_explanations.get(value.strip())
        if text:
            return text
    return None


def build_miss(question: Question, verdict: Verdict, category: str | None = None) -> MissRecord:
    return MissRecord(
        group_index=verdict.group_index,
        question_index=verdict.question_index,
        question_id=question.id,
        question_text=question.text,
        question_type=question.type,
        options=tuple(question.options),
        submitted_values=verdict.submitted_values,
        accepted_answers=verdict.accepted_answers,
        explanation=question.explanation,
        targeted_explanation=targeted_explanation(question, verdict.submitted_values),
        category=category,
    )


def record_misses(exam: ExamDefinition, result: SubmissionResult) -> list[MissRecord]:
    """
    Build miss records for every incorrect verdict.

    Args:
        exam: Definition the result was graded against
        result: Grading pass output

    Returns:
        Miss records in verdict (question) order
    """
    return [
        build_miss(exam.question_at(verdict.ref), verdict, exam.category)
        for verdict in result.verdicts
        if not verdict.is_correct
    ]
