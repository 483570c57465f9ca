"""
Domain models for the grading service.

Stored entities wrap the engine's records as plain dictionaries (the
engine's to_dict() output) so what is persisted is exactly what was graded.
Request models are validated by FastAPI before any grading happens.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field, StrictBool, field_validator

from grading import (
    ExamDefinition,
    GradedSubmission,
    MissRecord,
    Passage,
    PassageAttempt,
    PassageResult,
    SubmissionResult,
    SubmittedAnswer,
    Verdict,
)
from grading.models import GradingModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


UNCATEGORIZED = "기타"


class ResultKind(str, Enum):
    """What a stored result was graded from"""
    EXAM = "exam"
    PASSAGE = "passage"


class StoredResult(GradingModel):
    """A persisted grading pass"""
    id: str = Field(default_factory=new_id)
    kind: ResultKind = ResultKind.EXAM
    source_id: str = Field(..., description="Exam or passage identifier")
    student_id: str
    record: Dict[str, Any] = Field(..., description="Engine record as produced by to_dict()")
    exam: Optional[ExamDefinition] = Field(None, description="Exam definition the record was graded against")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def graded(self) -> GradedSubmission:
        """Rehydrate the exam grading record"""
        return GradedSubmission.from_dict(self.record)


class StoredMiss(GradingModel):
    """A persisted miss record with its review state"""
    id: str = Field(default_factory=new_id)
    student_id: str
    result_id: str
    record: MissRecord
    is_reviewed: bool = False
    reviewed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def category(self) -> str:
        return self.record.category or UNCATEGORIZED


class CategoryCount(GradingModel):
    category: str
    count: int


class MissStatistics(GradingModel):
    """Review notebook summary"""
    total_wrong: int = 0
    reviewed_count: int = 0
    unreviewed_count: int = 0
    category_stats: Dict[str, int] = Field(default_factory=dict)
    frequent_categories: List[CategoryCount] = Field(default_factory=list)


# Requests

class SubmitExamRequest(GradingModel):
    """Exam submission"""
    student_id: str = Field(..., min_length=1)
    answers: List[SubmittedAnswer]
    elapsed_time: float = Field(default=0.0, ge=0)


class UpdateGradingRequest(GradingModel):
    """Teacher override of one question's grading"""
    group_index: int = Field(..., ge=0)
    question_index: int = Field(..., ge=0)
    is_correct: StrictBool


class RetryRequest(GradingModel):
    """Another attempt at a missed question"""
    student_id: str = Field(..., min_length=1)
    answer: str

    @field_validator("answer")
    @classmethod
    def require_answer(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("answer must not be blank")
        return v


class GradePassageRequest(GradingModel):
    """Passage self-study attempt"""
    student_id: str = Field(..., min_length=1)
    passage: Passage
    attempt: PassageAttempt


# Responses

class GradedResponse(GradingModel):
    result_id: str
    result: SubmissionResult
    misses: List[MissRecord] = Field(default_factory=list)


class PassageResponse(GradingModel):
    result_id: str
    result: PassageResult


class MissListResponse(GradingModel):
    misses: List[StoredMiss]
    stats: MissStatistics


class RetryResponse(GradingModel):
    verdict: Verdict
    reviewed: bool
