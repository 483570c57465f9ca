"""
Result repository for data access.

Implements the Repository pattern for exams, grading results and miss
records. A result and its miss records are always written in one call so
a store never exposes a score without the misses behind it.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from grading import ExamDefinition

from ..core.errors import (
    DuplicateSubmissionError,
    ExamNotFoundError,
    MissNotFoundError,
    ResultNotFoundError,
)
from ..core.logging import get_logger
from ..models.domain import ResultKind, StoredMiss, StoredResult, utcnow

logger = get_logger(__name__)


class ResultRepositoryInterface(ABC):
    """Abstract interface for the grading store"""

    @abstractmethod
    async def save_exam(self, exam: ExamDefinition) -> None:
        """Create or replace an exam definition"""
        pass

    @abstractmethod
    async def get_exam(self, exam_id: str) -> ExamDefinition:
        """Get exam definition by ID"""
        pass

    @abstractmethod
    async def save_graded(self, result: StoredResult, misses: List[StoredMiss]) -> None:
        """
        Persist a new result together with its miss records (atomic).

        Raises:
            DuplicateSubmissionError: If the student already has an exam
                result for the same exam
        """
        pass

    @abstractmethod
    async def replace_graded(self, result: StoredResult, misses: List[StoredMiss]) -> None:
        """Replace a stored result and all of its miss records (atomic)"""
        pass

    @abstractmethod
    async def get_result(self, result_id: str) -> StoredResult:
        """Get result by ID"""
        pass

    @abstractmethod
    async def misses_for_result(self, result_id: str) -> List[StoredMiss]:
        """Miss records of one result, in question order"""
        pass

    @abstractmethod
    async def list_misses(self, student_id: str, reviewed: Optional[bool] = None) -> List[StoredMiss]:
        """A student's miss records, newest first"""
        pass

    @abstractmethod
    async def get_miss(self, miss_id: str) -> StoredMiss:
        """Get miss record by ID"""
        pass

    @abstractmethod
    async def mark_reviewed(self, miss_id: str, reviewed_at: Optional[datetime] = None) -> StoredMiss:
        """Flag a miss record as reviewed"""
        pass


class InMemoryResultRepository(ResultRepositoryInterface):
    """
    Process-local repository.

    All writes go through one lock; readers copy lists before returning so
    they never see a half-applied write.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._exams: Dict[str, ExamDefinition] = {}
        self._results: Dict[str, StoredResult] = {}
        self._misses: Dict[str, StoredMiss] = {}

        logger.info("Initialized InMemoryResultRepository")

    async def save_exam(self, exam: ExamDefinition) -> None:
        async with self._lock:
            self._exams[exam.id] = exam

        logger.debug("Exam saved", extra_data={"exam_id": exam.id})

    async def get_exam(self, exam_id: str) -> ExamDefinition:
        exam = self._exams.get(exam_id)
        if exam is None:
            logger.warning("Exam not found", extra_data={"exam_id": exam_id})
            raise ExamNotFoundError(exam_id)
        return exam

    async def save_graded(self, result: StoredResult, misses: List[StoredMiss]) -> None:
        async with self._lock:
            existing = self._find(result.kind, result.source_id, result.student_id)
            if result.kind == ResultKind.EXAM and existing is not None:
                raise DuplicateSubmissionError(result.source_id, result.student_id)

            self._results[result.id] = result
            for miss in misses:
                self._misses[miss.id] = miss

        logger.debug(
            "Result saved",
            extra_data={"result_id": result.id, "miss_count": len(misses)}
        )

    async def replace_graded(self, result: StoredResult, misses: List[StoredMiss]) -> None:
        async with self._lock:
            if result.id not in self._results:
                raise ResultNotFoundError(result.id)

            remaining = {
                miss_id: miss
                for miss_id, miss in self._misses.items()
                if miss.result_id != result.id
            }
            for miss in misses:
                remaining[miss.id] = miss

            self._results[result.id] = result
            self._misses = remaining

        logger.debug(
            "Result replaced",
            extra_data={"result_id": result.id, "miss_count": len(misses)}
        )

    async def get_result(self, result_id: str) -> StoredResult:
        result = self._results.get(result_id)
        if result is None:
            raise ResultNotFoundError(result_id)
        return result

    def _find(self, kind: ResultKind, source_id: str, student_id: str) -> Optional[StoredResult]:
        for result in list(self._results.values()):
            if result.kind == kind and result.source_id == source_id and result.student_id == student_id:
                return result
        return None

    async def misses_for_result(self, result_id: str) -> List[StoredMiss]:
        misses = [miss for miss in list(self._misses.values()) if miss.result_id == result_id]
        return sorted(misses, key=lambda m: (m.record.group_index, m.record.question_index))

    async def list_misses(self, student_id: str, reviewed: Optional[bool] = None) -> List[StoredMiss]:
        misses = [
            miss for miss in list(self._misses.values())
            if miss.student_id == student_id
            and (reviewed is None or miss.is_reviewed == reviewed)
        ]
        return sorted(misses, key=lambda m: m.created_at, reverse=True)

    async def get_miss(self, miss_id: str) -> StoredMiss:
        miss = self._misses.get(miss_id)
        if miss is None:
            raise MissNotFoundError(miss_id)
        return miss

    async def mark_reviewed(self, miss_id: str, reviewed_at: Optional[datetime] = None) -> StoredMiss:
        async with self._lock:
            miss = self._misses.get(miss_id)
            if miss is None:
                raise MissNotFoundError(miss_id)
            updated = miss.model_copy(update={
                "is_reviewed": True,
                "reviewed_at": reviewed_at or utcnow(),
            })
            self._misses[miss_id] = updated

        logger.debug("Miss marked reviewed", extra_data={"miss_id": miss_id})
        return updated


# Singleton instance
_result_repository: Optional[InMemoryResultRepository] = None


def get_result_repository() -> InMemoryResultRepository:
    """Get result repository instance (singleton)"""
    global _result_repository

    if _result_repository is None:
        _result_repository = InMemoryResultRepository()

    return _result_repository
