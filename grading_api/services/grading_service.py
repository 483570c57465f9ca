"""
Grading service for exam submissions.

Handles submission, teacher regrade overrides and passage self-study
grading. The engine computes; this layer looks things up, enforces
one-submission-per-student and persists results atomically.
"""

from typing import List, Optional, Tuple

from grading import (
    ExamDefinition,
    ExamGrader,
    GradedSubmission,
    MissRecord,
    Passage,
    PassageAttempt,
    PassageResult,
    QuestionRef,
    Submission,
    UnknownQuestionError,
    grade_passage,
    override_verdict,
    retry_grader,
    submission_grader,
)

from ..core.config import Settings, settings as default_settings
from ..core.errors import QuestionNotFoundError, ResultNotFoundError
from ..core.logging import get_logger
from ..models.domain import ResultKind, StoredMiss, StoredResult, utcnow
from ..repositories.result_repository import ResultRepositoryInterface

logger = get_logger(__name__)


class GradingService:
    """
    Service for exam grading operations.

    Grades submissions strictly and keeps each result and its miss records
    consistent in the repository.
    """

    def __init__(
        self,
        repository: ResultRepositoryInterface,
        grader: ExamGrader | None = None,
        settings: Settings | None = None
    ):
        self.repository = repository
        self.grader = grader or submission_grader()
        self.settings = settings or default_settings

    async def register_exam(self, exam: ExamDefinition) -> ExamDefinition:
        """Create or replace an exam definition"""
        await self.repository.save_exam(exam)
        logger.info(
            "Exam registered",
            extra_data={"exam_id": exam.id, "total_questions": exam.total_questions}
        )
        return exam

    async def get_exam(self, exam_id: str) -> ExamDefinition:
        return await self.repository.get_exam(exam_id)

    async def submit(
        self,
        exam_id: str,
        student_id: str,
        submission: Submission
    ) -> Tuple[StoredResult, GradedSubmission]:
        """
        Grade and store an exam submission.

        Args:
            exam_id: Exam identifier
            student_id: Submitting student
            submission: Validated answers

        Returns:
            Tuple of (stored_result, graded_submission)

        Raises:
            ExamNotFoundError: If the exam doesn't exist
            DuplicateSubmissionError: If the student already submitted
        """
        exam = await self.repository.get_exam(exam_id)

        graded = self.grader.grade_and_record(exam, submission)

        stored = StoredResult(
            kind=ResultKind.EXAM,
            source_id=exam_id,
            student_id=student_id,
            record=graded.to_dict(),
            exam=exam,
        )
        misses = [
            StoredMiss(student_id=student_id, result_id=stored.id, record=record)
            for record in graded.misses
        ]
        await self.repository.save_graded(stored, misses)

        logger.info(
            "Exam graded",
            extra_data={
                "exam_id": exam_id,
                "student_id": student_id,
                "result_id": stored.id,
                "score": graded.result.score,
                "correct_count": graded.result.correct_count,
                "total_questions": graded.result.total_questions,
            }
        )

        return stored, graded

    async def get_result(self, result_id: str) -> StoredResult:
        return await self.repository.get_result(result_id)

    async def update_grading(
        self,
        result_id: str,
        group_index: int,
        question_index: int,
        is_correct: bool
    ) -> Tuple[StoredResult, GradedSubmission]:
        """
        Apply a teacher's manual decision to one question.

        Miss records for untouched questions keep their id and review
        state; only the overridden question's miss is added or dropped.

        Raises:
            ResultNotFoundError: If the result doesn't exist or is not an exam result
            QuestionNotFoundError: If the question is not part of the exam
        """
        stored = await self.repository.get_result(result_id)
        if stored.kind != ResultKind.EXAM or stored.exam is None:
            raise ResultNotFoundError(result_id)

        # Regrade against the definition the result was graded with; the
        # registered exam may have been replaced since.
        exam = stored.exam
        ref = QuestionRef(group_index=group_index, question_index=question_index)

        try:
            regraded = override_verdict(exam, stored.graded(), ref, is_correct)
        except UnknownQuestionError as e:
            raise QuestionNotFoundError(e.group_index, e.question_index) from e

        previous = {miss.record.ref: miss for miss in await self.repository.misses_for_result(result_id)}
        misses = [
            self._carry_over(previous.get(record.ref), record, stored)
            for record in regraded.misses
        ]

        updated = stored.model_copy(update={"record": regraded.to_dict(), "updated_at": utcnow()})
        await self.repository.replace_graded(updated, misses)

        logger.info(
            "Grading updated",
            extra_data={
                "result_id": result_id,
                "group_index": group_index,
                "question_index": question_index,
                "is_correct": is_correct,
                "score": regraded.result.score,
            }
        )

        return updated, regraded

    @staticmethod
    def _carry_over(existing: Optional[StoredMiss], record: MissRecord, stored: StoredResult) -> StoredMiss:
        if existing is not None:
            return existing
        return StoredMiss(student_id=stored.student_id, result_id=stored.id, record=record)

    async def grade_passage(
        self,
        student_id: str,
        passage: Passage,
        attempt: PassageAttempt
    ) -> Tuple[StoredResult, PassageResult]:
        """Grade a passage study attempt with the fuzzy strategy and store it"""
        grader = retry_grader(
            short_answer_threshold=self.settings.SHORT_ANSWER_THRESHOLD,
            essay_threshold=self.settings.ESSAY_THRESHOLD,
        )
        result = grade_passage(passage, attempt, grader)

        stored = StoredResult(
            kind=ResultKind.PASSAGE,
            source_id=passage.id,
            student_id=student_id,
            record=result.to_dict(),
        )
        misses: List[StoredMiss] = [
            StoredMiss(student_id=student_id, result_id=stored.id, record=record)
            for record in result.misses
        ]
        await self.repository.save_graded(stored, misses)

        logger.info(
            "Passage graded",
            extra_data={
                "passage_id": passage.id,
                "student_id": student_id,
                "result_id": stored.id,
                "score": result.score,
            }
        )

        return stored, result

    async def get_misses(self, result_id: str) -> List[MissRecord]:
        return [miss.record for miss in await self.repository.misses_for_result(result_id)]


# Factory function
def get_grading_service(
    repository: ResultRepositoryInterface
) -> GradingService:
    """Create grading service instance"""
    return GradingService(repository)
