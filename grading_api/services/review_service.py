"""
Review service for the wrong-answer notebook.

Lists a student's miss records with summary statistics and grades retry
attempts. Retries use the fuzzy strategy, which is more lenient than the
strict grading applied at submission time.
"""

from collections import Counter
from typing import Iterable, List, Optional, Tuple

from grading import ExamGrader, Verdict, grade_retry, retry_grader

from ..core.config import Settings, settings as default_settings
from ..core.errors import MissNotFoundError
from ..core.logging import get_context_logger
from ..models.domain import CategoryCount, MissStatistics, StoredMiss
from ..repositories.result_repository import ResultRepositoryInterface


FREQUENT_CATEGORY_LIMIT = 3


def summarize_misses(misses: Iterable[StoredMiss]) -> MissStatistics:
    """
    Count misses overall, by review state and by category.

    Args:
        misses: Miss records to summarize (already filtered)

    Returns:
        MissStatistics with the top categories by count (ties keep list order)
    """
    misses = list(misses)
    reviewed = sum(1 for miss in misses if miss.is_reviewed)
    categories = Counter(miss.category for miss in misses)

    frequent = sorted(categories.items(), key=lambda item: -item[1])[:FREQUENT_CATEGORY_LIMIT]

    return MissStatistics(
        total_wrong=len(misses),
        reviewed_count=reviewed,
        unreviewed_count=len(misses) - reviewed,
        category_stats=dict(categories),
        frequent_categories=[CategoryCount(category=name, count=count) for name, count in frequent],
    )


class ReviewService:
    """Service for reviewing and retrying missed questions"""

    def __init__(
        self,
        repository: ResultRepositoryInterface,
        grader: ExamGrader | None = None,
        settings: Settings | None = None
    ):
        self.repository = repository
        settings = settings or default_settings
        self.grader = grader or retry_grader(
            short_answer_threshold=settings.SHORT_ANSWER_THRESHOLD,
            essay_threshold=settings.ESSAY_THRESHOLD,
        )

    async def list_misses(
        self,
        student_id: str,
        reviewed: Optional[bool] = None,
        category: Optional[str] = None
    ) -> Tuple[List[StoredMiss], MissStatistics]:
        """A student's misses (newest first) and statistics over the same list"""
        misses = await self.repository.list_misses(student_id, reviewed)
        if category:
            misses = [miss for miss in misses if miss.category == category]

        return misses, summarize_misses(misses)

    async def retry(self, miss_id: str, student_id: str, answer: str) -> Tuple[Verdict, bool]:
        """
        Grade a retry attempt and mark the miss reviewed when it passes.

        Returns:
            Tuple of (verdict, reviewed)

        Raises:
            MissNotFoundError: If the miss doesn't exist or belongs to another student
        """
        miss = await self.repository.get_miss(miss_id)
        if miss.student_id != student_id:
            raise MissNotFoundError(miss_id)

        log = get_context_logger(__name__, miss_id=miss_id, student_id=student_id)

        verdict = grade_retry(miss.record.to_question(), answer, miss.record.ref, self.grader)

        reviewed = miss.is_reviewed
        if verdict.is_correct:
            await self.repository.mark_reviewed(miss_id)
            reviewed = True

        log.info("Retry graded", extra_data={"is_correct": verdict.is_correct})

        return verdict, reviewed


def get_review_service(
    repository: ResultRepositoryInterface
) -> ReviewService:
    """Create review service instance"""
    return ReviewService(repository)
