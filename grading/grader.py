"""
Exam grading orchestrator.

ExamGrader sweeps an exam definition in order, dispatches each question to
a matcher by question type, and folds the verdicts into a
SubmissionResult. The free-text matcher is chosen by the call site:
StrictMatcher when an exam is submitted, FuzzyMatcher for retries.
"""

from __future__ import annotations

import logging
from typing import Sequence, assert_never

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownQuestionError
from .matcher import AnswerMatcher, create_matcher
from .matchers import ExactMatcher, StrictMatcher
from .models import ExamDefinition, Question, QuestionRef, QuestionType, Submission
from .recorder import record_misses
from .splitter import split_pieces
from .verdict import GradedSubmission, SubmissionResult, Verdict

logger = logging.getLogger(__name__)

MANUAL_MATCHER = "manual"


class ExamGrader(BaseModel):
    """
    Grades whole submissions or single answers.

    Attributes:
        objective_matcher: Strategy for objective and true/false questions
        free_text_matcher: Strategy for short-answer and essay questions
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    objective_matcher: AnswerMatcher = Field(default_factory=ExactMatcher)
    free_text_matcher: AnswerMatcher = Field(default_factory=StrictMatcher)

    def select_matcher(self, question_type: QuestionType) -> AnswerMatcher:
        if question_type is QuestionType.OBJECTIVE or question_type is QuestionType.TRUE_FALSE:
            return self.objective_matcher
        elif question_type is QuestionType.SHORT_ANSWER or question_type is QuestionType.ESSAY:
            return self.free_text_matcher
        else:
            assert_never(question_type)

    def grade_question(
        self, question: Question, values: Sequence[str], ref: QuestionRef
    ) -> Verdict:
        return self.select_matcher(question.type).evaluate(question, values, ref)

    def grade(self, exam: ExamDefinition, submission: Submission) -> SubmissionResult:
        """
        Grade every question of exam against submission.

        Questions without an answer are graded as empty. Answers for
        questions that are not in the exam are ignored; when the same
        question is answered twice the first answer is used.

        Args:
            exam: Exam definition (drives iteration)
            submission: Student answers

        Returns:
            SubmissionResult with one verdict per question
        """
        answers: dict[QuestionRef, list[str]] = {}
        for answer in submission.answers:
            answers.setdefault(answer.ref, answer.values)

        verdicts = []
        for ref, question in exam.iter_questions():
            verdicts.append(self.grade_question(question, answers.pop(ref, []), ref))

        if answers:
            logger.debug(
                "Ignored %d answer(s) for unknown questions in exam %s",
                len(answers),
                exam.id,
            )

        result = SubmissionResult(
            exam_id=exam.id,
            elapsed_time=submission.elapsed_time,
            verdicts=tuple(verdicts),
        )
        logger.debug(
            "Graded exam %s: %d/%d correct, score %d",
            exam.id,
            result.correct_count,
            result.total_questions,
            result.score,
        )
        return result

    def grade_and_record(self, exam: ExamDefinition, submission: Submission) -> GradedSubmission:
        """Grade a submission and build its miss records in one step."""
        result = self.grade(exam, submission)
        return GradedSubmission.build(result, record_misses(exam, result))


def submission_grader() -> ExamGrader:
    """Grader used when an exam is first submitted."""
    return ExamGrader(
        objective_matcher=create_matcher("exact"),
        free_text_matcher=create_matcher("strict"),
    )


def retry_grader(
    short_answer_threshold: float | None = None,
    essay_threshold: float | None = None,
) -> ExamGrader:
    """Grader used by review, retry and self-study flows."""
    options = {}
    if short_answer_threshold is not None:
        options["short_answer_threshold"] = short_answer_threshold
    if essay_threshold is not None:
        options["essay_threshold"] = essay_threshold
    return ExamGrader(
        objective_matcher=create_matcher("exact"),
        free_text_matcher=create_matcher("fuzzy", **options),
    )


def grade_submission(exam: ExamDefinition, submission: Submission) -> GradedSubmission:
    """Grade a submission strictly and record its misses."""
    return submission_grader().grade_and_record(exam, submission)


def grade_retry(
    question: Question,
    candidate: str,
    ref: QuestionRef | None = None,
    grader: ExamGrader | None = None,
) -> Verdict:
    """
    Grade one retry attempt with the fuzzy strategy.

    Objective candidates are split on commas so a multi-select answer
    can be retried as one string.

    Args:
        question: Question being retried
        candidate: The student's new answer
        ref: Position to stamp on the verdict (defaults to 0/0)
        grader: Grader to use (defaults to retry_grader())

    Returns:
        Verdict for the single attempt
    """
    grader = grader or retry_grader()
    ref = ref or QuestionRef(group_index=0, question_index=0)
    if question.type.is_objective:
        # Multi-select retries arrive as one comma-joined string (e.g. "1, 3")
        values = split_pieces(candidate)
    else:
        values = [candidate] if candidate else []
    return grader.grade_question(question, values, ref)


def override_verdict(
    exam: ExamDefinition,
    graded: GradedSubmission,
    ref: QuestionRef,
    is_correct: bool,
) -> GradedSubmission:
    """
    Replace one verdict with a manual decision and rebuild the record.

    The previous GradedSubmission is left untouched.

    Raises:
        UnknownQuestionError: If ref is not part of exam or of the result
    """
    question = exam.question_at(ref)
    previous = graded.result.verdict_for(ref)
    if previous is None:
        raise UnknownQuestionError(ref.group_index, ref.question_index)

    replacement = Verdict(
        group_index=ref.group_index,
        question_index=ref.question_index,
        question_type=question.type,
        submitted_values=previous.submitted_values,
        accepted_answers=tuple(question.accepted_answers),
        is_correct=is_correct,
        matcher=MANUAL_MATCHER,
    )
    verdicts = tuple(
        replacement if verdict.ref == ref else verdict for verdict in graded.result.verdicts
    )
    result = graded.result.model_copy(update={"verdicts": verdicts})
    return GradedSubmission.build(result, record_misses(exam, result))
