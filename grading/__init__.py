"""
grading - Answer grading engine for teacher/student exams

Decides whether submitted answers are correct and aggregates the
decisions into scores and review records:
- Exact, order-independent matching for fixed-choice questions
- Normalized equality with multi-blank splitting (submission time)
- Token-overlap similarity with thresholds (retry and review)
- Miss records for every incorrect answer
"""

from .errors import UnknownQuestionError
from .grader import (
    ExamGrader,
    grade_retry,
    grade_submission,
    override_verdict,
    retry_grader,
    submission_grader,
)
from .matcher import AnswerMatcher, MatcherRegistry, create_matcher, register_matcher
from .matchers import ExactMatcher, FuzzyMatcher, StrictMatcher
from .models import (
    ExamDefinition,
    Question,
    QuestionGroup,
    QuestionRef,
    QuestionType,
    Submission,
    SubmittedAnswer,
)
from .normalize import normalize, normalize_loose
from .passage import Passage, PassageAttempt, PassageBlock, PassageResult, grade_passage
from .recorder import record_misses
from .similarity import similarity
from .splitter import try_split
from .verdict import GradedSubmission, MissRecord, SubmissionResult, Verdict, compute_score

__all__ = [
    "AnswerMatcher",
    "MatcherRegistry",
    "create_matcher",
    "register_matcher",
    "ExactMatcher",
    "StrictMatcher",
    "FuzzyMatcher",
    "ExamGrader",
    "submission_grader",
    "retry_grader",
    "grade_submission",
    "grade_retry",
    "override_verdict",
    "record_misses",
    "grade_passage",
    "normalize",
    "normalize_loose",
    "similarity",
    "try_split",
    "compute_score",
    # Data model
    "QuestionType",
    "Question",
    "QuestionGroup",
    "QuestionRef",
    "ExamDefinition",
    "SubmittedAnswer",
    "Submission",
    "Verdict",
    "SubmissionResult",
    "MissRecord",
    "GradedSubmission",
    "Passage",
    "PassageBlock",
    "PassageAttempt",
    "PassageResult",
    "UnknownQuestionError",
]
