"""Tests for the grading orchestrator and the regrade override."""

import pytest
from pydantic import ValidationError

from grading import (
    ExamDefinition,
    ExamGrader,
    FuzzyMatcher,
    QuestionRef,
    StrictMatcher,
    Submission,
    SubmittedAnswer,
    UnknownQuestionError,
    grade_retry,
    grade_submission,
    override_verdict,
    retry_grader,
    submission_grader,
)


class TestScenarios:
    """End-to-end grading of single questions."""

    def test_objective_exact(self, make_question, make_exam, submit):
        exam = make_exam(make_question("objective", ["1"]))
        assert grade_submission(exam, submit(["1"])).result.correct_count == 1
        assert grade_submission(exam, submit(["2"])).result.correct_count == 0

    def test_short_answer_case_space_insensitive(self, make_question, make_exam, submit):
        exam = make_exam(make_question("short_answer", ["산", "강", "달"]))
        assert grade_submission(exam, submit([" 산 "])).result.verdicts[0].is_correct is True

    def test_multi_blank(self, make_question, make_exam, submit):
        exam = make_exam(make_question("short_answer", ["표준설", "과실"]))
        assert grade_submission(exam, submit(["표준설, 과실"])).result.score == 100
        assert grade_submission(exam, submit(["표준설, 실수"])).result.score == 0
        assert grade_submission(exam, submit(["표준설,과실,여분"])).result.score == 0

    def test_essay_is_strict_at_submission(self, make_question, make_exam, submit):
        exam = make_exam(make_question("essay", ["인간의 지능을 모방하는 시스템을 만드는 기술"]))
        result = grade_submission(exam, submit(["인간의 지능을 모방하는 시스템"])).result
        assert result.verdicts[0].is_correct is False
        assert result.verdicts[0].matcher == "strict"

    def test_true_false_behaves_as_objective(self, make_question, make_exam, submit):
        exam = make_exam(make_question("true_false", ["1"]))
        verdict = grade_submission(exam, submit(["1"])).result.verdicts[0]
        assert verdict.is_correct is True
        assert verdict.matcher == "exact"


class TestAggregateScoring:

    def test_seven_of_ten(self, make_question, make_exam, submit):
        exam = make_exam(*[make_question("objective", ["1"]) for _ in range(10)])
        answers = [["1"]] * 7 + [["2"]] * 3
        result = grade_submission(exam, submit(*answers)).result
        assert result.total_questions == 10
        assert result.correct_count == 7
        assert result.score == 70

    def test_no_questions(self, make_exam, submit):
        result = grade_submission(make_exam(), submit()).result
        assert result.total_questions == 0
        assert result.correct_count == 0
        assert result.score == 0
        assert result.verdicts == ()

    def test_rounds_half_up(self, make_question, make_exam, submit):
        exam = make_exam(*[make_question("objective", ["1"]) for _ in range(8)])
        result = grade_submission(exam, submit(["1"])).result
        assert result.score == 13

    def test_elapsed_time_passes_through(self, make_question, make_exam, submit):
        exam = make_exam(make_question("objective", ["1"]))
        result = grade_submission(exam, submit(["1"], elapsed_time=93.5)).result
        assert result.elapsed_time == 93.5
        assert result.exam_id == "exam-1"


class TestOrchestration:

    def test_definition_order_across_groups(self, reading_exam):
        submission = Submission(answers=[
            SubmittedAnswer(group_index=1, question_index=0, values=["x"]),
            SubmittedAnswer(group_index=0, question_index=1, values=["표준설, 과실"]),
            SubmittedAnswer(group_index=0, question_index=0, values=["1"]),
        ])
        result = grade_submission(reading_exam, submission).result
        assert [(v.group_index, v.question_index) for v in result.verdicts] == [(0, 0), (0, 1), (1, 0)]
        assert [v.is_correct for v in result.verdicts] == [True, True, False]

    def test_missing_answer_is_incorrect(self, reading_exam):
        submission = Submission(answers=[SubmittedAnswer(group_index=0, question_index=0, values=["1"])])
        result = grade_submission(reading_exam, submission).result
        assert result.total_questions == 3
        assert result.correct_count == 1
        assert result.verdicts[2].submitted_values == ()

    def test_unknown_references_are_ignored(self, make_question, make_exam):
        exam = make_exam(make_question("objective", ["1"]))
        submission = Submission(answers=[
            SubmittedAnswer(group_index=0, question_index=0, values=["1"]),
            SubmittedAnswer(group_index=0, question_index=5, values=["1"]),
            SubmittedAnswer(group_index=3, question_index=0, values=["1"]),
        ])
        result = grade_submission(exam, submission).result
        assert result.total_questions == 1
        assert result.correct_count == 1

    def test_first_duplicate_answer_wins(self, make_question, make_exam):
        exam = make_exam(make_question("objective", ["1"]))
        submission = Submission(answers=[
            SubmittedAnswer(group_index=0, question_index=0, values=["2"]),
            SubmittedAnswer(group_index=0, question_index=0, values=["1"]),
        ])
        assert grade_submission(exam, submission).result.correct_count == 0

    def test_deterministic(self, reading_exam, submit):
        submission = submit(["1"], ["표준설, 과실"])
        first = grade_submission(reading_exam, submission).to_dict()
        second = grade_submission(reading_exam, submission).to_dict()
        assert first == second

    def test_free_text_matcher_is_pluggable(self, make_question, make_exam, submit):
        exam = make_exam(make_question("essay", ["인간의 지능을 모방하는 시스템을 만드는 기술"]))
        grader = ExamGrader(free_text_matcher=FuzzyMatcher())
        result = grader.grade(exam, submit(["인간의 지능을 모방하는 시스템"]))
        assert result.verdicts[0].is_correct is True
        assert result.verdicts[0].matcher == "fuzzy"

    def test_factory_graders(self):
        assert isinstance(submission_grader().free_text_matcher, StrictMatcher)
        grader = retry_grader(short_answer_threshold=0.8)
        assert isinstance(grader.free_text_matcher, FuzzyMatcher)
        assert grader.free_text_matcher.short_answer_threshold == 0.8
        assert grader.free_text_matcher.essay_threshold == 0.7

    def test_factory_graders_resolve_by_name(self, monkeypatch):
        import grading.grader

        requested = []
        original = grading.grader.create_matcher

        def spy(name, **options):
            requested.append(name)
            return original(name, **options)

        monkeypatch.setattr(grading.grader, "create_matcher", spy)
        submission_grader()
        retry_grader(essay_threshold=0.6)

        assert requested == ["exact", "strict", "exact", "fuzzy"]


class TestGradeRetry:

    def test_uses_fuzzy_path(self, make_question):
        question = make_question("essay", ["인간의 지능을 모방하는 시스템을 만드는 기술"])
        verdict = grade_retry(question, "인간의 지능을 모방하는 시스템")
        assert verdict.is_correct is True
        assert verdict.matcher == "fuzzy"

    def test_objective_retry_is_exact(self, make_question):
        question = make_question("objective", ["1"])
        assert grade_retry(question, "1").is_correct is True
        assert grade_retry(question, "2").is_correct is False
        assert grade_retry(question, "1").matcher == "exact"

    @pytest.mark.parametrize("candidate", ["1,3", "1, 3", "3,1", " 3 , 1 "])
    def test_multi_select_retry(self, make_question, candidate):
        question = make_question("objective", ["1", "3"])
        verdict = grade_retry(question, candidate)
        assert verdict.is_correct is True
        assert sorted(verdict.submitted_values) == ["1", "3"]

    @pytest.mark.parametrize("candidate", ["1", "3", "1 3", "1,2", "1,3,4"])
    def test_multi_select_retry_needs_every_choice(self, make_question, candidate):
        question = make_question("objective", ["1", "3"])
        assert grade_retry(question, candidate).is_correct is False

    def test_multi_blank_retry_is_not_split(self, make_question):
        # Fuzzy retries compare the whole string: the joined answer only
        # reaches containment (0.7), while a single blank matches exactly.
        question = make_question("short_answer", ["표준설", "과실"])
        assert grade_retry(question, "표준설, 과실").is_correct is False
        assert grade_retry(question, "표준설").is_correct is True
        assert grade_retry(question, "과실").is_correct is True

    def test_multi_blank_passes_strictly_at_submission(self, make_question, make_exam, submit):
        question = make_question("short_answer", ["표준설", "과실"])
        result = grade_submission(make_exam(question), submit(["표준설, 과실"])).result
        assert result.correct_count == 1
        assert grade_submission(make_exam(question), submit(["표준설, 실수"])).result.correct_count == 0

    def test_empty_candidate(self, make_question):
        verdict = grade_retry(make_question("short_answer", ["산"]), "")
        assert verdict.is_correct is False
        assert verdict.submitted_values == ()

    def test_reference_is_stamped(self, make_question):
        ref = QuestionRef(group_index=2, question_index=1)
        verdict = grade_retry(make_question("short_answer", ["산"]), "산", ref)
        assert verdict.ref == ref


class TestOverrideVerdict:

    @pytest.fixture
    def graded(self, reading_exam, submit):
        # q1 correct, q2 wrong, q3 unanswered
        return grade_submission(reading_exam, submit(["1"], ["표준설, 실수"]))

    def test_mark_correct(self, reading_exam, graded):
        ref = QuestionRef(group_index=0, question_index=1)
        regraded = override_verdict(reading_exam, graded, ref, True)

        assert regraded.result.correct_count == 2
        assert regraded.result.score == 67
        verdict = regraded.result.verdict_for(ref)
        assert verdict.is_correct is True
        assert verdict.matcher == "manual"
        assert verdict.submitted_values == ("표준설, 실수",)
        assert [m.ref for m in regraded.misses] == [QuestionRef(group_index=1, question_index=0)]

    def test_mark_incorrect(self, reading_exam, graded):
        ref = QuestionRef(group_index=0, question_index=0)
        regraded = override_verdict(reading_exam, graded, ref, False)
        assert regraded.result.correct_count == 0
        assert regraded.result.score == 0
        assert len(regraded.misses) == 3

    def test_previous_record_untouched(self, reading_exam, graded):
        before = graded.to_dict()
        override_verdict(reading_exam, graded, QuestionRef(group_index=0, question_index=1), True)
        assert graded.to_dict() == before

    def test_unknown_question(self, reading_exam, graded):
        with pytest.raises(UnknownQuestionError):
            override_verdict(reading_exam, graded, QuestionRef(group_index=0, question_index=9), True)

    def test_question_missing_from_result(self, reading_exam, make_question, make_exam, submit):
        other = grade_submission(make_exam(make_question("objective", ["1"])), submit(["1"]))
        with pytest.raises(UnknownQuestionError):
            override_verdict(reading_exam, other, QuestionRef(group_index=1, question_index=0), True)


class TestVerdictImmutability:

    def test_verdict_is_frozen(self, reading_exam, submit):
        verdict = grade_submission(reading_exam, submit(["1"])).result.verdicts[0]
        with pytest.raises(ValidationError):
            verdict.is_correct = False

    def test_result_is_frozen(self, reading_exam, submit):
        result = grade_submission(reading_exam, submit(["1"])).result
        with pytest.raises(ValidationError):
            result.verdicts = ()
