"""Tests for the exam definition and submission models."""

import pytest

from grading import (
    ExamDefinition,
    Question,
    QuestionGroup,
    QuestionRef,
    QuestionType,
    Submission,
    UnknownQuestionError,
)
from grading.models import TRUE_FALSE_OPTIONS


class TestQuestionType:

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("objective", QuestionType.OBJECTIVE),
            ("객관식", QuestionType.OBJECTIVE),
            ("단답형", QuestionType.SHORT_ANSWER),
            ("short-answer", QuestionType.SHORT_ANSWER),
            ("Short_Answer", QuestionType.SHORT_ANSWER),
            ("서술형", QuestionType.ESSAY),
            ("OX", QuestionType.TRUE_FALSE),
            ("true-false", QuestionType.TRUE_FALSE),
        ],
    )
    def test_labels(self, label, expected):
        assert QuestionType(label) is expected

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            QuestionType("matching")

    def test_is_objective(self):
        assert QuestionType.OBJECTIVE.is_objective
        assert QuestionType.TRUE_FALSE.is_objective
        assert not QuestionType.SHORT_ANSWER.is_objective
        assert not QuestionType.ESSAY.is_objective


class TestQuestionValidation:

    def test_objective_needs_two_options(self, assert_validation_error):
        assert_validation_error(
            Question,
            {"type": "objective", "options": ["only"], "acceptedAnswers": ["1"]},
            expected_message="at least 2 options",
        )

    def test_accepted_answers_required(self, assert_validation_error):
        assert_validation_error(
            Question,
            {"type": "short_answer", "acceptedAnswers": []},
            expected_field="acceptedAnswers",
        )

    def test_free_text_rejects_options(self, assert_validation_error):
        assert_validation_error(
            Question,
            {"type": "essay", "options": ["a", "b"], "acceptedAnswers": ["a"]},
            expected_message="do not take options",
        )

    def test_unknown_type(self, assert_validation_error):
        assert_validation_error(Question, {"type": "matching", "acceptedAnswers": ["a"]}, expected_field="type")

    def test_true_false_default_options(self):
        question = Question(type="OX", accepted_answers=["1"])
        assert question.options == list(TRUE_FALSE_OPTIONS)

    def test_accepts_camel_and_snake_case(self):
        camel = Question.model_validate({
            "type": "단답형",
            "acceptedAnswers": ["산"],
            "wrongAnswerExplanations": None,
        })
        snake = Question(type="short_answer", accepted_answers=["산"])
        assert camel == snake

    def test_wrong_answer_explanations(self):
        question = Question(
            type="objective",
            options=["a", "b"],
            accepted_answers=["1"],
            wrong_answer_explanations={"2": "b is wrong"},
        )
        assert question.wrong_answer_explanations["2"] == "b is wrong"


class TestExamDefinition:

    def test_iter_questions_in_order(self, reading_exam):
        refs = [(ref.group_index, ref.question_index) for ref, _ in reading_exam.iter_questions()]
        assert refs == [(0, 0), (0, 1), (1, 0)]
        assert reading_exam.total_questions == 3

    def test_question_at(self, reading_exam):
        assert reading_exam.question_at(QuestionRef(group_index=1, question_index=0)).id == "q3"

    @pytest.mark.parametrize("group_index, question_index", [(0, 2), (2, 0)])
    def test_question_at_unknown(self, reading_exam, group_index, question_index):
        with pytest.raises(UnknownQuestionError) as exc_info:
            reading_exam.question_at(QuestionRef(group_index=group_index, question_index=question_index))
        assert exc_info.value.group_index == group_index

    def test_group_needs_questions(self, assert_validation_error):
        assert_validation_error(QuestionGroup, {"questions": []}, expected_field="questions")

    def test_parse_from_wire_format(self):
        exam = ExamDefinition.model_validate({
            "id": "e1",
            "groups": [{
                "prompt": "지문",
                "questions": [{"type": "객관식", "options": ["a", "b"], "acceptedAnswers": ["2"]}],
            }],
        })
        assert exam.groups[0].questions[0].type is QuestionType.OBJECTIVE


class TestSubmission:

    def test_answers_must_be_a_list(self, assert_validation_error):
        assert_validation_error(Submission, {"answers": "1"}, expected_field="answers")

    def test_answers_required(self, assert_validation_error):
        assert_validation_error(Submission, {}, expected_field="answers")

    def test_negative_index_rejected(self, assert_validation_error):
        assert_validation_error(
            Submission,
            {"answers": [{"groupIndex": -1, "questionIndex": 0, "values": []}]},
            expected_field="answers",
        )

    def test_refs_are_hashable(self):
        submission = Submission.model_validate({
            "answers": [{"groupIndex": 0, "questionIndex": 1, "values": ["a"]}],
            "elapsedTime": 12,
        })
        ref = submission.answers[0].ref
        assert {ref: 1}[QuestionRef(group_index=0, question_index=1)] == 1
        assert submission.elapsed_time == 12.0
