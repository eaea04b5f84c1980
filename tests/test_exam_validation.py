"""
Unit tests for exam authoring rules.
"""

from dataclasses import replace

import pytest

from exam_app.core.errors import ExamValidationError
from exam_app.core.models import Option
from exam_app.core.services.exam_validation import validate_exam


class TestValidateExam:
    """Each rule rejects the exam with a readable message."""

    def test_validate_when_exam_is_well_formed_then_passes(self, exam):
        validate_exam(exam)

    def test_validate_when_called_then_exam_not_modified(self, make_exam):
        exam = make_exam(title="  Padded title  ")
        validate_exam(exam)
        assert exam.title == "  Padded title  "

    @pytest.mark.parametrize("title", ["", "   "])
    def test_validate_when_title_blank_then_rejected(self, exam, title):
        with pytest.raises(ExamValidationError, match="title must not be empty"):
            validate_exam(replace(exam, title=title))

    @pytest.mark.parametrize("duration", [0, -5])
    def test_validate_when_duration_not_positive_then_rejected(self, exam, duration):
        with pytest.raises(ExamValidationError, match="positive number of minutes"):
            validate_exam(replace(exam, duration_minutes=duration))

    @pytest.mark.parametrize("duration", [1.5, "30", True])
    def test_validate_when_duration_not_integer_then_rejected(self, exam, duration):
        with pytest.raises(ExamValidationError, match="whole number of minutes"):
            validate_exam(replace(exam, duration_minutes=duration))

    def test_validate_when_no_questions_then_rejected(self, exam):
        with pytest.raises(ExamValidationError, match="at least one question"):
            validate_exam(replace(exam, questions=[]))

    def test_validate_when_question_text_blank_then_names_question(self, exam):
        exam.questions[1].text = " "
        with pytest.raises(ExamValidationError, match="Question 2 text must not be empty"):
            validate_exam(exam)

    def test_validate_when_single_option_then_rejected(self, make_exam):
        exam = make_exam(option_count=1)
        with pytest.raises(ExamValidationError, match="Question 1 must have at least 2 options"):
            validate_exam(exam)

    def test_validate_when_option_text_empty_then_rejected(self, exam):
        exam.questions[0].options[1].text = ""
        with pytest.raises(ExamValidationError, match="Question 1 has an empty option"):
            validate_exam(exam)

    def test_validate_when_no_correct_option_then_rejected(self, exam):
        for option in exam.questions[3].options:
            option.is_correct = False
        with pytest.raises(ExamValidationError, match="Question 4 needs an option marked correct"):
            validate_exam(exam)

    def test_validate_when_several_correct_options_then_accepted(self, exam):
        exam.questions[0].options.append(
            Option(id="extra", question_id=exam.questions[0].id, text="Also right", is_correct=True)
        )
        validate_exam(exam)

    def test_validate_when_question_ids_repeat_then_rejected(self, exam):
        exam.questions[2].id = exam.questions[0].id
        with pytest.raises(ExamValidationError, match="Question 3 reuses the id"):
            validate_exam(exam)

    def test_validate_when_question_points_at_other_exam_then_rejected(self, exam):
        exam.questions[1].exam_id = "exam-9"
        with pytest.raises(ExamValidationError, match="Question 2 belongs to exam 'exam-9'"):
            validate_exam(exam)

    def test_validate_when_option_points_at_other_question_then_rejected(self, exam):
        exam.questions[0].options[2].question_id = exam.questions[1].id
        with pytest.raises(ExamValidationError, match="option 'exam-1-q0-o2' that belongs to another question"):
            validate_exam(exam)

    def test_validation_error_is_a_value_error(self, exam):
        with pytest.raises(ValueError):
            validate_exam(replace(exam, questions=[]))
