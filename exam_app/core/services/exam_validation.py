"""Authoring rules checked before an exam enters the catalog."""

from __future__ import annotations

from exam_app.constants.exam_constants import MIN_OPTIONS_PER_QUESTION
from exam_app.core.errors import ExamValidationError
from exam_app.core.models import Exam, Question


def validate_exam(exam: Exam) -> None:
    """Raise ``ExamValidationError`` for the first rule ``exam`` breaks.

    The exam is inspected, never modified, so a stored exam reads back exactly
    as supplied.
    """
    if not exam.title or not exam.title.strip():
        raise ExamValidationError("Exam title must not be empty.")
    _validate_duration(exam.duration_minutes)
    if not exam.questions:
        raise ExamValidationError("Exam must contain at least one question.")

    seen_ids: set[str] = set()
    for number, question in enumerate(exam.questions, start=1):
        if question.id in seen_ids:
            raise ExamValidationError(f"Question {number} reuses the id '{question.id}'.")
        seen_ids.add(question.id)
        if question.exam_id != exam.id:
            raise ExamValidationError(
                f"Question {number} belongs to exam '{question.exam_id}', not '{exam.id}'."
            )
        _validate_question(question, number)


def _validate_duration(duration_minutes: int) -> None:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ExamValidationError("Duration must be a whole number of minutes.")
    if duration_minutes <= 0:
        raise ExamValidationError("Duration must be a positive number of minutes.")


def _validate_question(question: Question, number: int) -> None:
    if not question.text or not question.text.strip():
        raise ExamValidationError(f"Question {number} text must not be empty.")
    if len(question.options) < MIN_OPTIONS_PER_QUESTION:
        raise ExamValidationError(
            f"Question {number} must have at least {MIN_OPTIONS_PER_QUESTION} options."
        )
    for option in question.options:
        if not option.text or not option.text.strip():
            raise ExamValidationError(f"Question {number} has an empty option.")
        if option.question_id != question.id:
            raise ExamValidationError(
                f"Question {number} has option '{option.id}' that belongs to another question."
            )
    if not any(option.is_correct for option in question.options):
        raise ExamValidationError(f"Question {number} needs an option marked correct.")
