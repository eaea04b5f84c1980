"""Exceptions raised by the exam core.

Each error derives from the builtin the rest of the code base already catches
(``ValueError`` for rejected input, ``KeyError`` for missing records,
``RuntimeError`` for calls made in the wrong state).
"""

from __future__ import annotations


class ExamValidationError(ValueError):
    """Raised when an authored exam breaks an authoring rule."""


class DuplicateExamError(ValueError):
    """Raised when an exam is created with an id that is already in use."""


class ExamNotFoundError(KeyError):
    """Raised when a write or attempt refers to an exam that does not exist."""

    def __init__(self, exam_id: str) -> None:
        super().__init__(exam_id)
        self.exam_id = exam_id

    def __str__(self) -> str:
        return f"Exam '{self.exam_id}' not found."


class AttemptStateError(RuntimeError):
    """Raised when an attempt operation is not allowed in the current state."""


class ConfirmationRequiredError(AttemptStateError):
    """Raised when a student finishes with unanswered questions and has not confirmed."""

    def __init__(self, unanswered_count: int) -> None:
        super().__init__(
            f"{unanswered_count} question(s) unanswered. Confirm to submit anyway."
        )
        self.unanswered_count = unanswered_count
