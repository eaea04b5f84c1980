"""Service for managing the collection of authored exams."""

from __future__ import annotations

from exam_app.core.errors import DuplicateExamError, ExamNotFoundError
from exam_app.core.models import Exam
from exam_app.core.services.exam_validation import validate_exam


class ExamCatalog:
    """Ordered, in-memory collection of exams.

    Exams are stored as supplied: ``update`` swaps the whole object, so callers
    must pass every field, questions and options included.
    """

    def __init__(self) -> None:
        self._exams: list[Exam] = []

    def create(self, exam: Exam) -> None:
        validate_exam(exam)
        if self._index_of(exam.id) != -1:
            raise DuplicateExamError(f"An exam with id '{exam.id}' already exists.")
        self._exams.append(exam)

    def update(self, exam: Exam) -> None:
        validate_exam(exam)
        index = self._index_of(exam.id)
        if index == -1:
            raise ExamNotFoundError(exam.id)
        self._exams[index] = exam

    def delete(self, exam_id: str) -> bool:
        """Remove the exam; submissions that reference it are left untouched."""
        index = self._index_of(exam_id)
        if index == -1:
            return False
        self._exams.pop(index)
        return True

    def get_by_id(self, exam_id: str) -> Exam | None:
        index = self._index_of(exam_id)
        return self._exams[index] if index != -1 else None

    def list_by_author(self, author_id: str) -> list[Exam]:
        return [exam for exam in self._exams if exam.created_by == author_id]

    def list_all(self) -> list[Exam]:
        return list(self._exams)

    def has_exam(self, exam_id: str) -> bool:
        return self._index_of(exam_id) != -1

    def count(self) -> int:
        return len(self._exams)

    def _index_of(self, exam_id: str) -> int:
        return next((i for i, exam in enumerate(self._exams) if exam.id == exam_id), -1)
