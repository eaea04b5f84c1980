"""Storage contracts for exams and submissions.

``ExamCatalog`` and ``SubmissionStore`` are the in-memory implementations; a
durable backend only has to provide the same methods to be dropped into
``ExamManager``.
"""

from __future__ import annotations

from typing import Protocol

from exam_app.core.models import Exam, Submission


class ExamStore(Protocol):
    def create(self, exam: Exam) -> None: ...

    def update(self, exam: Exam) -> None: ...

    def delete(self, exam_id: str) -> bool: ...

    def get_by_id(self, exam_id: str) -> Exam | None: ...

    def list_by_author(self, author_id: str) -> list[Exam]: ...

    def list_all(self) -> list[Exam]: ...


class SubmissionLog(Protocol):
    def append(self, submission: Submission) -> None: ...

    def list_by_exam(self, exam_id: str) -> list[Submission]: ...

    def list_by_student(self, student_id: str) -> list[Submission]: ...

    def find_by_id(self, submission_id: str) -> Submission | None: ...

    def has_submitted(self, exam_id: str, student_id: str) -> bool: ...
