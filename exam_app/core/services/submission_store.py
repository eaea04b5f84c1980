"""Service for recording finalized exam submissions."""

from __future__ import annotations

from exam_app.core.models import Submission


class SubmissionStore:
    """Append-only, in-memory log of graded submissions."""

    def __init__(self) -> None:
        self._submissions: list[Submission] = []

    def append(self, submission: Submission) -> None:
        if self.find_by_id(submission.id) is not None:
            raise ValueError(f"Submission '{submission.id}' has already been recorded.")
        self._submissions.append(submission)

    def list_by_exam(self, exam_id: str) -> list[Submission]:
        return [s for s in self._submissions if s.exam_id == exam_id]

    def list_by_student(self, student_id: str) -> list[Submission]:
        return [s for s in self._submissions if s.student_id == student_id]

    def find_by_id(self, submission_id: str) -> Submission | None:
        return next((s for s in self._submissions if s.id == submission_id), None)

    def has_submitted(self, exam_id: str, student_id: str) -> bool:
        return any(
            s.exam_id == exam_id and s.student_id == student_id for s in self._submissions
        )

    def count(self) -> int:
        return len(self._submissions)
