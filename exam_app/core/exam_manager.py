"""Business logic for exams and attempts shared between the UI, API and countdown."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
from threading import Lock

from exam_app.core.errors import AttemptStateError, ExamNotFoundError
from exam_app.core.models import AttemptSnapshot, Exam, Submission, SubmissionReport, utc_now
from exam_app.core.services.attempt_session import AttemptSession, new_submission_id
from exam_app.core.services.exam_catalog import ExamCatalog
from exam_app.core.services.grading import grade_report, is_passing
from exam_app.core.services.storage import ExamStore, SubmissionLog
from exam_app.core.services.submission_store import SubmissionStore

logger = logging.getLogger(__name__)


class ExamManager:
    """Facade for the exam services: Catalog, Submissions and live AttemptSessions.

    Every public method holds one lock, so calls from the HTTP server thread,
    the countdown thread and the Qt thread never interleave.
    """

    def __init__(
        self,
        catalog: ExamStore | None = None,
        submissions: SubmissionLog | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_submission_id,
    ) -> None:
        self._lock = Lock()

        # Services
        self._catalog: ExamStore = catalog if catalog is not None else ExamCatalog()
        self._submissions: SubmissionLog = (
            submissions if submissions is not None else SubmissionStore()
        )
        self._clock = clock
        self._id_factory = id_factory

        # One live attempt per student: opening another exam replaces it.
        self._attempts: dict[str, AttemptSession] = {}

    # --- Exam Catalog Delegation ---

    def create_exam(self, exam: Exam) -> None:
        with self._lock:
            self._catalog.create(exam)
            logger.info(
                "Exam %s created by %s (%d questions)", exam.id, exam.created_by, len(exam.questions)
            )

    def update_exam(self, exam: Exam) -> None:
        with self._lock:
            self._catalog.update(exam)
            logger.info("Exam %s updated", exam.id)

    def delete_exam(self, exam_id: str) -> bool:
        with self._lock:
            removed = self._catalog.delete(exam_id)
            if removed:
                logger.info("Exam %s deleted", exam_id)
            return removed

    def get_exam(self, exam_id: str) -> Exam | None:
        with self._lock:
            return self._catalog.get_by_id(exam_id)

    def list_exams(self) -> list[Exam]:
        with self._lock:
            return self._catalog.list_all()

    def list_exams_by_author(self, author_id: str) -> list[Exam]:
        with self._lock:
            return self._catalog.list_by_author(author_id)

    def list_available_exams(self, student_id: str) -> list[Exam]:
        """Exams the student has not submitted yet; each exam is taken at most once."""
        with self._lock:
            return [
                exam
                for exam in self._catalog.list_all()
                if not self._submissions.has_submitted(exam.id, student_id)
            ]

    # --- Attempt Session Delegation ---

    def start_attempt(self, exam_id: str, student_id: str) -> AttemptSnapshot:
        with self._lock:
            exam = self._catalog.get_by_id(exam_id)
            if exam is None:
                raise ExamNotFoundError(exam_id)
            if self._submissions.has_submitted(exam_id, student_id):
                raise AttemptStateError("This exam has already been submitted.")

            previous = self._attempts.pop(student_id, None)
            if previous is not None and not previous.is_closed():
                previous.abandon()
                logger.info(
                    "Student %s left exam %s without submitting", student_id, previous.exam_id
                )

            session = AttemptSession(
                exam,
                student_id,
                self._submissions,
                clock=self._clock,
                id_factory=self._id_factory,
            )
            session.start()
            self._attempts[student_id] = session
            logger.info("Student %s started exam %s", student_id, exam_id)
            return session.snapshot()

    def get_attempt(self, student_id: str) -> AttemptSnapshot | None:
        with self._lock:
            session = self._attempts.get(student_id)
            return session.snapshot() if session is not None else None

    def has_attempt(self, student_id: str) -> bool:
        with self._lock:
            return student_id in self._attempts

    def select_answer(self, student_id: str, question_id: str, option_id: str) -> AttemptSnapshot:
        with self._lock:
            session = self._require_attempt(student_id)
            session.select_answer(question_id, option_id)
            return session.snapshot()

    def next_question(self, student_id: str) -> AttemptSnapshot:
        with self._lock:
            session = self._require_attempt(student_id)
            session.next_question()
            return session.snapshot()

    def prev_question(self, student_id: str) -> AttemptSnapshot:
        with self._lock:
            session = self._require_attempt(student_id)
            session.prev_question()
            return session.snapshot()

    def go_to_question(self, student_id: str, index: int) -> AttemptSnapshot:
        with self._lock:
            session = self._require_attempt(student_id)
            session.go_to_question(index)
            return session.snapshot()

    def finish_attempt(self, student_id: str, confirmed: bool = False) -> Submission:
        with self._lock:
            session = self._require_attempt(student_id)
            submission = session.finish(confirmed=confirmed)
            del self._attempts[student_id]
            logger.info(
                "Student %s submitted exam %s with score %.1f",
                student_id,
                submission.exam_id,
                submission.score,
            )
            return submission

    def abandon_attempt(self, student_id: str) -> bool:
        with self._lock:
            session = self._attempts.get(student_id)
            if session is None:
                return False
            session.abandon()
            del self._attempts[student_id]
            logger.info("Student %s abandoned exam %s", student_id, session.exam_id)
            return True

    def tick_attempts(self, seconds: int = 1) -> list[Submission]:
        """Advance every live countdown; returns submissions forced by expiry."""
        forced: list[Submission] = []
        with self._lock:
            for student_id, session in list(self._attempts.items()):
                if not session.is_in_progress():
                    continue
                try:
                    submission = session.tick(seconds)
                except Exception:
                    # The session rolled back to in progress; the next tick retries it.
                    logger.exception(
                        "Forced submission failed for student %s on exam %s",
                        student_id,
                        session.exam_id,
                    )
                    continue
                if submission is not None:
                    del self._attempts[student_id]
                    forced.append(submission)
        return forced

    def active_attempt_count(self) -> int:
        with self._lock:
            return len(self._attempts)

    # --- Submission Store Delegation ---

    def get_submission(self, submission_id: str) -> Submission | None:
        with self._lock:
            return self._submissions.find_by_id(submission_id)

    def list_submissions_for_exam(self, exam_id: str) -> list[Submission]:
        with self._lock:
            return self._submissions.list_by_exam(exam_id)

    def list_submissions_for_student(self, student_id: str) -> list[Submission]:
        with self._lock:
            return self._submissions.list_by_student(student_id)

    def get_submission_report(self, submission_id: str) -> SubmissionReport | None:
        """Submission plus its per-question breakdown against the current exam."""
        with self._lock:
            submission = self._submissions.find_by_id(submission_id)
            if submission is None:
                return None
            exam = self._catalog.get_by_id(submission.exam_id)
            report = grade_report(exam, submission.answers) if exam is not None else None
            return SubmissionReport(
                submission=submission,
                exam=exam,
                grade=report,
                passed=is_passing(submission.score),
            )

    def _require_attempt(self, student_id: str) -> AttemptSession:
        session = self._attempts.get(student_id)
        if session is None:
            raise AttemptStateError("No exam is currently in progress.")
        return session
