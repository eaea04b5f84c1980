"""State machine for one student's in-progress pass through an exam."""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import datetime
import logging
from uuid import uuid4

from exam_app.core.errors import AttemptStateError, ConfirmationRequiredError
from exam_app.core.models import (
    Answer,
    AttemptSnapshot,
    AttemptState,
    Exam,
    Question,
    Submission,
    utc_now,
)
from exam_app.core.services.grading import grade
from exam_app.core.services.storage import SubmissionLog

logger = logging.getLogger(__name__)


def new_submission_id() -> str:
    return uuid4().hex


class AttemptSession:
    """Tracks answers, navigation and remaining time for a single attempt.

    States run ``NOT_STARTED -> IN_PROGRESS -> SUBMITTING -> FINALIZED``.
    ``ABANDONED`` ends an attempt without grading it. The session works on a
    private copy of the exam, so catalog edits made meanwhile do not leak in.
    Time only moves when ``tick`` is called; the caller owns the clock.
    """

    def __init__(
        self,
        exam: Exam,
        student_id: str,
        submissions: SubmissionLog,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_submission_id,
    ) -> None:
        self._exam = copy.deepcopy(exam)
        self._student_id = student_id
        self._submissions = submissions
        self._clock = clock
        self._id_factory = id_factory

        self._state = AttemptState.NOT_STARTED
        self._current_index = 0
        self._answers: dict[str, str] = {}
        self._time_remaining_seconds = 0
        self._submission: Submission | None = None

    # --- Read access ---

    @property
    def exam(self) -> Exam:
        return self._exam

    @property
    def exam_id(self) -> str:
        return self._exam.id

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def state(self) -> AttemptState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def time_remaining_seconds(self) -> int:
        return self._time_remaining_seconds

    @property
    def submission(self) -> Submission | None:
        """The graded submission once the attempt is finalized."""
        return self._submission

    def get_answers(self) -> dict[str, str]:
        return dict(self._answers)

    def selected_option_for(self, question_id: str) -> str | None:
        return self._answers.get(question_id)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self._answers

    def question_count(self) -> int:
        return len(self._exam.questions)

    def answered_count(self) -> int:
        return len(self._answers)

    def unanswered_count(self) -> int:
        return self.question_count() - self.answered_count()

    def needs_confirmation(self) -> bool:
        return self.unanswered_count() > 0

    def current_question(self) -> Question | None:
        if not self._exam.questions:
            return None
        return self._exam.questions[self._current_index]

    def is_in_progress(self) -> bool:
        return self._state is AttemptState.IN_PROGRESS

    def is_closed(self) -> bool:
        return self._state in (AttemptState.FINALIZED, AttemptState.ABANDONED)

    def snapshot(self) -> AttemptSnapshot:
        return AttemptSnapshot(
            exam=self._exam,
            student_id=self._student_id,
            state=self._state,
            current_index=self._current_index,
            time_remaining_seconds=self._time_remaining_seconds,
            answers=dict(self._answers),
            submission=self._submission,
        )

    # --- Transitions ---

    def start(self) -> None:
        self._require(AttemptState.NOT_STARTED, "start")
        self._time_remaining_seconds = self._exam.duration_minutes * 60
        self._current_index = 0
        self._state = AttemptState.IN_PROGRESS

    def select_answer(self, question_id: str, option_id: str) -> None:
        """Record ``option_id`` for the question, replacing any earlier choice."""
        self._require(AttemptState.IN_PROGRESS, "record an answer")
        question = self._exam.find_question(question_id)
        if question is None:
            raise ValueError(f"Question '{question_id}' is not part of this exam.")
        if question.find_option(option_id) is None:
            raise ValueError(f"Option '{option_id}' does not belong to question '{question_id}'.")
        self._answers[question_id] = option_id

    def next_question(self) -> int:
        return self.go_to_question(self._current_index + 1)

    def prev_question(self) -> int:
        return self.go_to_question(self._current_index - 1)

    def go_to_question(self, index: int) -> int:
        self._require(AttemptState.IN_PROGRESS, "navigate")
        last_index = max(0, self.question_count() - 1)
        self._current_index = max(0, min(last_index, index))
        return self._current_index

    def tick(self, seconds: int = 1) -> Submission | None:
        """Advance the countdown; returns the forced submission when time runs out."""
        self._require(AttemptState.IN_PROGRESS, "tick")
        if seconds < 0:
            raise ValueError("Cannot tick by a negative number of seconds.")
        self._time_remaining_seconds = max(0, self._time_remaining_seconds - seconds)
        if self._time_remaining_seconds > 0:
            return None
        logger.info(
            "Time expired for student %s on exam %s; submitting %d/%d answers",
            self._student_id,
            self._exam.id,
            self.answered_count(),
            self.question_count(),
        )
        return self._finalize()

    def finish(self, confirmed: bool = False) -> Submission:
        """Submit on the student's request.

        With unanswered questions the caller has to prompt the student first and
        pass ``confirmed=True``; otherwise ``ConfirmationRequiredError`` is raised
        and the attempt stays in progress.
        """
        self._require(AttemptState.IN_PROGRESS, "finish")
        if self.needs_confirmation() and not confirmed:
            raise ConfirmationRequiredError(self.unanswered_count())
        return self._finalize()

    def abandon(self) -> None:
        if self.is_closed() or self._state is AttemptState.SUBMITTING:
            raise AttemptStateError(f"Cannot abandon an attempt that is {self._state.value}.")
        self._state = AttemptState.ABANDONED

    def _finalize(self) -> Submission:
        """Grade and record the attempt.

        If the submission log rejects the record, the attempt goes back to
        ``IN_PROGRESS`` with its answers and time untouched, and the error
        propagates so the caller can retry.
        """
        self._state = AttemptState.SUBMITTING
        try:
            answers = tuple(
                Answer(question_id=question.id, selected_option_id=self._answers[question.id])
                for question in self._exam.questions
                if question.id in self._answers
            )
            submission = Submission(
                id=self._id_factory(),
                exam_id=self._exam.id,
                student_id=self._student_id,
                submitted_at=self._clock(),
                answers=answers,
                score=grade(self._exam, self._answers),
            )
            self._submissions.append(submission)
        except Exception:
            self._state = AttemptState.IN_PROGRESS
            raise
        self._submission = submission
        self._state = AttemptState.FINALIZED
        return submission

    def _require(self, expected: AttemptState, action: str) -> None:
        if self._state is not expected:
            raise AttemptStateError(
                f"Cannot {action} while the attempt is {self._state.value}."
            )
