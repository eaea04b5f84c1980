"""
Unit tests for the attempt session state machine.
"""

import pytest

from exam_app.core.errors import AttemptStateError, ConfirmationRequiredError
from exam_app.core.models import AttemptState
from exam_app.core.services.attempt_session import AttemptSession
from exam_app.core.services.submission_store import SubmissionStore

from conftest import FIXED_NOW


@pytest.fixture
def store():
    return SubmissionStore()


@pytest.fixture
def make_session(exam, store, fixed_clock, sequential_ids):
    def factory(target_exam=None, student_id="stu-1", start=True):
        session = AttemptSession(
            target_exam if target_exam is not None else exam,
            student_id,
            store,
            clock=fixed_clock,
            id_factory=sequential_ids,
        )
        if start:
            session.start()
        return session

    return factory


def answer_correctly(session, *question_indexes):
    for index in question_indexes:
        question_id = f"exam-1-q{index}"
        session.select_answer(question_id, f"{question_id}-o0")


class TestStart:
    def test_start_when_new_then_in_progress_with_full_time(self, make_session):
        session = make_session(start=False)
        assert session.state is AttemptState.NOT_STARTED

        session.start()

        assert session.state is AttemptState.IN_PROGRESS
        assert session.time_remaining_seconds == 30 * 60
        assert session.current_index == 0
        assert session.get_answers() == {}

    def test_start_when_already_started_then_raises(self, make_session):
        session = make_session()
        with pytest.raises(AttemptStateError, match="Cannot start while the attempt is in_progress"):
            session.start()

    def test_select_answer_when_not_started_then_raises(self, make_session):
        session = make_session(start=False)
        with pytest.raises(AttemptStateError):
            session.select_answer("exam-1-q0", "exam-1-q0-o0")


class TestAnswers:
    def test_select_answer_when_repeated_then_last_write_wins(self, make_session):
        session = make_session()
        session.select_answer("exam-1-q0", "exam-1-q0-o1")
        session.select_answer("exam-1-q0", "exam-1-q0-o2")

        assert session.selected_option_for("exam-1-q0") == "exam-1-q0-o2"
        assert session.answered_count() == 1

    def test_select_answer_when_question_unknown_then_raises(self, make_session):
        session = make_session()
        with pytest.raises(ValueError, match="not part of this exam"):
            session.select_answer("other-q", "exam-1-q0-o0")

    def test_select_answer_when_option_from_other_question_then_raises(self, make_session):
        session = make_session()
        with pytest.raises(ValueError, match="does not belong"):
            session.select_answer("exam-1-q0", "exam-1-q1-o0")
        assert session.get_answers() == {}

    def test_get_answers_when_mutated_then_session_unchanged(self, make_session):
        session = make_session()
        answer_correctly(session, 0)
        session.get_answers().clear()
        assert session.is_answered("exam-1-q0")


class TestNavigation:
    def test_next_question_when_at_last_then_stays(self, make_session):
        session = make_session()
        for _ in range(10):
            session.next_question()
        assert session.current_index == 3

    def test_prev_question_when_at_first_then_stays(self, make_session):
        session = make_session()
        assert session.prev_question() == 0

    @pytest.mark.parametrize("target, expected", [(-3, 0), (2, 2), (99, 3)])
    def test_go_to_question_when_out_of_range_then_clamped(self, make_session, target, expected):
        session = make_session()
        assert session.go_to_question(target) == expected
        assert session.current_question().id == f"exam-1-q{expected}"

    def test_navigation_when_moving_then_answers_kept(self, make_session):
        session = make_session()
        answer_correctly(session, 0)
        session.next_question()
        session.prev_question()
        assert session.selected_option_for("exam-1-q0") == "exam-1-q0-o0"


class TestCountdown:
    def test_tick_when_time_left_then_decrements(self, make_session):
        session = make_session()
        assert session.tick() is None
        assert session.tick(9) is None
        assert session.time_remaining_seconds == 30 * 60 - 10
        assert session.state is AttemptState.IN_PROGRESS

    def test_tick_when_negative_then_raises(self, make_session):
        session = make_session()
        with pytest.raises(ValueError):
            session.tick(-1)

    def test_tick_when_time_runs_out_then_submits_without_confirmation(self, make_session, store):
        """Expiry finalizes even with unanswered questions."""
        session = make_session()
        answer_correctly(session, 0, 1)

        submission = session.tick(30 * 60)

        assert submission is not None
        assert submission.score == 50.0
        assert session.state is AttemptState.FINALIZED
        assert session.time_remaining_seconds == 0
        assert store.list_by_exam("exam-1") == [submission]

    def test_tick_when_overshooting_then_clamped_to_zero(self, make_session):
        session = make_session()
        session.tick(10_000)
        assert session.time_remaining_seconds == 0

    def test_tick_when_finalized_then_raises(self, make_session):
        session = make_session()
        session.tick(30 * 60)
        with pytest.raises(AttemptStateError):
            session.tick()

    def test_one_minute_exam_when_sixty_ticks_then_finalized(self, make_exam, make_session):
        session = make_session(make_exam(duration_minutes=1))
        results = [session.tick() for _ in range(60)]
        assert results[:-1] == [None] * 59
        assert results[-1] is not None


class TestFinish:
    def test_finish_when_all_answered_then_finalized_and_recorded(self, make_session, store):
        session = make_session()
        answer_correctly(session, 0, 1, 2)
        session.select_answer("exam-1-q3", "exam-1-q3-o1")

        submission = session.finish()

        assert submission.id == "sub-1"
        assert submission.score == 75.0
        assert submission.submitted_at == FIXED_NOW
        assert submission.student_id == "stu-1"
        assert [a.question_id for a in submission.answers] == [
            "exam-1-q0",
            "exam-1-q1",
            "exam-1-q2",
            "exam-1-q3",
        ]
        assert session.state is AttemptState.FINALIZED
        assert session.submission is submission
        assert store.find_by_id("sub-1") is submission

    def test_finish_when_unanswered_and_not_confirmed_then_stays_in_progress(self, make_session, store):
        session = make_session()
        answer_correctly(session, 0)

        with pytest.raises(ConfirmationRequiredError) as exc_info:
            session.finish()

        assert exc_info.value.unanswered_count == 3
        assert session.state is AttemptState.IN_PROGRESS
        assert store.count() == 0

    def test_finish_when_unanswered_and_confirmed_then_submitted(self, make_session):
        session = make_session()
        answer_correctly(session, 0)
        submission = session.finish(confirmed=True)
        assert submission.score == 25.0
        assert len(submission.answers) == 1

    def test_finish_when_answers_given_out_of_order_then_stored_in_exam_order(self, make_session):
        session = make_session()
        answer_correctly(session, 3, 0)
        submission = session.finish(confirmed=True)
        assert [a.question_id for a in submission.answers] == ["exam-1-q0", "exam-1-q3"]

    def test_finish_when_already_finalized_then_raises_and_single_record(self, make_session, store):
        session = make_session()
        answer_correctly(session, 0, 1, 2, 3)
        session.finish()
        with pytest.raises(AttemptStateError):
            session.finish(confirmed=True)
        assert store.count() == 1

    def test_select_answer_when_finalized_then_raises(self, make_session):
        session = make_session()
        session.finish(confirmed=True)
        with pytest.raises(AttemptStateError):
            session.select_answer("exam-1-q0", "exam-1-q0-o0")


class UnavailableSubmissionStore(SubmissionStore):
    """Rejects the first ``failures`` appends, as a durable log might on I/O errors."""

    def __init__(self, failures=1):
        super().__init__()
        self.failures = failures

    def append(self, submission):
        if self.failures > 0:
            self.failures -= 1
            raise OSError("submission log unavailable")
        super().append(submission)


class TestFailedRecording:
    @pytest.fixture
    def store(self):
        return UnavailableSubmissionStore()

    def test_finish_when_log_rejects_then_back_in_progress_and_retry_succeeds(self, make_session, store):
        session = make_session()
        answer_correctly(session, 0, 1)

        with pytest.raises(OSError):
            session.finish(confirmed=True)

        assert session.state is AttemptState.IN_PROGRESS
        assert session.submission is None
        assert store.count() == 0
        session.select_answer("exam-1-q2", "exam-1-q2-o0")

        submission = session.finish(confirmed=True)

        assert submission.score == 75.0
        assert session.state is AttemptState.FINALIZED
        assert store.list_by_exam("exam-1") == [submission]

    def test_tick_when_log_rejects_then_next_tick_submits(self, make_session, store):
        session = make_session()

        with pytest.raises(OSError):
            session.tick(30 * 60)

        assert session.state is AttemptState.IN_PROGRESS
        assert session.time_remaining_seconds == 0
        submission = session.tick()
        assert submission is not None
        assert session.state is AttemptState.FINALIZED

    def test_abandon_when_log_rejected_finish_then_allowed(self, make_session, store):
        session = make_session()
        with pytest.raises(OSError):
            session.finish(confirmed=True)

        session.abandon()

        assert session.state is AttemptState.ABANDONED
        assert store.count() == 0


class TestAbandon:
    def test_abandon_when_in_progress_then_nothing_recorded(self, make_session, store):
        session = make_session()
        answer_correctly(session, 0)
        session.abandon()
        assert session.state is AttemptState.ABANDONED
        assert session.is_closed()
        assert store.count() == 0

    def test_abandon_when_finalized_then_raises(self, make_session):
        session = make_session()
        session.finish(confirmed=True)
        with pytest.raises(AttemptStateError):
            session.abandon()

    def test_finish_when_abandoned_then_raises(self, make_session):
        session = make_session()
        session.abandon()
        with pytest.raises(AttemptStateError):
            session.finish(confirmed=True)


class TestIsolation:
    def test_session_when_catalog_exam_edited_then_uses_original_copy(self, exam, make_session):
        """Edits to the authored exam after start do not reach the attempt."""
        session = make_session()
        exam.questions[0].options[0].is_correct = False
        exam.questions[0].options[1].is_correct = True
        exam.questions.pop()

        answer_correctly(session, 0, 1, 2, 3)
        submission = session.finish()

        assert session.question_count() == 4
        assert submission.score == 100.0

    def test_snapshot_when_taken_then_detached_from_later_answers(self, make_session):
        session = make_session()
        snapshot = session.snapshot()
        answer_correctly(session, 0)

        assert snapshot.answers == {}
        assert snapshot.state is AttemptState.IN_PROGRESS
        assert snapshot.unanswered_count == 4
        assert snapshot.current_question.id == "exam-1-q0"
