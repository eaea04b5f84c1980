"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    PROFESSOR = "professor"
    STUDENT = "student"


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated user as handed over by the identity provider."""

    user_id: str
    role: UserRole


@dataclass(slots=True)
class Option:
    """One selectable answer of a question."""

    id: str
    question_id: str
    text: str
    is_correct: bool = False


@dataclass(slots=True)
class Question:
    """Multiple-choice question with two or more options."""

    id: str
    exam_id: str
    text: str
    options: list[Option] = field(default_factory=list)

    def find_option(self, option_id: str) -> Option | None:
        return next((option for option in self.options if option.id == option_id), None)


@dataclass(slots=True)
class Exam:
    """Authored exam: ordered questions plus a time limit in minutes."""

    id: str
    title: str
    created_by: str
    duration_minutes: int
    questions: list[Question] = field(default_factory=list)
    description: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def find_question(self, question_id: str) -> Question | None:
        return next((question for question in self.questions if question.id == question_id), None)

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class Answer:
    """Selected option recorded for one question of a submission."""

    question_id: str
    selected_option_id: str | None


@dataclass(frozen=True, slots=True)
class Submission:
    """Finalized, scored record of a completed attempt. Never mutated once stored."""

    id: str
    exam_id: str
    student_id: str
    submitted_at: datetime
    answers: tuple[Answer, ...]
    score: float

    def answer_map(self) -> dict[str, str | None]:
        return {answer.question_id: answer.selected_option_id for answer in self.answers}


class AttemptState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    FINALIZED = "finalized"
    ABANDONED = "abandoned"


@dataclass(frozen=True, slots=True)
class QuestionResult:
    """Outcome of grading a single question."""

    question_id: str
    selected_option_id: str | None
    correct_option_ids: tuple[str, ...]
    is_correct: bool


@dataclass(frozen=True, slots=True)
class GradeReport:
    """Per-question breakdown behind a score."""

    correct_count: int
    total_questions: int
    score: float
    question_results: tuple[QuestionResult, ...] = ()


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Read-only copy of an attempt's state, safe to hand across threads."""

    exam: Exam
    student_id: str
    state: AttemptState
    current_index: int
    time_remaining_seconds: int
    answers: dict[str, str]
    submission: Submission | None = None

    @property
    def question_count(self) -> int:
        return len(self.exam.questions)

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def unanswered_count(self) -> int:
        return self.question_count - self.answered_count

    @property
    def current_question(self) -> Question | None:
        if not self.exam.questions:
            return None
        return self.exam.questions[self.current_index]


@dataclass(frozen=True, slots=True)
class SubmissionReport:
    """A submission with the exam it belongs to and its per-question breakdown.

    ``exam`` and ``grade`` are ``None`` once the exam has been deleted.
    """

    submission: Submission
    exam: Exam | None
    grade: GradeReport | None
    passed: bool
