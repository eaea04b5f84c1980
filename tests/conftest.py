"""Shared fixtures for the exam core and API tests."""

from datetime import datetime, timezone
from itertools import count

import pytest

from exam_app.core.models import Exam, Option, Question

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def build_exam(
    exam_id: str = "exam-1",
    *,
    question_count: int = 4,
    option_count: int = 4,
    duration_minutes: int = 30,
    created_by: str = "prof-1",
    title: str = "Algebra basics",
) -> Exam:
    """Exam whose questions are ``<exam>-q<n>`` with option ``-o0`` correct."""
    questions = []
    for q_index in range(question_count):
        question_id = f"{exam_id}-q{q_index}"
        options = [
            Option(
                id=f"{question_id}-o{o_index}",
                question_id=question_id,
                text=f"Option {o_index}",
                is_correct=o_index == 0,
            )
            for o_index in range(option_count)
        ]
        questions.append(
            Question(id=question_id, exam_id=exam_id, text=f"Question {q_index + 1}?", options=options)
        )
    return Exam(
        id=exam_id,
        title=title,
        created_by=created_by,
        duration_minutes=duration_minutes,
        questions=questions,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


@pytest.fixture
def make_exam():
    """Return the exam builder so tests can vary the shape."""
    return build_exam


@pytest.fixture
def exam() -> Exam:
    return build_exam()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sequential_ids():
    """Deterministic id factory producing sub-1, sub-2, ..."""
    counter = count(1)
    return lambda: f"sub-{next(counter)}"
