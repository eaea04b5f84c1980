"""Grading engine: compares a student's answers with an exam's answer key."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Optional, Union

from exam_app.constants.exam_constants import PASSING_SCORE
from exam_app.core.models import Answer, Exam, GradeReport, Question, QuestionResult

AnswerInput = Union[Mapping[str, Optional[str]], Iterable[Answer]]


def grade(exam: Exam, answers: AnswerInput) -> float:
    """Return the percentage of questions answered correctly, in ``[0, 100]``."""
    return grade_report(exam, answers).score


def grade_report(exam: Exam, answers: AnswerInput) -> GradeReport:
    """Grade every question of ``exam`` and return the breakdown.

    A question counts as correct when the recorded option is one of the options
    flagged ``is_correct``. Unanswered questions, unknown option ids and questions
    without any flagged option count as incorrect. An exam without questions
    scores ``0.0``.
    """
    selected = _as_answer_map(answers)
    results: list[QuestionResult] = []
    for question in exam.questions:
        correct_ids = correct_option_ids(question)
        choice = selected.get(question.id)
        results.append(
            QuestionResult(
                question_id=question.id,
                selected_option_id=choice,
                correct_option_ids=correct_ids,
                is_correct=choice is not None and choice in correct_ids,
            )
        )

    total = len(results)
    correct_count = sum(1 for result in results if result.is_correct)
    score = (correct_count / total) * 100 if total else 0.0
    return GradeReport(
        correct_count=correct_count,
        total_questions=total,
        score=score,
        question_results=tuple(results),
    )


def correct_option_ids(question: Question) -> tuple[str, ...]:
    return tuple(option.id for option in question.options if option.is_correct)


def is_passing(score: float, threshold: float = PASSING_SCORE) -> bool:
    """Display-only pass/fail classification; never stored with a submission."""
    return score >= threshold


def _as_answer_map(answers: AnswerInput) -> dict[str, str | None]:
    if isinstance(answers, Mapping):
        return dict(answers)
    # Later entries win, matching the attempt session's last-write-wins rule.
    return {answer.question_id: answer.selected_option_id for answer in answers}
