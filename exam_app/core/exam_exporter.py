"""Utilities for exporting exams to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path

from exam_app.constants.exam_constants import (
    EXPORT_CONTINUATION_INDENT,
    MAX_OPTIONS_PER_QUESTION,
)
from exam_app.core.models import Exam, Question

_OPTION_LETTERS = "ABCDEF"[:MAX_OPTIONS_PER_QUESTION]


def save_exam_to_file(file_path: Path, exam: Exam) -> None:
    """Persist the exam to disk in the text import format."""

    if not exam.questions:
        raise ValueError("Cannot export an exam without questions.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = serialize_exam(exam)
    file_path.write_text(document, encoding="utf-8")


def serialize_exam(exam: Exam) -> str:
    blocks = [_serialize_header(exam)]
    blocks.extend(_serialize_question(question) for question in exam.questions)
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_header(exam: Exam) -> str:
    lines = [f"TITLE: {exam.title.strip()}", f"DURATION: {exam.duration_minutes}"]
    if exam.description and exam.description.strip():
        # The format keeps descriptions on a single line.
        lines.append(f"DESCRIPTION: {' '.join(exam.description.split())}")
    return "\n".join(lines)


def _marked_lines(marker: str, text: str) -> list[str]:
    """First line after the marker, the rest indented so the importer reads them as text."""
    first, *rest = text.split("\n")
    lines = [f"{marker}: {first.strip()}"]
    lines.extend(f"{EXPORT_CONTINUATION_INDENT}{line}" if line.strip() else "" for line in rest)
    return lines


def _serialize_question(question: Question) -> str:
    if len(question.options) > len(_OPTION_LETTERS):
        raise ValueError(
            f"Questions can be exported with at most {len(_OPTION_LETTERS)} options."
        )

    lines = _marked_lines("Q", question.text)

    correct_letters: list[str] = []
    for letter, option in zip(_OPTION_LETTERS, question.options):
        lines.extend(_marked_lines(letter, option.text))
        if option.is_correct:
            correct_letters.append(letter)

    if correct_letters:
        lines.append(f"CORRECT: {', '.join(correct_letters)}")

    return "\n".join(lines)
