"""Utilities for importing exams from a human-friendly text file.

File format:

    TITLE: Exam title
    DURATION: minutes
    DESCRIPTION: optional one-line description

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Optional further options, up to F
    CORRECT: B        (one letter, or several separated by commas)

The header block must come first and ends at the first blank line. Each
question starts at a ``Q:`` line (or after a ``---`` line) and may contain
blank lines, so markdown paragraphs survive. Every question needs at least two
options, lettered in order from A.

Markers are only recognized at the start of a line, and option markers must
be an uppercase letter, a colon and a space (``B: ...``). Indented lines are
always continuation text; one level of indentation is removed from them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from exam_app.constants.exam_constants import (
    EXPORT_CONTINUATION_INDENT,
    MAX_OPTIONS_PER_QUESTION,
    MIN_OPTIONS_PER_QUESTION,
)
from exam_app.core.models import Exam, Option, Question, utc_now


class ExamImportError(Exception):
    """Raised when an exam definition cannot be parsed."""


@dataclass(slots=True)
class ImportedExam:
    """Container for the imported exam and where it came from."""

    source_path: Path
    exam: Exam


_OPTION_LETTERS = "ABCDEF"[:MAX_OPTIONS_PER_QUESTION]
_HEADER_KEYS = ("TITLE:", "DURATION:", "DESCRIPTION:")


def _new_id() -> str:
    return uuid4().hex


def load_exam_from_file(
    file_path: Path,
    created_by: str,
    id_factory: Callable[[], str] = _new_id,
) -> ImportedExam:
    text = file_path.read_text(encoding="utf-8")
    exam = parse_exam_text(text, created_by, id_factory=id_factory)
    return ImportedExam(source_path=file_path, exam=exam)


def parse_exam_text(
    text: str,
    created_by: str,
    id_factory: Callable[[], str] = _new_id,
) -> Exam:
    blocks = _split_blocks(text)
    if not blocks:
        raise ExamImportError("Exam file is empty.")

    header = _parse_header(blocks[0])
    exam_id = id_factory()
    questions = [_parse_block(block, exam_id, id_factory) for block in blocks[1:]]
    if not questions:
        raise ExamImportError("Exam file did not contain any questions.")

    now = utc_now()
    return Exam(
        id=exam_id,
        title=header["title"],
        created_by=created_by,
        duration_minutes=header["duration"],
        questions=questions,
        description=header.get("description"),
        created_at=now,
        updated_at=now,
    )


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []

    def flush() -> None:
        if current_block:
            blocks.append("\n".join(current_block).strip("\n"))
            current_block.clear()

    for raw_line in text.splitlines():
        line = raw_line.rstrip()
        if line == "---":
            flush()
            continue
        if _is_question_marker(line):
            flush()
            current_block.append(line)
            continue
        if not line.strip():
            # Blank lines belong to an open question; elsewhere they end the block.
            if current_block and _is_question_marker(current_block[0]):
                current_block.append("")
            else:
                flush()
            continue
        current_block.append(line)
    flush()
    return [block for block in blocks if block.strip()]


def _is_question_marker(line: str) -> bool:
    return line[:2].upper() == "Q:"


def _is_option_marker(line: str) -> bool:
    return (
        len(line) >= 2
        and line[0] in _OPTION_LETTERS
        and line[1] == ":"
        and (len(line) == 2 or line[2].isspace())
    )


def _continuation_text(raw_line: str) -> str:
    if raw_line.startswith(EXPORT_CONTINUATION_INDENT):
        return raw_line[len(EXPORT_CONTINUATION_INDENT):]
    return raw_line.strip()


def _parse_header(block: str) -> dict:
    header: dict = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if not upper.startswith(_HEADER_KEYS):
            raise ExamImportError(
                "The first block must be the exam header (TITLE, DURATION, DESCRIPTION)."
            )
        value = line.split(":", 1)[1].strip()
        if upper.startswith("TITLE:"):
            header["title"] = value
        elif upper.startswith("DURATION:"):
            header["duration"] = _parse_duration(value)
        else:
            header["description"] = value or None

    if not header.get("title"):
        raise ExamImportError("TITLE is required.")
    if "duration" not in header:
        raise ExamImportError("DURATION is required.")
    return header


def _parse_duration(raw_value: str) -> int:
    if not raw_value:
        raise ExamImportError("DURATION must include an integer value.")
    try:
        minutes = int(raw_value)
    except ValueError as exc:
        raise ExamImportError("DURATION must be an integer number of minutes.") from exc
    if minutes <= 0:
        raise ExamImportError("DURATION must be a positive integer.")
    return minutes


def _parse_block(block: str, exam_id: str, id_factory: Callable[[], str]) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letters: list[str] = []
    current_section: str | None = None

    for raw_line in block.splitlines():
        if not raw_line.strip() or raw_line[0].isspace():
            text_line = _continuation_text(raw_line)
            if current_section == "Q":
                question_lines.append(text_line)
            elif current_section is not None and current_section in _OPTION_LETTERS:
                options[current_section] = options[current_section] + f"\n{text_line}"
            elif text_line:
                raise ExamImportError(f"Encountered text outside of a known section: '{text_line}'.")
            continue

        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith(_HEADER_KEYS):
            raise ExamImportError("Exam header must come before the first question.")

        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            raw_letters = line.split(":", 1)[1]
            correct_letters = [part.strip().upper() for part in raw_letters.split(",") if part.strip()]
            current_section = None
            continue

        if _is_option_marker(line):
            letter = line[0]
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section is not None and current_section in _OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise ExamImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise ExamImportError("Question text missing (Q: ...)")

    expected_letters = _OPTION_LETTERS[: len(options)]
    if sorted(options) != list(expected_letters):
        raise ExamImportError("Options must be lettered in order starting from A.")
    if len(options) < MIN_OPTIONS_PER_QUESTION:
        raise ExamImportError(
            f"Each question must define at least {MIN_OPTIONS_PER_QUESTION} options."
        )

    if not correct_letters:
        raise ExamImportError("CORRECT must name at least one option.")
    for letter in correct_letters:
        if letter not in options:
            raise ExamImportError(f"CORRECT refers to an unknown option '{letter}'.")

    question_id = id_factory()
    option_list: list[Option] = []
    for letter in expected_letters:
        option_text = options[letter].strip()
        if not option_text:
            raise ExamImportError("Option text cannot be empty.")
        option_list.append(
            Option(
                id=id_factory(),
                question_id=question_id,
                text=option_text,
                is_correct=letter in correct_letters,
            )
        )

    return Question(id=question_id, exam_id=exam_id, text=question_text, options=option_list)
