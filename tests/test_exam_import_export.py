"""
Tests for the plain-text exam format (import and export).
"""

from itertools import count

import pytest

from exam_app.constants.about import HELP_TEXT
from exam_app.core.exam_exporter import save_exam_to_file, serialize_exam
from exam_app.core.exam_importer import (
    ExamImportError,
    load_exam_from_file,
    parse_exam_text,
)
from exam_app.core.services.exam_validation import validate_exam

SAMPLE = """TITLE: Trigonometry quiz
DURATION: 20
DESCRIPTION: Radians and degrees

---

Q: What is $30^o$ in radians?
Give the exact value.
A: $\\frac{\\pi}{2}$
B: $\\frac{\\pi}{6}$
C: $\\frac{\\pi}{3}$
CORRECT: B

---

Q: Which are multiples of $\\pi$?
A: $2\\pi$
B: $\\pi / 2$
C: $-\\pi$
CORRECT: A, C
"""


@pytest.fixture
def ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


class TestParseExamText:
    def test_parse_when_valid_then_builds_exam(self, ids):
        exam = parse_exam_text(SAMPLE, "prof-1", id_factory=ids)

        assert exam.id == "id-1"
        assert exam.title == "Trigonometry quiz"
        assert exam.duration_minutes == 20
        assert exam.description == "Radians and degrees"
        assert exam.created_by == "prof-1"
        assert exam.question_count == 2

        first = exam.questions[0]
        assert first.text == "What is $30^o$ in radians?\nGive the exact value."
        assert first.exam_id == exam.id
        assert [o.is_correct for o in first.options] == [False, True, False]
        assert all(o.question_id == first.id for o in first.options)

    def test_parse_when_several_correct_letters_then_all_flagged(self, ids):
        exam = parse_exam_text(SAMPLE, "prof-1", id_factory=ids)
        assert [o.is_correct for o in exam.questions[1].options] == [True, False, True]

    def test_parse_when_valid_then_passes_catalog_validation(self):
        validate_exam(parse_exam_text(SAMPLE, "prof-1"))

    def test_parse_when_help_example_then_accepted(self):
        """The example shown in the console's help dialog is a valid file."""
        exam = parse_exam_text(HELP_TEXT.split("\n\n", 1)[1], "prof-1")
        assert exam.title == "Trigonometry quiz"
        assert exam.question_count == 2

    def test_parse_when_ids_generated_then_unique(self):
        exam = parse_exam_text(SAMPLE, "prof-1")
        all_ids = [exam.id] + [q.id for q in exam.questions] + [
            o.id for q in exam.questions for o in q.options
        ]
        assert len(all_ids) == len(set(all_ids))

    def test_parse_when_question_has_blank_lines_then_kept_as_paragraphs(self):
        text = (
            "TITLE: t\nDURATION: 5\n\n"
            "Q: Consider the function below.\n\n$f(x) = x^2$\n"
            "A: even\n\nsymmetric about the y axis\n"
            "B: odd\n"
            "CORRECT: A\n\n"
            "Q: Second?\nA: yes\nB: no\nCORRECT: B\n"
        )

        exam = parse_exam_text(text, "prof-1")

        assert exam.question_count == 2
        assert exam.questions[0].text == "Consider the function below.\n\n$f(x) = x^2$"
        assert exam.questions[0].options[0].text == "even\n\nsymmetric about the y axis"
        assert exam.questions[1].text == "Second?"

    def test_parse_when_lowercase_or_indented_marker_then_continuation_text(self):
        text = (
            "TITLE: t\nDURATION: 5\n\n"
            "Q: Solve for x.\na: 2 is a parameter\n    B: not an option\n"
            "A: x = 1\nB: x = 2\nCORRECT: A\n"
        )

        question = parse_exam_text(text, "prof-1").questions[0]

        assert question.text == "Solve for x.\na: 2 is a parameter\nB: not an option"
        assert [o.text for o in question.options] == ["x = 1", "x = 2"]

    @pytest.mark.parametrize(
        "text, message",
        [
            ("", "Exam file is empty"),
            ("TITLE: Only header\nDURATION: 5\n", "did not contain any questions"),
            ("DURATION: 5\n\nQ: x\nA: a\nB: b\nCORRECT: A", "TITLE is required"),
            ("TITLE: t\n\nQ: x\nA: a\nB: b\nCORRECT: A", "DURATION is required"),
            ("TITLE: t\nDURATION: soon\n\nQ: x\nA: a\nB: b\nCORRECT: A", "integer number of minutes"),
            ("TITLE: t\nDURATION: 0\n\nQ: x\nA: a\nB: b\nCORRECT: A", "positive integer"),
            ("Q: x\nA: a\nB: b\nCORRECT: A", "first block must be the exam header"),
            ("TITLE: t\nDURATION: 5\n\nQ: x\nA: a\nC: c\nCORRECT: A", "lettered in order"),
            ("TITLE: t\nDURATION: 5\n\nQ: x\nA: a\nCORRECT: A", "at least 2 options"),
            ("TITLE: t\nDURATION: 5\n\nQ: x\nA: a\nB: b", "CORRECT must name at least one option"),
            ("TITLE: t\nDURATION: 5\n\nQ: x\nA: a\nB: b\nCORRECT: D", "unknown option 'D'"),
            ("TITLE: t\nDURATION: 5\n\nQ: x\nA: a\nB: b\nCORRECT: A\nTITLE: again", "header must come before"),
            ("TITLE: t\nDURATION: 5\n\nstray text\nQ: x\nA: a\nB: b\nCORRECT: A", "outside of a known section"),
        ],
    )
    def test_parse_when_malformed_then_raises(self, text, message):
        with pytest.raises(ExamImportError, match=message):
            parse_exam_text(text, "prof-1")


class TestExport:
    def test_serialize_when_exam_then_uses_import_format(self, exam):
        exam.questions[0].options[2].is_correct = True
        document = serialize_exam(exam)

        assert document.startswith("TITLE: Algebra basics\nDURATION: 30\n\n---\n\nQ: Question 1?\n")
        assert "CORRECT: A, C" in document
        assert document.count("\n---\n") == 4

    def test_export_then_import_when_round_tripped_then_content_preserved(self, exam, tmp_path):
        exam.description = "Chapter 1\nand 2"
        path = tmp_path / "nested" / "algebra.txt"

        save_exam_to_file(path, exam)
        imported = load_exam_from_file(path, "prof-2")

        assert imported.source_path == path
        restored = imported.exam
        assert restored.title == exam.title
        assert restored.duration_minutes == exam.duration_minutes
        assert restored.description == "Chapter 1 and 2"
        assert restored.created_by == "prof-2"
        assert [q.text for q in restored.questions] == [q.text for q in exam.questions]
        assert [[(o.text, o.is_correct) for o in q.options] for q in restored.questions] == [
            [(o.text, o.is_correct) for o in q.options] for q in exam.questions
        ]

    def test_export_then_import_when_text_spans_paragraphs_then_preserved(self, exam):
        exam.questions[0].text = "Consider the function below.\n\n$f(x) = x^2$"
        exam.questions[1].text = "Read this:\n\n---\n\nTITLE: not a header\nB: not an option\n\n    indented code"
        exam.questions[1].options[0].text = "para one\n\npara two"
        exam.questions[2].options[1].text = "Q: looks like a question\nCORRECT: D"

        restored = parse_exam_text(serialize_exam(exam), "prof-1")

        assert [q.text for q in restored.questions] == [q.text for q in exam.questions]
        assert [[(o.text, o.is_correct) for o in q.options] for q in restored.questions] == [
            [(o.text, o.is_correct) for o in q.options] for q in exam.questions
        ]

    def test_save_when_exam_has_no_questions_then_rejected(self, make_exam, tmp_path):
        with pytest.raises(ValueError, match="without questions"):
            save_exam_to_file(tmp_path / "empty.txt", make_exam(question_count=0))

    def test_save_when_too_many_options_then_rejected(self, make_exam, tmp_path):
        with pytest.raises(ValueError, match="at most 6 options"):
            save_exam_to_file(tmp_path / "wide.txt", make_exam(option_count=7))
