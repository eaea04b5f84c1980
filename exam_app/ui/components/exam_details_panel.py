"""Read-only view of one exam: its answer key and the submissions it received."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QSplitter,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.exam_constants import PASSING_SCORE
from exam_app.constants.ui_constants import (
    DETAILS_BACK,
    DETAILS_NO_SUBMISSIONS,
    DETAILS_TABLE_HEADERS,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import Submission
from exam_app.core.services.grading import is_passing
from exam_app.ui.question_renderer import render_exam
from exam_app.styling.styles import Styles


def format_score(score: float) -> str:
    return f"{score:.1f}%"


class ExamDetailsPanel(QWidget):
    def __init__(
        self,
        exam_manager: ExamManager,
        *,
        on_close: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.exam_manager = exam_manager
        self._on_close = on_close
        self._exam_id: str | None = None
        self._shown_submission_ids: list[str] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_heading_style())
        header_row.addWidget(self.title_label)
        header_row.addStretch(1)
        self.back_button = QPushButton(DETAILS_BACK, self)
        self.back_button.clicked.connect(self._on_close)
        header_row.addWidget(self.back_button)
        layout.addLayout(header_row)

        self.summary_label = QLabel("", self)
        self.summary_label.setStyleSheet(Styles.get_muted_style())
        layout.addWidget(self.summary_label)

        splitter = QSplitter(Qt.Vertical, self)
        self.questions_view = QWebEngineView(splitter)
        splitter.addWidget(self.questions_view)

        self.submissions_table = QTableWidget(0, len(DETAILS_TABLE_HEADERS), splitter)
        self.submissions_table.setHorizontalHeaderLabels(DETAILS_TABLE_HEADERS)
        self.submissions_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.submissions_table.setSelectionMode(QAbstractItemView.NoSelection)
        self.submissions_table.verticalHeader().setVisible(False)
        self.submissions_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        splitter.addWidget(self.submissions_table)
        layout.addWidget(splitter, stretch=1)

    def show_exam(self, exam_id: str) -> None:
        exam = self.exam_manager.get_exam(exam_id)
        if exam is None:
            self._on_close()
            return
        self._exam_id = exam_id
        self._shown_submission_ids = []
        self.title_label.setText(exam.title)
        self.questions_view.setHtml(render_exam(exam.questions))
        self.refresh()

    def refresh(self) -> None:
        """Pick up submissions recorded since the last refresh."""
        if self._exam_id is None:
            return
        exam = self.exam_manager.get_exam(self._exam_id)
        if exam is None:
            self._exam_id = None
            self._on_close()
            return

        submissions = self.exam_manager.list_submissions_for_exam(self._exam_id)
        self._update_summary(exam.question_count, exam.duration_minutes, submissions)

        submission_ids = [submission.id for submission in submissions]
        if submission_ids == self._shown_submission_ids:
            return
        self._shown_submission_ids = submission_ids
        self._fill_table(submissions)

    def _update_summary(self, question_count: int, duration: int, submissions: list[Submission]) -> None:
        parts = [f"{question_count} question(s)", f"{duration} min", f"pass mark {format_score(PASSING_SCORE)}"]
        if submissions:
            average = sum(submission.score for submission in submissions) / len(submissions)
            passed = sum(1 for submission in submissions if is_passing(submission.score))
            parts.append(f"{len(submissions)} submission(s), average {format_score(average)}, {passed} passed")
        else:
            parts.append(DETAILS_NO_SUBMISSIONS)
        self.summary_label.setText(" · ".join(parts))

    def _fill_table(self, submissions: list[Submission]) -> None:
        self.submissions_table.setRowCount(len(submissions))
        for row, submission in enumerate(submissions):
            passed = is_passing(submission.score)
            result_item = QTableWidgetItem("Pass" if passed else "Fail")
            result_item.setForeground(QColor(Styles.get_outcome_color(passed)))
            cells = (
                QTableWidgetItem(submission.student_id),
                QTableWidgetItem(format_score(submission.score)),
                result_item,
                QTableWidgetItem(submission.submitted_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")),
            )
            for column, item in enumerate(cells):
                self.submissions_table.setItem(row, column, item)
