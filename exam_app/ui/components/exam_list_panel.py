"""Panel listing the professor's exams."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.ui_constants import (
    LIST_BUTTON_DELETE,
    LIST_BUTTON_DETAILS,
    LIST_BUTTON_EDIT,
    LIST_BUTTON_EXPORT,
    LIST_BUTTON_IMPORT,
    LIST_BUTTON_NEW,
    LIST_EMPTY_STATE,
    NO_EXAM_SELECTED_MESSAGE,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.ui.dialog_helpers import confirm_delete_exam, show_info
from exam_app.styling.styles import Styles

_COLUMNS = ("Title", "Questions", "Duration", "Submissions")


class ExamListPanel(QWidget):
    """Table of the professor's exams with the catalog actions above it."""

    def __init__(
        self,
        exam_manager: ExamManager,
        professor_id: str,
        *,
        on_new: Callable[[], None],
        on_edit: Callable[[str], None],
        on_details: Callable[[str], None],
        on_import: Callable[[], None],
        on_export: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.exam_manager = exam_manager
        self.professor_id = professor_id
        self._on_new = on_new
        self._on_edit = on_edit
        self._on_details = on_details
        self._on_import = on_import
        self._on_export = on_export
        self._row_ids: list[str] = []
        self._last_rows: list[tuple[str, ...]] = []

        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        action_row = QHBoxLayout()
        self.new_button = QPushButton(LIST_BUTTON_NEW, self)
        self.new_button.setStyleSheet(Styles.get_primary_button_style())
        self.new_button.clicked.connect(self._on_new)
        action_row.addWidget(self.new_button)

        self.edit_button = QPushButton(LIST_BUTTON_EDIT, self)
        self.edit_button.clicked.connect(lambda: self._with_selection(self._on_edit))
        action_row.addWidget(self.edit_button)

        self.details_button = QPushButton(LIST_BUTTON_DETAILS, self)
        self.details_button.clicked.connect(lambda: self._with_selection(self._on_details))
        action_row.addWidget(self.details_button)

        self.delete_button = QPushButton(LIST_BUTTON_DELETE, self)
        self.delete_button.clicked.connect(self._handle_delete)
        action_row.addWidget(self.delete_button)

        action_row.addStretch(1)

        self.import_button = QPushButton(LIST_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._on_import)
        action_row.addWidget(self.import_button)

        self.export_button = QPushButton(LIST_BUTTON_EXPORT, self)
        self.export_button.clicked.connect(lambda: self._with_selection(self._on_export))
        action_row.addWidget(self.export_button)

        layout.addLayout(action_row)

        self.table = QTableWidget(0, len(_COLUMNS), self)
        self.table.setHorizontalHeaderLabels(_COLUMNS)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.Stretch)
        for column in range(1, len(_COLUMNS)):
            header.setSectionResizeMode(column, QHeaderView.ResizeToContents)
        self.table.itemSelectionChanged.connect(self._update_buttons)
        self.table.cellDoubleClicked.connect(lambda row, _column: self._on_edit(self._row_ids[row]))
        layout.addWidget(self.table)

        self.status_label = QLabel(LIST_EMPTY_STATE, self)
        self.status_label.setStyleSheet(Styles.get_muted_style())
        layout.addWidget(self.status_label)

        self._update_buttons()

    def refresh(self) -> None:
        """Reload the table from the catalog, keeping the current selection."""
        exams = self.exam_manager.list_exams_by_author(self.professor_id)
        rows = [
            (
                exam.id,
                exam.title,
                str(exam.question_count),
                f"{exam.duration_minutes} min",
                str(len(self.exam_manager.list_submissions_for_exam(exam.id))),
            )
            for exam in exams
        ]
        if rows == self._last_rows:
            return

        selected_id = self.selected_exam_id()
        self._last_rows = rows
        self._row_ids = [row[0] for row in rows]

        self.table.setRowCount(len(rows))
        for row_index, row in enumerate(rows):
            for column, value in enumerate(row[1:]):
                self.table.setItem(row_index, column, QTableWidgetItem(value))

        if selected_id in self._row_ids:
            self.table.selectRow(self._row_ids.index(selected_id))

        self.status_label.setText(
            LIST_EMPTY_STATE if not rows else f"{len(rows)} exam(s). Students can take every exam listed."
        )
        self._update_buttons()

    def selected_exam_id(self) -> str | None:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._row_ids[row] if row < len(self._row_ids) else None

    def _with_selection(self, action: Callable[[str], None]) -> None:
        exam_id = self.selected_exam_id()
        if exam_id is None:
            show_info(self, "No exam selected", NO_EXAM_SELECTED_MESSAGE)
            return
        action(exam_id)

    def _handle_delete(self) -> None:
        exam_id = self.selected_exam_id()
        if exam_id is None:
            show_info(self, "No exam selected", NO_EXAM_SELECTED_MESSAGE)
            return
        exam = self.exam_manager.get_exam(exam_id)
        if exam is None:
            self.refresh()
            return
        submission_count = len(self.exam_manager.list_submissions_for_exam(exam_id))
        if not confirm_delete_exam(self, exam.title, submission_count):
            return
        self.exam_manager.delete_exam(exam_id)
        self.refresh()

    def _update_buttons(self) -> None:
        has_selection = self.selected_exam_id() is not None
        for button in (self.edit_button, self.details_button, self.delete_button, self.export_button):
            button.setEnabled(has_selection)
