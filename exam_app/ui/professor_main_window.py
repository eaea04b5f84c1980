"""Qt main window for the professor: exam list, editor and results."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from exam_app.constants.identity_constants import CONSOLE_PROFESSOR_ID
from exam_app.constants.ui_constants import (
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    REFRESH_INTERVAL_MS,
    STUDENT_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from exam_app.core.exam_exporter import save_exam_to_file
from exam_app.core.exam_importer import ExamImportError, load_exam_from_file
from exam_app.core.exam_manager import ExamManager
from exam_app.ui.components.exam_details_panel import ExamDetailsPanel
from exam_app.ui.components.exam_editor_panel import ExamEditorPanel
from exam_app.ui.components.exam_list_panel import ExamListPanel
from exam_app.ui.dialog_helpers import show_error, show_info
from exam_app.styling.styles import Styles

logger = logging.getLogger(__name__)


class ConsoleMode(Enum):
    EXAM_LIST = auto()
    EXAM_EDITOR = auto()
    EXAM_DETAILS = auto()


class ProfessorMainWindow(QMainWindow):
    """Main Qt window switching between the list, editor and details panels."""

    def __init__(
        self,
        exam_manager: ExamManager,
        student_url: str | None = None,
        professor_id: str = CONSOLE_PROFESSOR_ID,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.exam_manager = exam_manager
        self.professor_id = professor_id
        self.student_url = student_url or STUDENT_URL_PLACEHOLDER
        self._mode = ConsoleMode.EXAM_LIST
        self._last_export_path: Path | None = None

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        top_row = QHBoxLayout()
        self.url_label = QLabel(f"Students open: {self.student_url}", self)
        self.url_label.setStyleSheet(Styles.get_muted_style())
        top_row.addWidget(self.url_label)
        top_row.addStretch(1)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        top_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(lambda: show_info(self, f"{APP_NAME} Help", HELP_TEXT))
        top_row.addWidget(self.help_button)
        root_layout.addLayout(top_row)

        self.mode_stack = QStackedWidget(self)
        self.list_panel = ExamListPanel(
            self.exam_manager,
            self.professor_id,
            on_new=self._handle_new_exam,
            on_edit=self._handle_edit_exam,
            on_details=self._handle_show_details,
            on_import=self._handle_import_exam,
            on_export=self._handle_export_exam,
            parent=self,
        )
        self.editor_panel = ExamEditorPanel(
            self.exam_manager,
            self.professor_id,
            on_close=self._show_list,
            parent=self,
        )
        self.details_panel = ExamDetailsPanel(
            self.exam_manager,
            on_close=self._show_list,
            parent=self,
        )
        self.mode_stack.addWidget(self.list_panel)
        self.mode_stack.addWidget(self.editor_panel)
        self.mode_stack.addWidget(self.details_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(ConsoleMode.EXAM_LIST)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        # Submissions arrive from the API and countdown threads.
        if self._mode == ConsoleMode.EXAM_LIST:
            self.list_panel.refresh()
        elif self._mode == ConsoleMode.EXAM_DETAILS:
            self.details_panel.refresh()

    def _set_mode(self, mode: ConsoleMode) -> None:
        self._mode = mode
        index_map = {
            ConsoleMode.EXAM_LIST: 0,
            ConsoleMode.EXAM_EDITOR: 1,
            ConsoleMode.EXAM_DETAILS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    def _show_list(self) -> None:
        self.list_panel.refresh()
        self._set_mode(ConsoleMode.EXAM_LIST)

    def _handle_new_exam(self) -> None:
        self.editor_panel.load_new_exam()
        self._set_mode(ConsoleMode.EXAM_EDITOR)

    def _handle_edit_exam(self, exam_id: str) -> None:
        exam = self.exam_manager.get_exam(exam_id)
        if exam is None:
            show_error(self, "Exam not found", "The exam no longer exists.")
            self.list_panel.refresh()
            return
        self.editor_panel.load_exam(exam)
        self._set_mode(ConsoleMode.EXAM_EDITOR)

    def _handle_show_details(self, exam_id: str) -> None:
        self.details_panel.show_exam(exam_id)
        self._set_mode(ConsoleMode.EXAM_DETAILS)

    def _handle_import_exam(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_exam_from_file(Path(file_path), created_by=self.professor_id)
        except (OSError, ExamImportError) as exc:
            show_error(self, "Import failed", str(exc))
            return

        logger.info("Imported %d questions from %s", imported.exam.question_count, imported.source_path)
        self.editor_panel.set_imported_exam(imported.exam)
        self._set_mode(ConsoleMode.EXAM_EDITOR)

    def _handle_export_exam(self, exam_id: str) -> None:
        exam = self.exam_manager.get_exam(exam_id)
        if exam is None:
            self.list_panel.refresh()
            return

        default_name = "".join(ch if ch.isalnum() else "_" for ch in exam.title).strip("_") or "exam"
        default_dir = self._last_export_path.parent if self._last_export_path else Path.cwd()
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_dir / f"{default_name}.txt"),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_exam_to_file(Path(file_path), exam)
        except (OSError, ValueError) as exc:
            show_error(self, "Export failed", str(exc))
            return

        self._last_export_path = Path(file_path)
        show_info(self, "Exam saved", f"Exam exported to {file_path}.")

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def closeEvent(self, event) -> None:
        if self._mode == ConsoleMode.EXAM_EDITOR and not self.editor_panel.check_unsaved_changes():
            event.ignore()
            return
        event.accept()
