"""Component for creating and editing an exam."""

from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
from uuid import uuid4

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.exam_constants import (
    DEFAULT_DURATION_MINUTES,
    MAX_OPTIONS_PER_QUESTION,
    MIN_OPTIONS_PER_QUESTION,
)
from exam_app.constants.ui_constants import (
    EDITOR_ADD_OPTION,
    EDITOR_ADD_QUESTION,
    EDITOR_BACK,
    EDITOR_DELETE_QUESTION,
    EDITOR_DESCRIPTION_PLACEHOLDER,
    EDITOR_NEXT_QUESTION,
    EDITOR_PREV_QUESTION,
    EDITOR_QUESTION_PLACEHOLDER,
    EDITOR_REMOVE_OPTION,
    EDITOR_SAVE_EXAM,
    EDITOR_SAVE_QUESTION,
    EDITOR_TITLE_PLACEHOLDER,
)
from exam_app.core.errors import ExamNotFoundError
from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import Exam, Option, Question, utc_now
from exam_app.ui.dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    show_error,
    show_warning,
)
from exam_app.ui.question_renderer import render_question_with_options
from exam_app.styling.styles import Styles


def _new_id() -> str:
    return uuid4().hex


class ExamEditorPanel(QWidget):
    """Edits a working copy of one exam; the catalog only sees it on save."""

    def __init__(
        self,
        exam_manager: ExamManager,
        professor_id: str,
        *,
        on_close: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.exam_manager = exam_manager
        self.professor_id = professor_id
        self._on_close = on_close

        self._draft: Exam = self._blank_exam()
        self._is_new = True
        self._current_index = -1
        self._option_count = MIN_OPTIONS_PER_QUESTION
        self._has_unsaved_changes = False
        self._loading = False

        self._build_ui()
        self._show_question(-1)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.heading_label = QLabel("New exam", self)
        self.heading_label.setStyleSheet(Styles.get_heading_style())
        header_row.addWidget(self.heading_label)
        header_row.addStretch(1)
        self.back_button = QPushButton(EDITOR_BACK, self)
        self.back_button.clicked.connect(self._handle_back)
        header_row.addWidget(self.back_button)
        self.save_exam_button = QPushButton(EDITOR_SAVE_EXAM, self)
        self.save_exam_button.setStyleSheet(Styles.get_primary_button_style())
        self.save_exam_button.clicked.connect(self.save_exam)
        header_row.addWidget(self.save_exam_button)
        layout.addLayout(header_row)

        # Exam fields
        form = QFormLayout()
        self.title_input = QLineEdit(self)
        self.title_input.setPlaceholderText(EDITOR_TITLE_PLACEHOLDER)
        self.title_input.textChanged.connect(self._on_input_changed)
        form.addRow("Title:", self.title_input)

        self.description_input = QLineEdit(self)
        self.description_input.setPlaceholderText(EDITOR_DESCRIPTION_PLACEHOLDER)
        self.description_input.textChanged.connect(self._on_input_changed)
        form.addRow("Description:", self.description_input)

        self.duration_spinbox = QSpinBox(self)
        self.duration_spinbox.setRange(1, 600)
        self.duration_spinbox.setSuffix(" min")
        self.duration_spinbox.valueChanged.connect(lambda _: self._on_input_changed())
        form.addRow("Duration:", self.duration_spinbox)
        layout.addLayout(form)

        # Question navigator
        question_box = QGroupBox("Question", self)
        question_layout = QVBoxLayout()
        question_box.setLayout(question_layout)

        nav_row = QHBoxLayout()
        self.add_question_button = QPushButton(EDITOR_ADD_QUESTION, self)
        self.add_question_button.clicked.connect(self._handle_add_question)
        nav_row.addWidget(self.add_question_button)

        self.save_question_button = QPushButton(EDITOR_SAVE_QUESTION, self)
        self.save_question_button.clicked.connect(self._handle_save_question)
        nav_row.addWidget(self.save_question_button)

        self.delete_question_button = QPushButton(EDITOR_DELETE_QUESTION, self)
        self.delete_question_button.clicked.connect(self._handle_delete_question)
        nav_row.addWidget(self.delete_question_button)

        self.prev_button = QPushButton(EDITOR_PREV_QUESTION, self)
        self.prev_button.clicked.connect(lambda: self._navigate(-1))
        nav_row.addWidget(self.prev_button)

        self.next_button = QPushButton(EDITOR_NEXT_QUESTION, self)
        self.next_button.clicked.connect(lambda: self._navigate(1))
        nav_row.addWidget(self.next_button)
        question_layout.addLayout(nav_row)

        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(EDITOR_QUESTION_PLACEHOLDER)
        self.question_input.textChanged.connect(self._on_input_changed)
        question_layout.addWidget(self.question_input)

        self.option_inputs: list[QLineEdit] = []
        self.correct_checks: list[QCheckBox] = []
        self.option_rows: list[QWidget] = []
        for index in range(MAX_OPTIONS_PER_QUESTION):
            letter = chr(ord("A") + index)
            row_widget = QWidget(self)
            row = QHBoxLayout()
            row.setContentsMargins(0, 0, 0, 0)
            row_widget.setLayout(row)

            option_input = QLineEdit(row_widget)
            option_input.setPlaceholderText(f"Option {letter}")
            option_input.textChanged.connect(self._on_input_changed)
            row.addWidget(option_input)

            correct_check = QCheckBox("Correct", row_widget)
            correct_check.toggled.connect(lambda _checked: self._on_input_changed())
            row.addWidget(correct_check)

            question_layout.addWidget(row_widget)
            self.option_inputs.append(option_input)
            self.correct_checks.append(correct_check)
            self.option_rows.append(row_widget)

        option_buttons = QHBoxLayout()
        self.add_option_button = QPushButton(EDITOR_ADD_OPTION, self)
        self.add_option_button.clicked.connect(lambda: self._set_option_count(self._option_count + 1))
        option_buttons.addWidget(self.add_option_button)
        self.remove_option_button = QPushButton(EDITOR_REMOVE_OPTION, self)
        self.remove_option_button.clicked.connect(lambda: self._set_option_count(self._option_count - 1))
        option_buttons.addWidget(self.remove_option_button)
        option_buttons.addStretch(1)
        question_layout.addLayout(option_buttons)

        layout.addWidget(question_box)

        # Preview
        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        self.status_label = QLabel("", self)
        layout.addWidget(self.status_label)

    # --- Loading ---

    def load_new_exam(self) -> None:
        self._load(self._blank_exam(), is_new=True)
        self.status_label.setText("New exam. Add at least one question before saving.")

    def load_exam(self, exam: Exam) -> None:
        """Edit a copy of ``exam``; the stored exam stays untouched until saved."""
        self._load(deepcopy(exam), is_new=False)
        self.status_label.setText(f"Editing '{exam.title}'.")

    def set_imported_exam(self, exam: Exam) -> None:
        """Open an imported exam as a new, not yet saved draft."""
        self._load(exam, is_new=True)
        self._has_unsaved_changes = True
        self.status_label.setText(
            f"Imported {exam.question_count} questions. Review and press '{EDITOR_SAVE_EXAM}'."
        )

    def _load(self, exam: Exam, *, is_new: bool) -> None:
        self._draft = exam
        self._is_new = is_new
        self._loading = True
        self.heading_label.setText("New exam" if is_new else "Edit exam")
        self.title_input.setText(exam.title)
        self.description_input.setText(exam.description or "")
        self.duration_spinbox.setValue(exam.duration_minutes)
        self._loading = False
        self._show_question(0 if exam.questions else -1)
        self._has_unsaved_changes = False

    def _blank_exam(self) -> Exam:
        return Exam(
            id=_new_id(),
            title="",
            created_by=self.professor_id,
            duration_minutes=DEFAULT_DURATION_MINUTES,
        )

    # --- Question navigation ---

    def _show_question(self, index: int) -> None:
        self._current_index = index
        self._loading = True
        if 0 <= index < len(self._draft.questions):
            question = self._draft.questions[index]
            self.question_input.setPlainText(question.text)
            self._set_option_count(len(question.options))
            for position, (field, check) in enumerate(zip(self.option_inputs, self.correct_checks)):
                option = question.options[position] if position < len(question.options) else None
                field.setText(option.text if option is not None else "")
                check.setChecked(option.is_correct if option is not None else False)
        else:
            self.question_input.clear()
            self._set_option_count(MIN_OPTIONS_PER_QUESTION)
            for field, check in zip(self.option_inputs, self.correct_checks):
                field.clear()
                check.setChecked(False)
        self._loading = False
        self._update_navigation()
        self._refresh_preview()

    def _commit_question(self) -> bool:
        """Write the question inputs into the draft. Returns False when nothing was entered."""
        text = self.question_input.toPlainText().strip()
        option_texts = [field.text().strip() for field in self.option_inputs[: self._option_count]]
        if not text and not any(option_texts):
            return False

        if 0 <= self._current_index < len(self._draft.questions):
            existing = self._draft.questions[self._current_index]
        else:
            existing = Question(id=_new_id(), exam_id=self._draft.id, text="")

        # Options keep their ids by position so recorded answers still resolve.
        options: list[Option] = []
        for position, option_text in enumerate(option_texts):
            option_id = existing.options[position].id if position < len(existing.options) else _new_id()
            options.append(
                Option(
                    id=option_id,
                    question_id=existing.id,
                    text=option_text,
                    is_correct=self.correct_checks[position].isChecked(),
                )
            )
        question = Question(id=existing.id, exam_id=self._draft.id, text=text, options=options)

        if 0 <= self._current_index < len(self._draft.questions):
            self._draft.questions[self._current_index] = question
        else:
            self._draft.questions.append(question)
            self._current_index = len(self._draft.questions) - 1
        return True

    def _handle_add_question(self) -> None:
        self._commit_question()
        self._show_question(len(self._draft.questions))
        self.status_label.setText(f"Writing question {len(self._draft.questions) + 1}.")

    def _handle_save_question(self) -> None:
        if not self._commit_question():
            show_warning(self, "Empty question", "Enter the question text and its options first.")
            return
        self._update_navigation()
        self.status_label.setText(
            f"Stored question {self._current_index + 1} of {len(self._draft.questions)}. "
            f"Press '{EDITOR_SAVE_EXAM}' to publish the changes."
        )

    def _handle_delete_question(self) -> None:
        if not 0 <= self._current_index < len(self._draft.questions):
            self._show_question(len(self._draft.questions) - 1)
            self.status_label.setText("Discarded unsaved question.")
            return
        if not confirm_delete_question(self, self._current_index + 1):
            return
        self._draft.questions.pop(self._current_index)
        self._has_unsaved_changes = True
        self._show_question(min(self._current_index, len(self._draft.questions) - 1))
        self.status_label.setText(f"Deleted question. {len(self._draft.questions)} left.")

    def _navigate(self, step: int) -> None:
        self._commit_question()
        if not self._draft.questions:
            return
        target = max(0, min(len(self._draft.questions) - 1, self._current_index + step))
        self._show_question(target)
        self.status_label.setText(f"Viewing question {target + 1} of {len(self._draft.questions)}.")

    def _set_option_count(self, count: int) -> None:
        self._option_count = max(MIN_OPTIONS_PER_QUESTION, min(MAX_OPTIONS_PER_QUESTION, count))
        for index, row in enumerate(self.option_rows):
            row.setVisible(index < self._option_count)
        self.add_option_button.setEnabled(self._option_count < MAX_OPTIONS_PER_QUESTION)
        self.remove_option_button.setEnabled(self._option_count > MIN_OPTIONS_PER_QUESTION)
        self._on_input_changed()

    def _update_navigation(self) -> None:
        count = len(self._draft.questions)
        self.prev_button.setEnabled(self._current_index > 0)
        self.next_button.setEnabled(0 <= self._current_index < count - 1)

    # --- Saving ---

    def save_exam(self) -> bool:
        """Validate and store the draft. Returns True when the catalog accepted it."""
        self._commit_question()
        description = self.description_input.text().strip()
        exam = Exam(
            id=self._draft.id,
            title=self.title_input.text().strip(),
            created_by=self._draft.created_by,
            duration_minutes=int(self.duration_spinbox.value()),
            questions=deepcopy(self._draft.questions),
            description=description or None,
            created_at=self._draft.created_at,
            updated_at=utc_now(),
        )
        try:
            if self._is_new:
                self.exam_manager.create_exam(exam)
            else:
                self.exam_manager.update_exam(exam)
        except ExamNotFoundError as exc:
            show_error(self, "Exam not saved", f"{exc} It may have been deleted.")
            return False
        except ValueError as exc:
            show_warning(self, "Exam not saved", str(exc))
            return False

        self._draft = deepcopy(exam)
        self._is_new = False
        self._has_unsaved_changes = False
        self.heading_label.setText("Edit exam")
        self.status_label.setText(f"Saved '{exam.title}' with {exam.question_count} question(s).")
        return True

    def check_unsaved_changes(self) -> bool:
        """Prompt about unsaved edits. Returns True if ok to leave the editor."""
        if not self._has_unsaved_changes:
            return True

        result = check_unsaved_changes(self, "Exam")
        if result is True:
            return self.save_exam()
        if result is False:
            self._has_unsaved_changes = False
            return True
        return False

    def _handle_back(self) -> None:
        if self.check_unsaved_changes():
            self._on_close()

    # --- Preview ---

    def _on_input_changed(self) -> None:
        if self._loading:
            return
        self._has_unsaved_changes = True
        self._refresh_preview()

    def _refresh_preview(self) -> None:
        options = [
            (field.text(), check.isChecked())
            for field, check in zip(
                self.option_inputs[: self._option_count], self.correct_checks[: self._option_count]
            )
        ]
        html = render_question_with_options(self.question_input.toPlainText(), options)
        self.preview_view.setHtml(html)
