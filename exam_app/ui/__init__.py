"""Qt UI components for the professor console."""

from .dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_exam,
    confirm_delete_question,
    show_error,
    show_info,
    show_warning,
)
from .question_renderer import render_exam, render_question_with_options
from .professor_main_window import ProfessorMainWindow

__all__ = [
    "ProfessorMainWindow",
    "check_unsaved_changes",
    "confirm_delete_exam",
    "confirm_delete_question",
    "show_error",
    "show_info",
    "show_warning",
    "render_exam",
    "render_question_with_options",
]
