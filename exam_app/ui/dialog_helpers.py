"""Helper functions for common dialog patterns in the professor console."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_delete_exam(parent: QWidget, exam_title: str, submission_count: int) -> bool:
    """Show confirmation dialog for deleting an exam.

    Args:
        parent: Parent widget for the dialog
        exam_title: Title of the exam shown in the prompt
        submission_count: Number of recorded submissions, mentioned when non-zero

    Returns:
        True if user confirmed, False otherwise
    """
    message = f"Are you sure you want to delete '{exam_title}'?"
    if submission_count:
        message += (
            f"\n\n{submission_count} submission(s) will be kept, but students will no "
            "longer see the question breakdown."
        )
    reply = QMessageBox.question(
        parent,
        "Confirm Delete",
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_delete_question(parent: QWidget, question_number: int) -> bool:
    reply = QMessageBox.question(
        parent,
        "Confirm Delete",
        f"Are you sure you want to delete question {question_number}?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def check_unsaved_changes(parent: QWidget, subject: str = "Exam") -> bool | None:
    """Show dialog asking user about unsaved changes.

    Args:
        parent: Parent widget for the dialog
        subject: What has unsaved edits ("Exam" or "Question")

    Returns:
        True if user wants to save, False if discard, None if cancelled
    """
    reply = QMessageBox.question(
        parent,
        "Unsaved Changes",
        f"{subject} is not saved. Do you want to save it?",
        QMessageBox.Yes | QMessageBox.No | QMessageBox.Cancel,
        QMessageBox.Yes,
    )

    if reply == QMessageBox.Yes:
        return True
    if reply == QMessageBox.No:
        return False
    return None


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
