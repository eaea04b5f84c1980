"""Application entry point for ExamDesk."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.exam_manager import ExamManager
from exam_app.core.services.countdown_ticker import CountdownTicker
from exam_app.server.api_server import start_api_server
from exam_app.ui.professor_main_window import ProfessorMainWindow
from exam_app.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for student-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Start logging, the countdown, the API server, and the professor console."""
    logger = configure_logging()
    logger.info("Starting ExamDesk...")

    exam_manager = ExamManager()
    ticker = CountdownTicker(exam_manager.tick_attempts)
    ticker.start()
    start_api_server(exam_manager=exam_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    student_url = _determine_student_url(DEFAULT_PORT)
    logger.info("Student page available at %s", student_url)

    app = QApplication(sys.argv)
    window = ProfessorMainWindow(exam_manager=exam_manager, student_url=student_url)
    window.show()
    exit_code = app.exec()
    ticker.stop()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
