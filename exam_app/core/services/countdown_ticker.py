"""Background clock that drives attempt countdowns once per interval."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Event, Thread

from exam_app.constants.exam_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class CountdownTicker:
    """Calls ``on_tick`` every ``interval_seconds`` on a daemon thread until stopped."""

    def __init__(
        self,
        on_tick: Callable[[], object],
        interval_seconds: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        self._on_tick = on_tick
        self._interval_seconds = interval_seconds
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self) -> Thread:
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Countdown ticker is already running.")
        self._stop_event.clear()
        self._thread = Thread(target=self._run, name="ExamCountdownTicker", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick_once(self) -> None:
        """Run one tick; errors are logged so a bad tick never stops the clock."""
        try:
            self._on_tick()
        except Exception:
            logger.exception("Countdown tick failed")

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            self.tick_once()
