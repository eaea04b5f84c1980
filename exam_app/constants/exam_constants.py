"""Exam-related constants shared across UI, server and core layers."""

PASSING_SCORE: float = 60.0
DEFAULT_DURATION_MINUTES: int = 60
MIN_OPTIONS_PER_QUESTION: int = 2
MAX_OPTIONS_PER_QUESTION: int = 6
TICK_INTERVAL_SECONDS: float = 1.0
LOW_TIME_WARNING_SECONDS: int = 60

# Exported continuation lines are indented so they never read as markers.
EXPORT_CONTINUATION_INDENT: str = "    "
