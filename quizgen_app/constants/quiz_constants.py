"""Quiz-related constants shared across UI, server and core layers."""

OPTION_COUNT: int = 4
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
# Prefix for continuation lines in exported quiz files.
CONTINUATION_INDENT: str = "    "

MIN_QUESTIONS: int = 1
MAX_QUESTIONS: int = 50
DEFAULT_QUESTION_COUNT: int = 10

MIN_TIMER_MINUTES: int = 1
MAX_TIMER_MINUTES: int = 300
TIMER_MINUTES_PER_QUESTION: int = 1

PENALTY_CHOICES: tuple[float, ...] = (-0.25, -0.5, -0.75, -1.0)
DEFAULT_PENALTY: float = -0.25
MIN_PENALTY: float = -1.0

TICK_INTERVAL_SECONDS: float = 1.0
# How long a submitted session stays readable (result, save) before it is discarded.
SESSION_RETENTION_SECONDS: float = 30 * 60
PASS_PERCENTAGE: float = 50.0
RECENT_ITEMS_LIMIT: int = 5
