"""Dashboard statistics and filtering over a user's past attempts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from quizgen_app.constants.quiz_constants import PASS_PERCENTAGE
from quizgen_app.core.models import QuizAttempt


class AttemptOutcome(str, Enum):
    ALL = "all"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class DashboardSummary:
    """Aggregate figures shown on the dashboard."""

    total_attempts: int
    total_correct: int
    total_questions: int
    average_percentage: float
    total_time_minutes: int
    favorite_topic: str


def summarize_attempts(attempts: Iterable[QuizAttempt]) -> DashboardSummary:
    attempts = list(attempts)
    total_correct = sum(a.result.correct_count for a in attempts)
    total_questions = sum(a.result.total_questions for a in attempts)
    average = round(total_correct / total_questions * 100, 1) if total_questions else 0.0
    total_seconds = sum(a.result.elapsed_seconds for a in attempts)

    topics = Counter(a.topic for a in attempts)
    favorite_topic = topics.most_common(1)[0][0] if topics else "None"

    return DashboardSummary(
        total_attempts=len(attempts),
        total_correct=total_correct,
        total_questions=total_questions,
        average_percentage=average,
        total_time_minutes=total_seconds // 60,
        favorite_topic=favorite_topic,
    )


def filter_attempts(
    attempts: Iterable[QuizAttempt],
    outcome: AttemptOutcome | str = AttemptOutcome.ALL,
    search: str | None = None,
) -> list[QuizAttempt]:
    """Keep attempts matching the pass/fail tab and a topic substring."""
    outcome = AttemptOutcome(outcome)
    needle = (search or "").strip().lower()
    selected: list[QuizAttempt] = []
    for attempt in attempts:
        passed = attempt.result.percentage >= PASS_PERCENTAGE
        if outcome is AttemptOutcome.PASSED and not passed:
            continue
        if outcome is AttemptOutcome.FAILED and passed:
            continue
        if needle and needle not in attempt.topic.lower():
            continue
        selected.append(attempt)
    return selected
