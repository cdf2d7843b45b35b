"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Difficulty(str, Enum):
    """Difficulty levels understood by the question generator."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MIX = "mix"


@dataclass(slots=True, frozen=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: int
    text: str
    options: tuple[str, ...]
    correct_option_index: int
    explanation: str = ""


@dataclass(slots=True, frozen=True)
class QuizSettings:
    """Settings chosen when a quiz is generated; immutable afterwards."""

    topic: str
    difficulty: Difficulty
    total_questions: int
    timer_minutes: int
    negative_marking_enabled: bool = False
    penalty_per_wrong: float = 0.0


@dataclass(slots=True)
class AnswerRecord:
    """Per-question answer state owned by the session controller."""

    question_id: int
    selected_option_index: int | None = None
    marked_for_review: bool = False

    @property
    def status(self) -> str:
        if self.marked_for_review:
            return "review"
        if self.selected_option_index is not None:
            return "answered"
        return "unanswered"


@dataclass(slots=True, frozen=True)
class SessionState:
    """Read-only snapshot of an attempt in progress (or just finished)."""

    questions: tuple[Question, ...]
    answers: tuple[AnswerRecord, ...]
    current_index: int
    remaining_seconds: int
    submitted: bool


@dataclass(slots=True, frozen=True)
class QuestionOutcome:
    """Per-question line of a result, used by the detailed review."""

    question_id: int
    selected: int | None
    correct: int
    is_correct: bool


@dataclass(slots=True, frozen=True)
class ResultRecord:
    """Scored outcome of a submitted attempt."""

    correct_count: int
    wrong_count: int
    unanswered_count: int
    score: float
    elapsed_seconds: int
    per_question: tuple[QuestionOutcome, ...]

    @property
    def total_questions(self) -> int:
        return len(self.per_question)

    @property
    def percentage(self) -> float:
        if not self.per_question:
            return 0.0
        return self.correct_count / self.total_questions * 100


@dataclass(slots=True)
class SavedQuiz:
    """Quiz persisted to an owner's account."""

    id: str
    owner_id: str | None
    questions: tuple[Question, ...]
    settings: QuizSettings
    created_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class QuizAttempt:
    """Finished attempt stored against a quiz (by a user or a guest)."""

    id: str
    quiz_id: str
    result: ResultRecord
    answers: tuple[AnswerRecord, ...]
    user_id: str | None = None
    guest_name: str | None = None
    share_token: str | None = None
    topic: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    completed_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class SharedQuiz:
    """Share-link record that lets guests take a saved quiz."""

    id: str
    quiz_id: str
    share_token: str
    view_count: int = 0
    attempt_count: int = 0
    expires_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
