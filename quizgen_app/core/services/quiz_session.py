"""Controller for a single timed quiz attempt.

An attempt is either active or submitted. Submission happens once, either on
request or when the countdown reaches zero; after that every mutating call is
ignored so a late tick or a duplicate submit cannot alter the result.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, auto
import logging
from typing import Callable

from quizgen_app.constants.quiz_constants import (
    MAX_QUESTIONS,
    MAX_TIMER_MINUTES,
    MIN_PENALTY,
    MIN_QUESTIONS,
    MIN_TIMER_MINUTES,
    OPTION_COUNT,
    TIMER_MINUTES_PER_QUESTION,
)
from quizgen_app.core.models import (
    AnswerRecord,
    Difficulty,
    Question,
    QuizSettings,
    ResultRecord,
    SessionState,
)
from quizgen_app.core.services.scoring import score_attempt
from quizgen_app.core.services.tick_scheduler import TickScheduler

logger = logging.getLogger(__name__)

SubmissionListener = Callable[["QuizSessionController", ResultRecord], None]


class QuizSessionError(Exception):
    """Base class for quiz session failures."""


class InvalidQuizInputError(QuizSessionError, ValueError):
    """Raised when a question set or its settings cannot seed a session."""


class OutOfRangeError(QuizSessionError, IndexError):
    """Raised when a question or option index falls outside the quiz."""


class SessionPhase(Enum):
    ACTIVE = auto()
    SUBMITTED = auto()


def build_quiz_settings(
    topic: str,
    difficulty: Difficulty | str,
    total_questions: int,
    timer_minutes: int | None = None,
    negative_marking_enabled: bool = False,
    penalty_per_wrong: float = 0.0,
) -> QuizSettings:
    """Validate raw settings and return the immutable settings record.

    The timer defaults to one minute per question. The penalty is forced to
    zero when negative marking is disabled.
    """
    cleaned_topic = (topic or "").strip()
    if not cleaned_topic:
        raise InvalidQuizInputError("Topic must not be empty.")
    try:
        level = Difficulty(difficulty)
    except ValueError as exc:
        raise InvalidQuizInputError(f"Unknown difficulty '{difficulty}'.") from exc
    if not MIN_QUESTIONS <= total_questions <= MAX_QUESTIONS:
        raise InvalidQuizInputError(
            f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}."
        )
    if timer_minutes is None:
        timer_minutes = total_questions * TIMER_MINUTES_PER_QUESTION
    if not MIN_TIMER_MINUTES <= timer_minutes <= MAX_TIMER_MINUTES:
        raise InvalidQuizInputError(
            f"Timer must be between {MIN_TIMER_MINUTES} and {MAX_TIMER_MINUTES} minutes."
        )
    penalty = float(penalty_per_wrong) if negative_marking_enabled else 0.0
    if not MIN_PENALTY <= penalty <= 0.0:
        raise InvalidQuizInputError("Penalty per wrong answer must be between -1 and 0.")
    return QuizSettings(
        topic=cleaned_topic,
        difficulty=level,
        total_questions=total_questions,
        timer_minutes=timer_minutes,
        negative_marking_enabled=negative_marking_enabled,
        penalty_per_wrong=penalty,
    )


def validate_question_set(questions: Sequence[Question], settings: QuizSettings) -> None:
    """Reject question sets that do not match their settings."""
    if not questions:
        raise InvalidQuizInputError("Quiz must contain at least one question.")
    if len(questions) != settings.total_questions:
        raise InvalidQuizInputError(
            f"Expected {settings.total_questions} questions but received {len(questions)}."
        )
    if settings.timer_minutes < MIN_TIMER_MINUTES:
        raise InvalidQuizInputError("Timer must be at least one minute.")
    for position, question in enumerate(questions, start=1):
        if len(question.options) != OPTION_COUNT:
            raise InvalidQuizInputError(
                f"Question {position} must have exactly {OPTION_COUNT} options."
            )
        if not 0 <= question.correct_option_index < OPTION_COUNT:
            raise InvalidQuizInputError(
                f"Question {position} has an invalid correct option index."
            )


class QuizSessionController:
    """Owns one attempt: answers, review flags, the cursor and the countdown."""

    def __init__(
        self,
        questions: Sequence[Question],
        settings: QuizSettings,
        scheduler: TickScheduler | None = None,
        on_submitted: SubmissionListener | None = None,
    ) -> None:
        validate_question_set(questions, settings)
        self._questions: tuple[Question, ...] = tuple(questions)
        self._settings = settings
        self._answers: list[AnswerRecord] = [
            AnswerRecord(question_id=question.id) for question in self._questions
        ]
        self._current_index: int = 0
        self._total_seconds: int = settings.timer_minutes * 60
        self._remaining_seconds: int = self._total_seconds
        self._phase = SessionPhase.ACTIVE
        self._result: ResultRecord | None = None
        self._scheduler = scheduler
        self._on_submitted = on_submitted

    @classmethod
    def start(
        cls,
        questions: Sequence[Question],
        settings: QuizSettings,
        scheduler: TickScheduler | None = None,
        on_submitted: SubmissionListener | None = None,
    ) -> "QuizSessionController":
        """Create a session and start its countdown."""
        session = cls(questions, settings, scheduler=scheduler, on_submitted=on_submitted)
        if scheduler is not None:
            scheduler.start(session.tick)
        logger.info(
            "Started quiz session on '%s' (%d questions, %d s)",
            settings.topic,
            len(session._questions),
            session._total_seconds,
        )
        return session

    # --- Read access ---

    @property
    def settings(self) -> QuizSettings:
        return self._settings

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question:
        return self._questions[self._current_index]

    @property
    def current_answer(self) -> AnswerRecord:
        return self._answers[self._current_index]

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_submitted(self) -> bool:
        return self._phase is SessionPhase.SUBMITTED

    @property
    def result(self) -> ResultRecord | None:
        return self._result

    def get_answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(
            AnswerRecord(a.question_id, a.selected_option_index, a.marked_for_review)
            for a in self._answers
        )

    def snapshot(self) -> SessionState:
        return SessionState(
            questions=self._questions,
            answers=self.get_answers(),
            current_index=self._current_index,
            remaining_seconds=self._remaining_seconds,
            submitted=self.is_submitted,
        )

    # --- Answering ---

    def select_option(self, option_index: int) -> bool:
        """Record the chosen option for the current question (last write wins)."""
        if self._ignore_when_submitted("select_option"):
            return False
        if not 0 <= option_index < len(self.current_question.options):
            raise OutOfRangeError(f"Option index {option_index} out of range")
        answer = self._answers[self._current_index]
        if answer.selected_option_index == option_index:
            return False
        answer.selected_option_index = option_index
        return True

    def toggle_review(self) -> bool:
        if self._ignore_when_submitted("toggle_review"):
            return False
        answer = self._answers[self._current_index]
        answer.marked_for_review = not answer.marked_for_review
        return True

    # --- Navigation ---

    def go_to(self, index: int) -> bool:
        if self._ignore_when_submitted("go_to"):
            return False
        if not 0 <= index < len(self._questions):
            raise OutOfRangeError(f"Question index {index} out of range")
        self._current_index = index
        return True

    def next_question(self) -> bool:
        if self._ignore_when_submitted("next_question"):
            return False
        if self._current_index >= len(self._questions) - 1:
            return False
        self._current_index += 1
        return True

    def previous_question(self) -> bool:
        if self._ignore_when_submitted("previous_question"):
            return False
        if self._current_index == 0:
            return False
        self._current_index -= 1
        return True

    # --- Clock and submission ---

    def tick(self) -> None:
        """Advance the countdown by one second, submitting when it runs out."""
        if self.is_submitted or self._remaining_seconds <= 0:
            return
        self._remaining_seconds -= 1
        if self._remaining_seconds == 0:
            logger.info("Time limit reached on '%s'; submitting", self._settings.topic)
            self.submit()

    def submit(self) -> ResultRecord:
        """Finish the attempt and return its result; repeat calls return the same result."""
        if self._result is not None:
            return self._result
        self._phase = SessionPhase.SUBMITTED
        self._release_scheduler()
        elapsed_seconds = self._total_seconds - self._remaining_seconds
        self._result = score_attempt(
            self._questions,
            self.get_answers(),
            self._settings,
            elapsed_seconds,
        )
        logger.info(
            "Submitted quiz '%s': %d correct, %d wrong, %d unanswered, score %s",
            self._settings.topic,
            self._result.correct_count,
            self._result.wrong_count,
            self._result.unanswered_count,
            self._result.score,
        )
        if self._on_submitted is not None:
            self._on_submitted(self, self._result)
        return self._result

    def abandon(self) -> None:
        """Stop the countdown of a session that will never be submitted."""
        self._release_scheduler()

    def _release_scheduler(self) -> None:
        if self._scheduler is not None:
            self._scheduler.cancel()

    def _ignore_when_submitted(self, operation: str) -> bool:
        if self.is_submitted:
            logger.debug("Ignoring %s on a submitted session", operation)
            return True
        return False
