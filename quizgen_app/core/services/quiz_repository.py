"""Service for storing saved quizzes and their attempts."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from quizgen_app.core.models import (
    AnswerRecord,
    Question,
    QuizAttempt,
    QuizSettings,
    ResultRecord,
    SavedQuiz,
)


class QuizNotFoundError(KeyError):
    """Raised when a quiz id is unknown (or not visible to the caller)."""


class AttemptNotFoundError(KeyError):
    """Raised when an attempt id is unknown (or not owned by the caller)."""


class QuizRepository:
    """In-memory store of quizzes and attempts keyed by generated ids."""

    def __init__(self) -> None:
        self._quizzes: dict[str, SavedQuiz] = {}
        self._attempts: dict[str, QuizAttempt] = {}

    # --- Quizzes ---

    def save_quiz(
        self,
        owner_id: str | None,
        questions: Sequence[Question],
        settings: QuizSettings,
    ) -> SavedQuiz:
        if not questions:
            raise ValueError("Quiz must contain at least one question.")
        quiz = SavedQuiz(
            id=uuid4().hex,
            owner_id=owner_id,
            questions=tuple(questions),
            settings=settings,
        )
        self._quizzes[quiz.id] = quiz
        return quiz

    def get_quiz(self, quiz_id: str) -> SavedQuiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz

    def list_quizzes(self, owner_id: str, limit: int | None = None) -> list[SavedQuiz]:
        """Return the owner's quizzes, newest first."""
        owned = [quiz for quiz in reversed(self._quizzes.values()) if quiz.owner_id == owner_id]
        owned.sort(key=lambda quiz: quiz.created_at, reverse=True)
        return owned[:limit] if limit is not None else owned

    def delete_quiz(self, quiz_id: str, owner_id: str) -> None:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None or quiz.owner_id != owner_id:
            raise QuizNotFoundError(quiz_id)
        del self._quizzes[quiz_id]
        self._attempts = {
            attempt_id: attempt
            for attempt_id, attempt in self._attempts.items()
            if attempt.quiz_id != quiz_id
        }

    # --- Attempts ---

    def record_attempt(
        self,
        quiz_id: str,
        result: ResultRecord,
        answers: Sequence[AnswerRecord],
        *,
        user_id: str | None = None,
        guest_name: str | None = None,
        share_token: str | None = None,
    ) -> QuizAttempt:
        quiz = self.get_quiz(quiz_id)
        attempt = QuizAttempt(
            id=uuid4().hex,
            quiz_id=quiz_id,
            result=result,
            answers=tuple(answers),
            user_id=user_id,
            guest_name=guest_name,
            share_token=share_token,
            topic=quiz.settings.topic,
            difficulty=quiz.settings.difficulty,
        )
        self._attempts[attempt.id] = attempt
        return attempt

    def get_attempt(self, attempt_id: str) -> QuizAttempt:
        attempt = self._attempts.get(attempt_id)
        if attempt is None:
            raise AttemptNotFoundError(attempt_id)
        return attempt

    def list_attempts(self, user_id: str, limit: int | None = None) -> list[QuizAttempt]:
        """Return the user's attempts, most recently completed first."""
        owned = [a for a in reversed(self._attempts.values()) if a.user_id == user_id]
        owned.sort(key=lambda attempt: attempt.completed_at, reverse=True)
        return owned[:limit] if limit is not None else owned

    def delete_attempt(self, attempt_id: str, user_id: str) -> None:
        attempt = self._attempts.get(attempt_id)
        if attempt is None or attempt.user_id != user_id:
            raise AttemptNotFoundError(attempt_id)
        del self._attempts[attempt_id]
