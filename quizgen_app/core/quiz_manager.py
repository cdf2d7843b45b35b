"""Business logic shared between the desktop UI and the HTTP API."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from threading import RLock
import time
from typing import Callable
from uuid import uuid4

from quizgen_app.constants.quiz_constants import RECENT_ITEMS_LIMIT, SESSION_RETENTION_SECONDS
from quizgen_app.core.models import (
    Question,
    QuizAttempt,
    QuizSettings,
    ResultRecord,
    SavedQuiz,
    SessionState,
    SharedQuiz,
)
from quizgen_app.core.quiz_generator import QuestionSetGenerator, QuizGenerationError
from quizgen_app.core.services.attempt_history import (
    AttemptOutcome,
    DashboardSummary,
    filter_attempts,
    summarize_attempts,
)
from quizgen_app.core.services.quiz_repository import QuizNotFoundError, QuizRepository
from quizgen_app.core.services.quiz_session import InvalidQuizInputError, QuizSessionController
from quizgen_app.core.services.rate_limiter import GenerationRateLimiter
from quizgen_app.core.services.share_registry import ShareRegistry, ShareTokenNotFoundError
from quizgen_app.core.services.tick_scheduler import (
    LockedTickScheduler,
    ThreadingTickScheduler,
    TickScheduler,
)

logger = logging.getLogger(__name__)

SchedulerFactory = Callable[[], TickScheduler]
LOCAL_CLIENT = "local"


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or the session was closed."""


class SessionStateError(RuntimeError):
    """Raised when an operation does not fit the session's current state."""


@dataclass(slots=True)
class ActiveSession:
    session_id: str
    controller: QuizSessionController
    quiz_id: str | None = None
    share_token: str | None = None
    guest_name: str | None = None
    attempt_id: str | None = None
    finished_at: float | None = None


@dataclass(slots=True, frozen=True)
class SessionView:
    """Consistent snapshot of a session taken under the manager lock."""

    session_id: str
    settings: QuizSettings
    state: SessionState
    result: ResultRecord | None
    quiz_id: str | None
    share_token: str | None
    guest_name: str | None
    attempt_id: str | None


class QuizManager:
    """Facade over generation, sessions, storage and sharing."""

    def __init__(
        self,
        generator: QuestionSetGenerator | None = None,
        repository: QuizRepository | None = None,
        shares: ShareRegistry | None = None,
        rate_limiter: GenerationRateLimiter | None = None,
        scheduler_factory: SchedulerFactory = ThreadingTickScheduler,
        session_retention_seconds: float = SESSION_RETENTION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = RLock()
        self._generator = generator
        self._repository = repository or QuizRepository()
        self._shares = shares or ShareRegistry()
        self._rate_limiter = rate_limiter
        self._scheduler_factory = scheduler_factory
        self._session_retention_seconds = session_retention_seconds
        self._clock = clock
        self._sessions: dict[str, ActiveSession] = {}

    # --- Generation ---

    def generate_quiz(
        self, settings: QuizSettings, client_address: str | None = LOCAL_CLIENT
    ) -> list[Question]:
        """Generate a question set.

        ``client_address=None`` skips the in-process limiter; the HTTP API
        passes it because slowapi already limits its generate route.
        """
        if self._generator is None:
            raise QuizGenerationError("No quiz generator is configured.")
        if self._rate_limiter is not None and client_address is not None:
            with self._lock:
                self._rate_limiter.check_and_record(client_address)
        # The model call is slow; keep it outside the lock.
        return self._generator.generate(settings)

    # --- Sessions ---

    def start_session(
        self,
        questions: Sequence[Question],
        settings: QuizSettings,
        *,
        quiz_id: str | None = None,
        share_token: str | None = None,
        guest_name: str | None = None,
        scheduler: TickScheduler | None = None,
    ) -> SessionView:
        with self._lock:
            self._evict_finished_sessions()
            session_id = uuid4().hex
            controller = QuizSessionController.start(
                questions,
                settings,
                scheduler=LockedTickScheduler(scheduler or self._scheduler_factory(), self._lock),
                on_submitted=lambda _controller, result: self._handle_submitted(session_id, result),
            )
            active = ActiveSession(
                session_id=session_id,
                controller=controller,
                quiz_id=quiz_id,
                share_token=share_token,
                guest_name=guest_name,
            )
            self._sessions[session_id] = active
            return self._view(active)

    def start_saved_quiz_session(self, quiz_id: str, **kwargs) -> SessionView:
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            return self.start_session(quiz.questions, quiz.settings, quiz_id=quiz.id, **kwargs)

    def start_shared_session(self, share_token: str, guest_name: str, **kwargs) -> SessionView:
        name = (guest_name or "").strip()
        if not name:
            raise InvalidQuizInputError("Please enter your name to continue.")
        with self._lock:
            shared = self._shares.resolve(share_token, count_view=False)
            quiz = self._repository.get_quiz(shared.quiz_id)
            return self.start_session(
                quiz.questions,
                quiz.settings,
                quiz_id=quiz.id,
                share_token=share_token,
                guest_name=name,
                **kwargs,
            )

    def start_retake_session(self, attempt_id: str, user_id: str, **kwargs) -> SessionView:
        with self._lock:
            attempt = self._repository.get_attempt(attempt_id)
            if attempt.user_id != user_id:
                raise QuizNotFoundError(attempt.quiz_id)
            return self.start_saved_quiz_session(attempt.quiz_id, **kwargs)

    def get_session(self, session_id: str) -> SessionView:
        with self._lock:
            return self._view(self._require_session(session_id))

    def select_option(self, session_id: str, option_index: int) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.select_option(option_index)
            return self._view(active)

    def toggle_review(self, session_id: str) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.toggle_review()
            return self._view(active)

    def go_to_question(self, session_id: str, index: int) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.go_to(index)
            return self._view(active)

    def next_question(self, session_id: str) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.next_question()
            return self._view(active)

    def previous_question(self, session_id: str) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.previous_question()
            return self._view(active)

    def submit_session(self, session_id: str) -> SessionView:
        with self._lock:
            active = self._require_session(session_id)
            active.controller.submit()
            return self._view(active)

    def close_session(self, session_id: str) -> None:
        """Discard a session, stopping its countdown if it never finished."""
        with self._lock:
            active = self._sessions.pop(session_id, None)
            if active is None:
                raise SessionNotFoundError(session_id)
            active.controller.abandon()

    def active_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    # --- Saving and sharing ---

    def save_quiz(self, owner_id: str, questions: Sequence[Question], settings: QuizSettings) -> SavedQuiz:
        with self._lock:
            return self._repository.save_quiz(owner_id, questions, settings)

    def save_attempt(self, session_id: str, user_id: str) -> QuizAttempt:
        """Store a finished attempt (and its quiz when needed) on a user's account."""
        with self._lock:
            active = self._require_session(session_id)
            controller = active.controller
            if controller.result is None:
                raise SessionStateError("Submit the quiz before saving it.")
            if active.attempt_id is not None:
                raise SessionStateError("This attempt has already been saved.")

            quiz_id = active.quiz_id
            if quiz_id is None or self._repository.get_quiz(quiz_id).owner_id != user_id:
                quiz_id = self._repository.save_quiz(
                    user_id, controller.questions, controller.settings
                ).id
            attempt = self._repository.record_attempt(
                quiz_id,
                controller.result,
                controller.get_answers(),
                user_id=user_id,
            )
            active.quiz_id = quiz_id
            active.attempt_id = attempt.id
            logger.info("Saved attempt %s for quiz %s", attempt.id, quiz_id)
            return attempt

    def share_quiz(self, quiz_id: str, owner_id: str) -> SharedQuiz:
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            if quiz.owner_id != owner_id:
                raise QuizNotFoundError(quiz_id)
            shared = self._shares.share(quiz_id)
            logger.info("Share link ready for quiz %s", quiz_id)
            return shared

    def open_shared_quiz(self, share_token: str) -> tuple[SharedQuiz, SavedQuiz]:
        """Look up a shared quiz for its landing page, counting the view."""
        with self._lock:
            shared = self._shares.resolve(share_token)
            return shared, self._repository.get_quiz(shared.quiz_id)

    # --- Saved quizzes and history ---

    def get_quiz(self, quiz_id: str) -> SavedQuiz:
        with self._lock:
            return self._repository.get_quiz(quiz_id)

    def list_quizzes(self, owner_id: str, limit: int | None = RECENT_ITEMS_LIMIT) -> list[SavedQuiz]:
        with self._lock:
            return self._repository.list_quizzes(owner_id, limit)

    def delete_quiz(self, quiz_id: str, owner_id: str) -> None:
        with self._lock:
            self._repository.delete_quiz(quiz_id, owner_id)
            self._shares.revoke_quiz(quiz_id)

    def list_attempts(
        self,
        user_id: str,
        outcome: AttemptOutcome | str = AttemptOutcome.ALL,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[QuizAttempt]:
        with self._lock:
            attempts = filter_attempts(self._repository.list_attempts(user_id), outcome, search)
        return attempts[:limit] if limit is not None else attempts

    def delete_attempt(self, attempt_id: str, user_id: str) -> None:
        with self._lock:
            self._repository.delete_attempt(attempt_id, user_id)

    def get_dashboard(self, user_id: str) -> DashboardSummary:
        with self._lock:
            return summarize_attempts(self._repository.list_attempts(user_id))

    # --- Internals ---

    def _handle_submitted(self, session_id: str, result: ResultRecord) -> None:
        # Runs inside the lock: either the submit caller or the tick thread holds it.
        active = self._sessions.get(session_id)
        if active is None:
            return
        active.finished_at = self._clock()
        if active.share_token is None or active.quiz_id is None:
            return
        try:
            attempt = self._repository.record_attempt(
                active.quiz_id,
                result,
                active.controller.get_answers(),
                guest_name=active.guest_name,
                share_token=active.share_token,
            )
            self._shares.record_attempt(active.share_token)
        except (QuizNotFoundError, ShareTokenNotFoundError):
            logger.warning("Shared quiz %s is gone; guest attempt not recorded", active.quiz_id)
            return
        active.attempt_id = attempt.id
        logger.info("Recorded guest attempt by %s on shared quiz %s", active.guest_name, active.quiz_id)

    def _evict_finished_sessions(self) -> None:
        cutoff = self._clock() - self._session_retention_seconds
        expired = [
            session_id
            for session_id, active in self._sessions.items()
            if active.finished_at is not None and active.finished_at <= cutoff
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.debug("Discarded %d finished sessions", len(expired))

    def _require_session(self, session_id: str) -> ActiveSession:
        active = self._sessions.get(session_id)
        if active is None:
            raise SessionNotFoundError(session_id)
        return active

    @staticmethod
    def _view(active: ActiveSession) -> SessionView:
        controller = active.controller
        return SessionView(
            session_id=active.session_id,
            settings=controller.settings,
            state=controller.snapshot(),
            result=controller.result,
            quiz_id=active.quiz_id,
            share_token=active.share_token,
            guest_name=active.guest_name,
            attempt_id=active.attempt_id,
        )
