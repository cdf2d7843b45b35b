"""Service for issuing and resolving guest share links."""

from __future__ import annotations

from datetime import datetime
import secrets
from uuid import uuid4

from quizgen_app.core.models import SharedQuiz, utc_now

_TOKEN_BYTES = 12


class ShareTokenNotFoundError(KeyError):
    """Raised when a share token is unknown or has expired."""


class ShareRegistry:
    """Tracks one share record per quiz plus its view and attempt counters."""

    def __init__(self) -> None:
        self._by_token: dict[str, SharedQuiz] = {}
        self._token_by_quiz: dict[str, str] = {}

    def share(self, quiz_id: str, expires_at: datetime | None = None) -> SharedQuiz:
        """Return the quiz's existing share, issuing a token the first time."""
        token = self._token_by_quiz.get(quiz_id)
        if token is not None:
            return self._by_token[token]
        token = self._issue_token()
        shared = SharedQuiz(
            id=uuid4().hex,
            quiz_id=quiz_id,
            share_token=token,
            expires_at=expires_at,
        )
        self._by_token[token] = shared
        self._token_by_quiz[quiz_id] = token
        return shared

    def resolve(self, token: str, *, count_view: bool = True) -> SharedQuiz:
        shared = self._lookup(token)
        if count_view:
            shared.view_count += 1
        return shared

    def record_attempt(self, token: str) -> SharedQuiz:
        shared = self._lookup(token)
        shared.attempt_count += 1
        return shared

    def revoke_quiz(self, quiz_id: str) -> None:
        token = self._token_by_quiz.pop(quiz_id, None)
        if token is not None:
            self._by_token.pop(token, None)

    @staticmethod
    def share_url(base_url: str, token: str) -> str:
        return f"{base_url.rstrip('/')}/quiz/shared/{token}"

    def _lookup(self, token: str) -> SharedQuiz:
        shared = self._by_token.get(token)
        if shared is None:
            raise ShareTokenNotFoundError(token)
        if shared.expires_at is not None and shared.expires_at <= utc_now():
            raise ShareTokenNotFoundError(token)
        return shared

    def _issue_token(self) -> str:
        while True:
            token = secrets.token_urlsafe(_TOKEN_BYTES)
            if token not in self._by_token:
                return token
