"""Per-client limit on how often quizzes may be generated from the desktop."""

from __future__ import annotations

import time

from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

from quizgen_app.constants.network_constants import GENERATION_RATE_LIMIT


class RateLimitExceededError(RuntimeError):
    """Raised when a client has used up its generations for the window."""

    def __init__(self, client_address: str, retry_after_seconds: int) -> None:
        super().__init__(
            f"Generation limit reached. Try again in {retry_after_seconds} seconds."
        )
        self.client_address = client_address
        self.retry_after_seconds = retry_after_seconds


class GenerationRateLimiter:
    """Fixed-window limit keyed by client address, e.g. ``"10/hour"``.

    Counters live in a ``limits`` memory storage, which expires them with
    their window. The HTTP API limits its generate route with slowapi over
    the same strategy, so this limiter only guards in-process callers.
    """

    def __init__(self, rate_limit: str = GENERATION_RATE_LIMIT) -> None:
        self._item: RateLimitItem = parse(rate_limit)
        self._limiter = FixedWindowRateLimiter(MemoryStorage())

    def check_and_record(self, client_address: str) -> None:
        """Count one generation for the client or raise when over the limit."""
        if self._limiter.hit(self._item, client_address):
            return
        reset_at, _ = self._limiter.get_window_stats(self._item, client_address)
        retry_after = max(1, int(reset_at - time.time()))
        raise RateLimitExceededError(client_address, retry_after)
