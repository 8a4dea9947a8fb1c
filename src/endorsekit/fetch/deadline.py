"""Deadline and cancellation token threaded through every fetching call.

A ``Deadline`` is created by the caller (CLI or library user) and passed
down through ``load_provenances`` -> ``load_provenance`` -> ``fetch_bytes``.
The fetcher checks it before any I/O, hands the remaining time to httpx as
the request timeout and checks it again after every chunk of a response
body, so a caller-imposed limit applies end-to-end.
"""

from __future__ import annotations

import time
from typing import Callable

from endorsekit.exceptions import DeadlineExceededError


class Deadline:
    """An optional absolute expiry plus an explicit cancellation flag.

    ``Deadline()`` never expires on its own but can still be cancelled.
    ``Deadline.after(seconds)`` expires ``seconds`` from now.

    Args:
        expires_at: Absolute expiry on the ``clock`` timeline, or None.
        clock: Monotonic time source. Injectable for tests.
    """

    def __init__(
        self,
        expires_at: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._expires_at = expires_at
        self._clock = clock
        self._cancelled = False

    @classmethod
    def after(
        cls,
        seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> Deadline:
        """Create a deadline that expires ``seconds`` from now."""
        return cls(clock() + seconds, clock=clock)

    def cancel(self) -> None:
        """Cancel all work governed by this deadline."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> float | None:
        """Seconds left before expiry, clamped at 0. None means unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return self._cancelled or (remaining is not None and remaining <= 0.0)

    def check(self, uri: str) -> None:
        """Raise DeadlineExceededError if no more work may start for ``uri``."""
        if self._cancelled:
            raise DeadlineExceededError(uri, "operation was cancelled")
        if self.expired:
            raise DeadlineExceededError(uri, "deadline exceeded")
