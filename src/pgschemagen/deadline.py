"""Deadline and cancellation token threaded through catalog queries."""

import time
from typing import Callable, Optional

from pgschemagen.exceptions import DeadlineExceededError

__all__ = ["Deadline"]


class Deadline:
    """A cancellable, optionally time-bounded token.

    ``Deadline()`` never expires on its own but can still be cancelled.
    ``Deadline(30)`` expires 30 seconds after construction.
    """

    def __init__(
        self,
        seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if seconds is not None and seconds <= 0:
            raise ValueError(f"Deadline must be positive, got {seconds}")
        self._clock = clock
        self._expires_at = clock() + seconds if seconds is not None else None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when unbounded. Never negative."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, operation: str) -> None:
        """Raise DeadlineExceededError if cancelled or expired.

        Args:
            operation: Name of the operation about to run, for the message.
        """
        if self._cancelled:
            raise DeadlineExceededError(operation, f"{operation}: cancelled")
        if self.expired():
            raise DeadlineExceededError(operation, f"{operation}: deadline exceeded")
