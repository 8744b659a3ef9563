"""Run-wide cancellation token shared by the listing and download phases."""

from __future__ import annotations

import threading
import time

from s3cat.exceptions import DeadlineExceededError


class Deadline:
    """Optional absolute expiry plus a cancel flag, safe to share across threads.

    ``Deadline(None)`` never expires on its own but can still be cancelled,
    which is how a failing download stops its siblings.  A child created
    with :meth:`derive` shares the parent's expiry and observes its
    cancellation, while cancelling the child leaves the parent untouched.
    """

    def __init__(
        self,
        timeout: float | None = None,
        *,
        parent: Deadline | None = None,
    ) -> None:
        """Start the clock; *timeout* is in seconds, ``None`` or ``<= 0`` for none."""
        self._parent = parent
        self._expires_at: float | None = None
        if timeout is not None and timeout > 0:
            self._expires_at = time.monotonic() + timeout
        self._cancelled = threading.Event()

    def derive(self) -> Deadline:
        """Return a child deadline that can be cancelled independently."""
        return Deadline(parent=self)

    def cancel(self) -> None:
        """Mark the deadline as cancelled for every holder."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def remaining(self) -> float | None:
        """Seconds left before expiry, ``None`` when there is no expiry."""
        if self._parent is not None:
            return self._parent.remaining()
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        """True when cancelled or past the expiry time."""
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise :class:`DeadlineExceededError` if the deadline no longer holds."""
        if self.cancelled:
            raise DeadlineExceededError("operation cancelled")
        if self.expired():
            raise DeadlineExceededError("deadline exceeded")
