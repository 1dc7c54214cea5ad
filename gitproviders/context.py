"""
Cancellation and deadline propagation.

A :class:`Context` is passed down every call chain (resource handle ->
paginator -> transport). It is checked before every HTTP attempt, bounds the
per-attempt timeout, and wakes up backoff sleeps as soon as it is cancelled.
A request that is already on the wire is not interrupted; the cancellation is
observed when it returns.
"""

import threading
import time

from gitproviders.exceptions import ContextCancelledError, ContextError, DeadlineExceededError


class Context:
    """Cancellation token with an optional monotonic deadline."""

    def __init__(self, deadline: float | None = None) -> None:
        """
        Create a context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic()`` clock, or
                None for no deadline.
        """
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Return a context whose deadline is ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        """Cancel the context. Safe to call from any thread, more than once."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> ContextError | None:
        """Return the error :meth:`check` would raise, or None while the context is live."""
        if self._cancelled.is_set():
            return ContextCancelledError()
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return DeadlineExceededError()
        return None

    def check(self) -> None:
        """
        Raise if the context is done.

        Raises:
            ContextCancelledError: If :meth:`cancel` was called
            DeadlineExceededError: If the deadline has passed
        """
        error = self.error()
        if error is not None:
            raise error

    def sleep(self, seconds: float) -> None:
        """
        Sleep for ``seconds`` unless the context finishes first.

        The sleep is shortened to the remaining deadline. Raises the same
        errors as :meth:`check` when woken by cancellation or expiry.
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        if seconds > 0:
            self._cancelled.wait(seconds)
        self.check()


def ensure_context(ctx: Context | None) -> Context:
    """Return ``ctx`` or a fresh background context when None."""
    return ctx if ctx is not None else Context.background()


__all__ = ["Context", "ensure_context"]
