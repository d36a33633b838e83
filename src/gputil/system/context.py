"""
Cancellable query contexts.

A QueryContext is handed to every query and decides how long the caller is
willing to wait for the diagnostics tool. A context ends when it is
cancelled, when its deadline passes, or when its parent ends.
"""

import threading
import time
from typing import Optional

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"


class QueryContext:
    """
    Cancellation token with an optional deadline.

    Contexts are safe to cancel from any thread. Use the constructors
    `background()`, `with_cancel()` and `with_timeout()` rather than
    instantiating directly.
    """

    def __init__(
        self,
        parent: Optional["QueryContext"] = None,
        deadline: Optional[float] = None,
    ):
        self.parent = parent
        # Absolute time.monotonic() value, or None for no deadline.
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "QueryContext":
        """Return a context that never ends unless cancelled."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Optional["QueryContext"] = None) -> "QueryContext":
        """Return a context that ends when cancelled or when parent ends."""
        return cls(parent=parent)

    @classmethod
    def with_timeout(
        cls, timeout: float, parent: Optional["QueryContext"] = None
    ) -> "QueryContext":
        """
        Return a context that ends `timeout` seconds from now.

        A parent with an earlier deadline keeps its earlier deadline.
        """
        deadline = time.monotonic() + timeout
        if parent is not None and parent.effective_deadline() is not None:
            deadline = min(deadline, parent.effective_deadline())
        return cls(parent=parent, deadline=deadline)

    def cancel(self) -> None:
        """End the context. Waiting queries stop and kill their process."""
        self._cancelled.set()

    def effective_deadline(self) -> Optional[float]:
        """The earliest deadline along the parent chain, if any."""
        deadlines = []
        ctx: Optional[QueryContext] = self
        while ctx is not None:
            if ctx.deadline is not None:
                deadlines.append(ctx.deadline)
            ctx = ctx.parent
        return min(deadlines) if deadlines else None

    def err(self) -> Optional[str]:
        """
        Why the context ended, or None while it is still live.

        Explicit cancellation takes precedence over an expired deadline.
        """
        ctx: Optional[QueryContext] = self
        while ctx is not None:
            if ctx._cancelled.is_set():
                return CANCELED
            ctx = ctx.parent
        deadline = self.effective_deadline()
        if deadline is not None and time.monotonic() >= deadline:
            return DEADLINE_EXCEEDED
        return None

    def done(self) -> bool:
        return self.err() is not None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), None without one."""
        deadline = self.effective_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the context ends or `timeout` elapses.

        Returns:
            True if the context ended.
        """
        end = None if timeout is None else time.monotonic() + timeout
        while not self.done():
            slices = [0.05]
            if end is not None:
                left = end - time.monotonic()
                if left <= 0:
                    return False
                slices.append(left)
            remaining = self.remaining()
            if remaining is not None:
                slices.append(remaining)
            self._cancelled.wait(min(slices))
        return True

    def __repr__(self) -> str:
        return f"QueryContext(err={self.err()!r}, remaining={self.remaining()!r})"
