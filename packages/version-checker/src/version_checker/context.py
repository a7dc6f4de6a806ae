"""Execution context passed to every lookup."""

from __future__ import annotations

import threading
import time
import weakref
from dataclasses import dataclass, field

from version_checker.core.exceptions import (
    ContextCancelledException,
    DeadlineExceededException,
)


@dataclass(eq=False)
class CheckContext:
    """Cancellation scope for a single reconcile or a long-running loop.

    Attributes:
        cancel_event: Threading event that is set when cancellation is requested.
                      Set on this context and on every context derived from it
                      when cancel() is called; never on its parent.
        deadline: Optional absolute ``time.monotonic()`` value after which the
                  context is considered expired.
    """

    cancel_event: threading.Event = field(default_factory=threading.Event)
    deadline: float | None = None
    _children: weakref.WeakSet = field(default_factory=weakref.WeakSet, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def cancel(self) -> None:
        """Request cancellation of this context and all derived contexts."""
        with self._lock:
            self.cancel_event.set()
            children = list(self._children)
        for child in children:
            child.cancel()

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self.cancel_event.is_set()

    @property
    def is_expired(self) -> bool:
        """Check if the deadline has passed."""
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_done(self) -> None:
        """Raise if the context was cancelled or its deadline passed."""
        if self.is_cancelled:
            raise ContextCancelledException("context canceled")
        if self.is_expired:
            raise DeadlineExceededException("context deadline exceeded")

    def with_timeout(self, seconds: float) -> CheckContext:
        """Derive a child context with a tighter deadline.

        Cancelling the parent cancels the child; cancelling the child leaves
        the parent running.
        """
        deadline = time.monotonic() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        child = CheckContext(deadline=deadline)
        with self._lock:
            if self.cancel_event.is_set():
                child.cancel_event.set()
            else:
                self._children.add(child)
        return child

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; True if the context ended meanwhile."""
        remaining = self.remaining()
        if remaining is not None and remaining < timeout:
            self.cancel_event.wait(remaining)
            return True
        return self.cancel_event.wait(timeout)


def background() -> CheckContext:
    """Return a fresh context that is never cancelled on its own."""
    return CheckContext()
