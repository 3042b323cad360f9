"""Cancellation and deadline tokens passed to every backend lookup.

A :class:`Context` is cheap to create and forms a tree: cancelling a parent
cancels every context derived from it. Backends are expected to call
:meth:`Context.check` before doing any I/O; the decoder does the same before
each lookup so a done context never reaches the backend.
"""
from __future__ import annotations

import threading
import time
from typing import Callable

from kvmarshal.exceptions import ContextCancelledError, ContextError, DeadlineExceededError

CancelFunc = Callable[[], None]


class Context:
    """Cancellation token with an optional monotonic deadline."""

    __slots__ = ("_parent", "_cancelled", "_deadline")

    def __init__(self, parent: "Context | None" = None, *, deadline: float | None = None) -> None:
        self._parent = parent
        self._cancelled = threading.Event()
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    # Constructors -----------------------------------------------------
    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: "Context | None" = None) -> tuple["Context", CancelFunc]:
        ctx = cls(parent)
        return ctx, ctx._cancel

    @classmethod
    def with_timeout(cls, parent: "Context | None", seconds: float) -> tuple["Context", CancelFunc]:
        ctx = cls(parent, deadline=time.monotonic() + seconds)
        return ctx, ctx._cancel

    # State ------------------------------------------------------------
    @property
    def deadline(self) -> float | None:
        return self._deadline

    def _cancel(self) -> None:
        self._cancelled.set()

    def err(self) -> ContextError | None:
        """Return why the context is done, or ``None`` while it is live."""
        if self._cancelled.is_set():
            return ContextCancelledError()
        if self._parent is not None:
            parent_err = self._parent.err()
            if parent_err is not None:
                return parent_err
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None

    @property
    def done(self) -> bool:
        return self.err() is not None

    def check(self) -> None:
        err = self.err()
        if err is not None:
            raise err

    def __repr__(self) -> str:
        state = "done" if self.done else "live"
        return f"<Context {state} deadline={self._deadline!r}>"


__all__ = ["CancelFunc", "Context"]
