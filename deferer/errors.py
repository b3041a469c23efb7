"""Errors raised by the defer/recover runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deferer.utils import Origin


class DeferError(Exception):
    """Base class for every error raised by deferer."""


class ExecutionError(DeferError):
    """Raised when a deferred function fails while the stack is drained."""

    def __init__(self, message: str, origin: Origin | None = None) -> None:
        self.origin = origin
        super().__init__(message)


class NestedDefererError(DeferError):
    """Raised when a wrapped call starts while another one is running on the same deferer."""


class AsyncDeferError(DeferError):
    """Base class for errors raised by :class:`~deferer.async_deferer.AsyncDeferer`."""


class AsyncExecutionError(AsyncDeferError, ExecutionError):
    """Async counterpart of :class:`ExecutionError`."""


class AsyncNestedDefererError(AsyncDeferError, NestedDefererError):
    """Async counterpart of :class:`NestedDefererError`."""


__all__ = [
    "AsyncDeferError",
    "AsyncExecutionError",
    "AsyncNestedDefererError",
    "DeferError",
    "ExecutionError",
    "NestedDefererError",
]
