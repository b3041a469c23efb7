"""State shared by the sync and async deferer handles."""

from __future__ import annotations

from typing import ClassVar

from loguru import logger

from deferer._result import Err, Ok, Result
from deferer.errors import ExecutionError, NestedDefererError
from deferer.stack import AsyncDeferredFunction, DeferStack

logger = logger.bind(component="defer_scope")


class DeferScope:
    """Deferred stack, captured error and re-entrancy flag of one handle.

    Subclasses provide ``wrap``; this class owns the bookkeeping every wrapped
    invocation goes through.
    """

    execution_error: ClassVar[type[ExecutionError]] = ExecutionError
    nested_error: ClassVar[type[NestedDefererError]] = NestedDefererError
    nested_message: ClassVar[str] = "Nested deferers are not supported"

    def __init__(self) -> None:
        self._stack = DeferStack(error_class=self.execution_error)
        self._wrapped = False
        self._current_error: Exception | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(active={self._wrapped}, pending={len(self._stack)})"

    @property
    def active(self) -> bool:
        """``True`` while a wrapped call is running on this handle."""
        return self._wrapped

    @property
    def pending(self) -> int:
        """Number of deferred functions waiting to run."""
        return len(self._stack)

    def defer(self, fn: AsyncDeferredFunction) -> None:
        """Push ``fn`` onto the stack; it runs in LIFO order when the wrapped call ends."""
        self._stack.push(fn)

    def recover(self) -> Exception | None:
        """Return the captured error and clear it, or ``None`` if nothing was captured.

        Only the first call after a failure sees the error.
        """
        err = self._current_error
        if err is None:
            return None
        self._current_error = None
        logger.debug("Recovered from {!r}", err)
        return err

    def _enter(self, name: str) -> None:
        if self._wrapped:
            logger.warning("Rejected nested call to {} on {!r}", name, self)
            raise self.nested_error(self.nested_message)
        self._wrapped = True
        self._current_error = None

    def _check_idle(self, operation: str) -> None:
        if self._wrapped:
            raise self.nested_error(f"{operation}() cannot run while a wrapped call is in progress")

    def _exit(self) -> None:
        self._wrapped = False
        self._current_error = None

    def _capture(self, outcome: Result) -> None:
        if isinstance(outcome, Err):
            logger.debug("Captured {!r} from wrapped function", outcome.error)
            self._current_error = outcome.error

    def _settle(self, outcome: Result) -> object:
        """Finish an invocation once the stack has been drained."""
        if isinstance(outcome, Ok):
            return outcome.value
        if self._current_error is not None:
            raise self._current_error
        return None


__all__ = ["DeferScope"]
