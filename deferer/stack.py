"""LIFO stack of deferred functions.

``DeferStack`` only stores and runs cleanup callables. Deciding when to drain and
what to do with the wrapped body's error belongs to the deferer handles built on
top of it.

Drain semantics:
- Functions run in reverse order of registration, each one at most once
- The first failing function stops the drain; every function still below it is
  discarded without running
- ``Exception`` failures are re-raised as ``ExecutionError`` chained to the
  original error, other ``BaseException`` subclasses propagate unchanged
- ``drain`` runs plain callables only; a function returning an awaitable fails the
  drain, ``adrain`` awaits it
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from deferer.errors import ExecutionError
from deferer.utils import Origin, capture_origin, describe_callable

logger = logger.bind(component="defer_stack")

DeferredFunction = Callable[[], Any]
AsyncDeferredFunction = Callable[[], Any | Awaitable[Any]]


def _close_awaitable(awaitable: Any) -> None:
    close = getattr(awaitable, "close", None)
    if callable(close):
        close()


@dataclass(frozen=True)
class DeferredCall:
    """A registered cleanup function and the place it was registered from."""

    fn: AsyncDeferredFunction
    origin: Origin | None = None

    def __str__(self) -> str:
        name = describe_callable(self.fn)
        if self.origin is None:
            return name
        return f"{name} (deferred at {self.origin})"


class DeferStack:
    """Ordered collection of pending deferred functions."""

    error_class: type[ExecutionError] = ExecutionError

    def __init__(self, error_class: type[ExecutionError] | None = None) -> None:
        self._calls: list[DeferredCall] = []
        if error_class is not None:
            self.error_class = error_class

    def __len__(self) -> int:
        return len(self._calls)

    def __repr__(self) -> str:
        return f"DeferStack(pending={len(self._calls)})"

    def push(self, fn: AsyncDeferredFunction) -> None:
        """Register ``fn`` to run when the stack is drained."""
        self._calls.append(DeferredCall(fn=fn, origin=capture_origin()))

    def clear(self) -> int:
        """Discard every pending function without running it."""
        dropped = len(self._calls)
        self._calls.clear()
        return dropped

    def _abandon(self, failed: DeferredCall) -> None:
        dropped = self.clear()
        if dropped:
            logger.warning(
                "Abandoning {} deferred function(s) after failure in {}", dropped, failed
            )

    def _execution_error(self, call: DeferredCall, err: Exception) -> ExecutionError:
        return self.error_class(f"Error in deferred function: {err}", origin=call.origin)

    def drain(self) -> None:
        """Run every pending function in LIFO order."""
        while self._calls:
            call = self._calls.pop()
            logger.debug("Running deferred function {}", call)
            try:
                result = call.fn()
                if inspect.isawaitable(result):
                    _close_awaitable(result)
                    raise TypeError(
                        f"{describe_callable(call.fn)} returned an awaitable; "
                        "defer it on an AsyncDeferer"
                    )
            except Exception as err:
                self._abandon(call)
                raise self._execution_error(call, err) from err
            except BaseException:
                self._abandon(call)
                raise

    async def adrain(self) -> None:
        """Run every pending function in LIFO order, awaiting awaitable results.

        Each function finishes, including any awaiting it does, before the next
        one is popped.
        """
        while self._calls:
            call = self._calls.pop()
            logger.debug("Running deferred function {}", call)
            try:
                result = call.fn()
                if inspect.isawaitable(result):
                    await result
            except Exception as err:
                self._abandon(call)
                raise self._execution_error(call, err) from err
            except BaseException:
                self._abandon(call)
                raise


__all__ = [
    "AsyncDeferredFunction",
    "DeferStack",
    "DeferredCall",
    "DeferredFunction",
]
