"""Synchronous Go-style defer/recover.

Usage::

    deferer = SyncDeferer()

    @deferer.wrap
    def copy(src, dst):
        f = open(src)
        deferer.defer(f.close)
        ...

A process-wide ``default_deferer`` backs the module-level ``defer``, ``wrap`` and
``recover`` helpers. Being shared, it accepts one wrapped call at a time: a second
call chain entering while the first is still running is rejected with
``NestedDefererError`` rather than queued.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from deferer._result import Err, Ok, Result
from deferer.errors import ExecutionError, NestedDefererError
from deferer.scope import DeferScope
from deferer.stack import DeferredFunction
from deferer.utils import describe_callable

P = ParamSpec("P")
R = TypeVar("R")


class SyncDeferer(DeferScope):
    """Handle for synchronous wrapped calls and their deferred functions."""

    execution_error = ExecutionError
    nested_error = NestedDefererError
    nested_message = "Nested SyncDeferers are not supported"

    def defer(self, fn: DeferredFunction) -> None:
        """Push ``fn`` onto the stack; it runs in LIFO order when the wrapped call ends."""
        self._stack.push(fn)

    def drain(self) -> None:
        """Run every pending deferred function in LIFO order.

        Meant for functions deferred outside a wrapped call; raises
        ``NestedDefererError`` while one is running.
        """
        self._check_idle("drain")
        self._stack.drain()

    def wrap(self, fn: Callable[P, R]) -> Callable[P, R | None]:
        """Wrap ``fn`` so deferred functions run when it returns or raises.

        1. Rejects the call if this handle is already running a wrapped call.
        2. Runs ``fn`` and captures any error it raises.
        3. Drains the deferred stack in LIFO order.
        4. Re-raises the captured error unless a deferred function called
           ``recover()``, in which case ``None`` is returned.
        """
        if inspect.iscoroutinefunction(fn):
            raise TypeError(
                f"{describe_callable(fn)} is a coroutine function; wrap it with AsyncDeferer"
            )

        name = describe_callable(fn)

        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | None:
            self._enter(name)
            try:
                outcome: Result
                try:
                    outcome = Ok(fn(*args, **kwargs))
                except Exception as exc:
                    outcome = Err(exc)
                except BaseException:
                    self._stack.drain()
                    raise
                self._capture(outcome)
                self._stack.drain()
                return self._settle(outcome)
            finally:
                self._exit()

        return wrapper


default_deferer = SyncDeferer()


def defer(fn: DeferredFunction) -> None:
    """Register ``fn`` on the process-wide :data:`default_deferer`."""
    default_deferer.defer(fn)


def wrap(fn: Callable[P, R]) -> Callable[P, R | None]:
    """Wrap ``fn`` with the process-wide :data:`default_deferer`."""
    return default_deferer.wrap(fn)


def recover() -> Exception | None:
    """Recover the error captured by the process-wide :data:`default_deferer`."""
    return default_deferer.recover()


__all__ = [
    "SyncDeferer",
    "default_deferer",
    "defer",
    "recover",
    "wrap",
]
