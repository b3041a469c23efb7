"""Asyncio-friendly Go-style defer/recover.

State lives on each ``AsyncDeferer`` instance, so independent call chains can run
concurrently as long as each one uses its own instance::

    deferer = AsyncDeferer()

    @deferer.wrap
    async def handler(request):
        conn = await pool.acquire()
        deferer.defer(lambda: pool.release(conn))
        ...

    await handler(request)
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, ParamSpec, TypeVar

from deferer._result import Err, Ok, Result
from deferer.errors import AsyncExecutionError, AsyncNestedDefererError
from deferer.scope import DeferScope
from deferer.utils import describe_callable

P = ParamSpec("P")
R = TypeVar("R")

AsyncWrappedFunction = Callable[P, R | Awaitable[R]]


class AsyncDeferer(DeferScope):
    """Handle for async wrapped calls whose deferred functions may be coroutines."""

    execution_error = AsyncExecutionError
    nested_error = AsyncNestedDefererError
    nested_message = "Nested async defer calls are not supported"

    async def adrain(self) -> None:
        """Run every pending deferred function in LIFO order, awaiting each one.

        Meant for functions deferred outside a wrapped call; raises
        ``AsyncNestedDefererError`` while one is running.
        """
        self._check_idle("adrain")
        await self._stack.adrain()

    def wrap(
        self, fn: AsyncWrappedFunction[P, R]
    ) -> Callable[P, Coroutine[Any, Any, R | None]]:
        """Wrap ``fn`` (sync or async) so deferred functions run when it finishes.

        The returned coroutine function rejects re-entrant calls on this
        instance, awaits ``fn``, drains the deferred stack one function at a
        time, then returns ``fn``'s result, re-raises its error, or returns
        ``None`` if a deferred function recovered the error.
        """
        name = describe_callable(fn)

        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | None:
            self._enter(name)
            try:
                outcome: Result
                try:
                    result = fn(*args, **kwargs)
                    if inspect.isawaitable(result):
                        result = await result
                    outcome = Ok(result)
                except Exception as exc:
                    outcome = Err(exc)
                except BaseException:
                    await self._stack.adrain()
                    raise
                self._capture(outcome)
                await self._stack.adrain()
                return self._settle(outcome)
            finally:
                self._exit()

        return wrapper


__all__ = ["AsyncDeferer", "AsyncWrappedFunction"]
