"""
deferer - Go-style defer and recover for Python.

Wrapped functions register cleanup callables with ``defer``. They run in reverse
order of registration when the function returns or raises, and any of them can
call ``recover`` to swallow the error.

Example:
    >>> from deferer import defer, recover, wrap
    >>>
    >>> @wrap
    >>> def task():
    ...     defer(lambda: print("cleanup"))
    ...     defer(lambda: print("recovered:", recover()))
    ...     raise ValueError("boom")

Logging goes through loguru and is disabled unless ``DEFERER_DEBUG`` is set;
call ``logger.enable("deferer")`` to turn it on explicitly.
"""

from loguru import logger

from deferer.async_deferer import AsyncDeferer, AsyncWrappedFunction
from deferer.errors import (
    AsyncDeferError,
    AsyncExecutionError,
    AsyncNestedDefererError,
    DeferError,
    ExecutionError,
    NestedDefererError,
)
from deferer.stack import AsyncDeferredFunction, DeferredCall, DeferredFunction, DeferStack
from deferer.sync_deferer import SyncDeferer, default_deferer, defer, recover, wrap
from deferer.utils import DEBUG_DEFERS, Origin

if not DEBUG_DEFERS:
    logger.disable("deferer")

__version__ = "0.1.0"

__all__ = [
    "AsyncDeferError",
    "AsyncDeferer",
    "AsyncDeferredFunction",
    "AsyncExecutionError",
    "AsyncNestedDefererError",
    "AsyncWrappedFunction",
    "DeferError",
    "DeferStack",
    "DeferredCall",
    "DeferredFunction",
    "ExecutionError",
    "NestedDefererError",
    "Origin",
    "SyncDeferer",
    "default_deferer",
    "defer",
    "recover",
    "wrap",
]
