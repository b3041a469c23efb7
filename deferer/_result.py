"""Outcome of a wrapped function call, held until the deferred stack is drained."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception


Result = Union[Ok[Any], Err]

__all__ = ["Err", "Ok", "Result"]
