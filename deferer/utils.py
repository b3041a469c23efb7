"""
Utility functions for the deferer library.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any

# Environment variable to control debug logging
DEBUG_DEFERS = os.environ.get("DEFERER_DEBUG", "").lower() in ("1", "true", "yes")


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep


def _is_deferer_internal(path: str) -> bool:
    return os.path.abspath(path).startswith(_PACKAGE_DIR)


@dataclass(frozen=True)
class Origin:
    """Source location where a deferred function was registered."""

    filename: str
    line: int
    function: str

    def __str__(self) -> str:
        return f"{self.filename}:{self.line} in {self.function}"


def capture_origin(skip_frames: int = 2) -> Origin | None:
    """
    Capture the caller's source location.

    Args:
        skip_frames: Number of frames to skip (default 2 to skip this function and caller)

    Frames inside the deferer package itself are skipped as well, so bound
    helpers such as the module-level ``defer`` report the user's call site.
    """
    try:
        frame = sys._getframe(skip_frames)
    except ValueError:
        return None

    while frame is not None and _is_deferer_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None

    return Origin(
        filename=frame.f_code.co_filename,
        line=frame.f_lineno,
        function=frame.f_code.co_name,
    )


def describe_callable(fn: Any) -> str:
    """Return a short human readable name for ``fn`` used in log records."""
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if name is None:
        return repr(fn)
    module = getattr(fn, "__module__", None)
    if module:
        return f"{module}.{name}"
    return name


__all__ = ["DEBUG_DEFERS", "Origin", "capture_origin", "describe_callable"]
