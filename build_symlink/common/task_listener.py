"""
Write-only diagnostic sinks handed to lifecycle callbacks.

While a build runs its sink is the build's console log; when no console exists
(e.g. a build being deleted) callers pass `NULL_LISTENER`, which discards
everything.
"""

from __future__ import annotations

import io
from typing import Optional, TextIO


class _Discard(io.TextIOBase):
    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        return len(s)


class TaskListener:
    """Thin wrapper around a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream: TextIO = stream if stream is not None else _Discard()

    def get_logger(self) -> TextIO:
        return self._stream

    def print(self, message: str) -> None:
        self._stream.write(message + "\n")
        self._stream.flush()

    def error(self, message: str) -> None:
        self.print(f"ERROR: {message}")


NULL_LISTENER = TaskListener()

__all__ = ["TaskListener", "NULL_LISTENER"]
