from __future__ import annotations

from enum import Enum


class Result(Enum):
    """Outcome of a completed build, ordered from best to worst."""

    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    def is_better_or_equal_to(self, other: Result) -> bool:
        return self.value <= other.value

    def is_worse_than(self, other: Result) -> bool:
        return self.value > other.value

    def combine(self, other: Result) -> Result:
        """Return the worse of the two results."""
        return other if other.is_worse_than(self) else self


__all__ = ["Result"]
