"""
Permalinks: stable names for "the build matching some rule".

A permalink is resolved against a job's current build history on every call;
nothing is cached between calls, so a deletion or a late result change is
picked up immediately.

Only `PeepholePermalink`s maintain an on-disk link in the builds directory.
`lastBuild` is declared for completeness but has no link.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from build_symlink.jobs.result import Result

if TYPE_CHECKING:
    from build_symlink.jobs.models import Build, Job

NO_BUILD = -1


class Permalink(ABC):
    def __init__(self, id: str, display_name: str) -> None:
        self.id = id
        self.display_name = display_name

    @abstractmethod
    def resolve(self, job: Job) -> Optional[Build]:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


class _LastBuild(Permalink):
    def resolve(self, job: Job) -> Optional[Build]:
        return job.last_build


class PeepholePermalink(Permalink):
    """Permalink selecting the newest build that satisfies `apply`."""

    def __init__(
        self, id: str, display_name: str, predicate: Callable[[Build], bool]
    ) -> None:
        super().__init__(id, display_name)
        self._predicate = predicate

    def apply(self, build: Build) -> bool:
        return self._predicate(build)

    def resolve(self, job: Job) -> Optional[Build]:
        for build in job.builds:
            if self.apply(build):
                return build
        return None


def _completed_with(check: Callable[[Result], bool]) -> Callable[[Build], bool]:
    def predicate(build: Build) -> bool:
        return (
            not build.is_building and build.result is not None and check(build.result)
        )

    return predicate


LAST_BUILD = _LastBuild("lastBuild", "Last build")
LAST_STABLE_BUILD = PeepholePermalink(
    "lastStableBuild", "Last stable build", _completed_with(lambda r: r is Result.SUCCESS)
)
LAST_SUCCESSFUL_BUILD = PeepholePermalink(
    "lastSuccessfulBuild",
    "Last successful build",
    _completed_with(lambda r: r.is_better_or_equal_to(Result.UNSTABLE)),
)
LAST_FAILED_BUILD = PeepholePermalink(
    "lastFailedBuild", "Last failed build", _completed_with(lambda r: r is Result.FAILURE)
)
LAST_UNSTABLE_BUILD = PeepholePermalink(
    "lastUnstableBuild",
    "Last unstable build",
    _completed_with(lambda r: r is Result.UNSTABLE),
)
LAST_UNSUCCESSFUL_BUILD = PeepholePermalink(
    "lastUnsuccessfulBuild",
    "Last unsuccessful build",
    _completed_with(lambda r: r is not Result.SUCCESS),
)
LAST_COMPLETED_BUILD = PeepholePermalink(
    "lastCompletedBuild", "Last completed build", _completed_with(lambda r: True)
)

BUILTIN_PERMALINKS: tuple[Permalink, ...] = (
    LAST_BUILD,
    LAST_STABLE_BUILD,
    LAST_SUCCESSFUL_BUILD,
    LAST_FAILED_BUILD,
    LAST_UNSTABLE_BUILD,
    LAST_UNSUCCESSFUL_BUILD,
    LAST_COMPLETED_BUILD,
)


def list_permalinks(job: Job) -> Sequence[Permalink]:
    """Permalinks declared by `job`, in declaration order."""
    return tuple(job.permalinks)


def peephole_permalinks(job: Job) -> list[PeepholePermalink]:
    """The subset of `job`'s permalinks that maintain an on-disk link."""
    return [p for p in list_permalinks(job) if isinstance(p, PeepholePermalink)]


def resolve(permalink: Permalink, job: Job) -> Optional[Build]:
    return permalink.resolve(job)


def resolve_number(permalink: Permalink, job: Job) -> int:
    """Build number `permalink` resolves to, or -1 if no build qualifies."""
    build = permalink.resolve(job)
    return build.number if build is not None else NO_BUILD


__all__ = [
    "NO_BUILD",
    "Permalink",
    "PeepholePermalink",
    "LAST_BUILD",
    "LAST_STABLE_BUILD",
    "LAST_SUCCESSFUL_BUILD",
    "LAST_FAILED_BUILD",
    "LAST_UNSTABLE_BUILD",
    "LAST_UNSUCCESSFUL_BUILD",
    "LAST_COMPLETED_BUILD",
    "BUILTIN_PERMALINKS",
    "list_permalinks",
    "peephole_permalinks",
    "resolve",
    "resolve_number",
]
