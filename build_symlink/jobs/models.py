"""
In-memory job and build records.

Layout on disk (co-located builds directory):
    <root_dir>/
      builds/
        <number>/
          log              # console output of the build
        <permalinkId> -> <number> | -1
      <legacyName> -> builds/<permalinkId>

Notes:
- Build numbers are strictly increasing and never reused, even after deletion.
- `Job.builds_dir` is recomputed from the template on every access, since the
  template comes from external configuration and may change between builds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from build_symlink.config.config import DEFAULT_BUILDS_DIR
from build_symlink.jobs.layout import BuildsLayout, detect_layout, expand_builds_dir
from build_symlink.jobs.result import Result
from build_symlink.permalinks.permalinks import BUILTIN_PERMALINKS, Permalink


class BuildState(Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DELETED = "deleted"


@dataclass(eq=False)
class Build:
    job: Job
    number: int
    state: BuildState = BuildState.IN_PROGRESS
    result: Optional[Result] = None

    @property
    def is_building(self) -> bool:
        return self.state is BuildState.IN_PROGRESS

    @property
    def root_dir(self) -> Path:
        return self.job.builds_dir / str(self.number)

    @property
    def log_file(self) -> Path:
        return self.root_dir / "log"

    def finish(self, result: Result) -> None:
        self.result = result
        self.state = BuildState.COMPLETED

    def __repr__(self) -> str:
        return f"{self.job.full_name} #{self.number}"


@dataclass(eq=False)
class Job:
    """A named, ordered sequence of builds."""

    full_name: str
    root_dir: Path
    builds_dir_template: str = DEFAULT_BUILDS_DIR
    permalinks: Sequence[Permalink] = BUILTIN_PERMALINKS
    _builds: list[Build] = field(default_factory=list, init=False, repr=False)
    _next_number: int = field(default=1, init=False, repr=False)

    @property
    def builds_dir(self) -> Path:
        return expand_builds_dir(
            self.builds_dir_template, root_dir=self.root_dir, full_name=self.full_name
        )

    @property
    def layout(self) -> BuildsLayout:
        return detect_layout(self.root_dir, self.builds_dir)

    @property
    def builds(self) -> list[Build]:
        """Builds that have not been deleted, newest first."""
        return list(reversed(self._builds))

    @property
    def last_build(self) -> Optional[Build]:
        return self._builds[-1] if self._builds else None

    @property
    def next_build_number(self) -> int:
        return self._next_number

    def get_build_by_number(self, number: int) -> Optional[Build]:
        for b in self._builds:
            if b.number == number:
                return b
        return None

    def new_build(self) -> Build:
        """Allocate the next build and create its directory."""
        build = Build(job=self, number=self._next_number)
        self._next_number += 1
        self.root_dir.mkdir(parents=True, exist_ok=True)
        build.root_dir.mkdir(parents=True, exist_ok=True)
        self._builds.append(build)
        return build

    def remove_build(self, build: Build) -> None:
        if build in self._builds:
            self._builds.remove(build)
        build.state = BuildState.DELETED


__all__ = ["Build", "BuildState", "Job"]
