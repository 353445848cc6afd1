"""
Builds-directory layout of a job.

A job keeps its builds either co-located under its root directory
(`<root>/builds`, the default) or relocated elsewhere through a template such as
`/var/builds/${ITEM_FULL_NAME}`. The layout decides how a legacy link in the
root directory addresses a permalink link in the builds directory:

    co-located:  <root>/lastStable -> builds/lastStableBuild
    relocated:   <root>/lastStable -> /var/builds/folder/job/lastStableBuild
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

ITEM_ROOTDIR = "${ITEM_ROOTDIR}"
ITEM_FULL_NAME = "${ITEM_FULL_NAME}"


@dataclass(frozen=True)
class CoLocated:
    def legacy_target(self, permalink_id: str) -> str:
        return "builds" + os.sep + permalink_id


@dataclass(frozen=True)
class Relocated:
    builds_dir: Path

    def legacy_target(self, permalink_id: str) -> str:
        return str(self.builds_dir) + os.sep + permalink_id


BuildsLayout = Union[CoLocated, Relocated]


def detect_layout(root_dir: Path, builds_dir: Path) -> BuildsLayout:
    """Classify `builds_dir` relative to the job's `root_dir`."""
    if builds_dir == root_dir / "builds":
        return CoLocated()
    return Relocated(builds_dir)


def expand_builds_dir(template: str, *, root_dir: Path, full_name: str) -> Path:
    """Expand `${ITEM_ROOTDIR}` and `${ITEM_FULL_NAME}` in a builds dir template."""
    expanded = template.replace(ITEM_ROOTDIR, str(root_dir)).replace(
        ITEM_FULL_NAME, full_name
    )
    return Path(expanded)


__all__ = [
    "BuildsLayout",
    "CoLocated",
    "Relocated",
    "detect_layout",
    "expand_builds_dir",
]
