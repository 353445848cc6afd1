"""
Keeps a job's permalink links, and the legacy links that point at them, in
step with permalink resolution.

On build start, `lastSuccessful` and `lastStable` are (re)created in the job's
root directory. They point at the permalink links in the builds directory
rather than at a build, so they are correct whatever the build's outcome.

On build completion or deletion every permalink link in the builds directory
is compared with what the permalink currently resolves to and rewritten only
where they differ. When a job has no builds left the permalink links hold
`-1`; the legacy links are left in place, dangling.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Optional

from build_symlink.common.symlinks import create_symlink, resolve_symlink
from build_symlink.common.task_listener import NULL_LISTENER, TaskListener
from build_symlink.listeners.run_listener import RunListener
from build_symlink.permalinks.permalinks import (
    LAST_STABLE_BUILD,
    LAST_SUCCESSFUL_BUILD,
    peephole_permalinks,
    resolve_number,
)

if TYPE_CHECKING:
    from build_symlink.jobs.models import Build

logger = logging.getLogger(__name__)

LEGACY_LINKS: Mapping[str, str] = {
    "lastSuccessful": LAST_SUCCESSFUL_BUILD.id,
    "lastStable": LAST_STABLE_BUILD.id,
}


class LegacyLinkSynchronizer(RunListener):
    # after resolver-side listeners at the default ordinal
    ordinal = -100

    def __init__(self, legacy_links: Optional[Mapping[str, str]] = None) -> None:
        self._legacy_links = dict(LEGACY_LINKS if legacy_links is None else legacy_links)

    @property
    def legacy_links(self) -> Mapping[str, str]:
        return dict(self._legacy_links)

    def on_started(self, build: Build, listener: TaskListener) -> None:
        for name, permalink_id in self._legacy_links.items():
            self.create_legacy_link(build, listener, name, permalink_id)

    def on_completed(self, build: Build, listener: TaskListener) -> None:
        self.refresh(build, listener)

    def on_deleted(self, build: Build) -> None:
        self.refresh(build, NULL_LISTENER)

    def create_legacy_link(
        self, build: Build, listener: TaskListener, name: str, permalink_id: str
    ) -> bool:
        """Point `<root>/<name>` at the permalink link for `permalink_id`."""
        job = build.job
        target = job.layout.legacy_target(permalink_id)
        try:
            return create_symlink(job.root_dir, target, name, listener)
        except InterruptedError:
            logger.warning(
                "interrupted while linking %s -> %s in %s",
                name,
                target,
                job.root_dir,
                exc_info=True,
            )
            return False

    def refresh(self, build: Build, listener: TaskListener) -> list[str]:
        """Reconcile every permalink link of `build`'s job.

        Returns:
            Ids of the permalinks whose link was rewritten (empty when the disk
            already agreed with resolution). A link that could not be written
            is reported to `listener` and left out.
        """
        job = build.job
        builds_dir = job.builds_dir
        if not builds_dir.is_dir():
            return []

        relinked: list[str] = []
        for pp in peephole_permalinks(job):
            permalink_file = builds_dir / pp.id
            n = str(resolve_number(pp, job))
            try:
                if n == resolve_symlink(permalink_file):
                    logger.debug(
                        "not touching up-to-date link %s -> %s in %s",
                        pp.id,
                        n,
                        builds_dir,
                    )
                    continue
            except OSError:
                logger.warning("could not read %s", permalink_file, exc_info=True)

            try:
                permalink_file.unlink(missing_ok=True)
            except OSError:
                logger.warning("failed to delete %s", permalink_file, exc_info=True)
                continue

            logger.debug("linking %s -> %s in %s", pp.id, n, builds_dir)
            try:
                if not create_symlink(builds_dir, n, pp.id, listener):
                    continue
            except InterruptedError:
                logger.warning(
                    "interrupted while linking %s -> %s in %s",
                    pp.id,
                    n,
                    builds_dir,
                    exc_info=True,
                )
                continue
            relinked.append(pp.id)
        return relinked


__all__ = ["LEGACY_LINKS", "LegacyLinkSynchronizer"]
