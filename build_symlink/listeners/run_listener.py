"""
Build lifecycle listeners and the registry that dispatches to them.

Handlers are ordered by an ordinal fixed at registration time: higher ordinals
run first, ties run in registration order. Resolver-side handlers sit at the
default ordinal 0; the legacy link synchronizer sits at -100 so that it only
reconciles once everything that influences permalink resolution has run.

A handler that raises is logged and skipped; the remaining handlers still run
and no exception reaches the caller of `fire_*`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Optional

from build_symlink.common.task_listener import TaskListener

if TYPE_CHECKING:
    from build_symlink.jobs.models import Build

logger = logging.getLogger(__name__)


class RunListener:
    """Base class for lifecycle handlers; every callback defaults to a no-op."""

    ordinal: int = 0

    def on_started(self, build: Build, listener: TaskListener) -> None:
        pass

    def on_completed(self, build: Build, listener: TaskListener) -> None:
        pass

    def on_deleted(self, build: Build) -> None:
        pass


class ListenerRegistry:
    def __init__(self) -> None:
        self._entries: list[tuple[int, int, RunListener]] = []
        self._seq = 0

    def register(
        self, run_listener: RunListener, *, ordinal: Optional[int] = None
    ) -> RunListener:
        """Add `run_listener`; `ordinal` defaults to the listener's class attribute."""
        rank = run_listener.ordinal if ordinal is None else ordinal
        self._entries.append((rank, self._seq, run_listener))
        self._seq += 1
        return run_listener

    def unregister(self, run_listener: RunListener) -> None:
        self._entries = [e for e in self._entries if e[2] is not run_listener]

    def __iter__(self) -> Iterator[RunListener]:
        for _, _, run_listener in sorted(self._entries, key=lambda e: (-e[0], e[1])):
            yield run_listener

    def __len__(self) -> int:
        return len(self._entries)

    def fire_started(self, build: Build, listener: TaskListener) -> None:
        for run_listener in self:
            try:
                run_listener.on_started(build, listener)
            except Exception:
                logger.warning(
                    "%r failed on_started for %r", run_listener, build, exc_info=True
                )

    def fire_completed(self, build: Build, listener: TaskListener) -> None:
        for run_listener in self:
            try:
                run_listener.on_completed(build, listener)
            except Exception:
                logger.warning(
                    "%r failed on_completed for %r", run_listener, build, exc_info=True
                )

    def fire_deleted(self, build: Build) -> None:
        for run_listener in self:
            try:
                run_listener.on_deleted(build)
            except Exception:
                logger.warning(
                    "%r failed on_deleted for %r", run_listener, build, exc_info=True
                )


__all__ = ["RunListener", "ListenerRegistry"]
