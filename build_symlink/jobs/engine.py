"""
Minimal build engine that drives the lifecycle events.

A run:
  1) allocates the next build and creates its directory
  2) opens `<build>/log` as the build's console (its `TaskListener`)
  3) fires *started*
  4) runs the builder, then each publisher; results combine to the worst one
  5) marks the build completed and fires *completed*

Deleting a build removes it from its job and from disk, then fires *deleted*.
"""

from __future__ import annotations

import logging
import shutil
from typing import Callable, Iterable, Optional

from build_symlink.common.task_listener import TaskListener
from build_symlink.jobs.models import Build, Job
from build_symlink.jobs.result import Result
from build_symlink.listeners.run_listener import ListenerRegistry

logger = logging.getLogger(__name__)

# A step returns None when it has nothing to say about the result.
Step = Callable[[Build, TaskListener], Optional[Result]]


def echo_build_number(build: Build, listener: TaskListener) -> Optional[Result]:
    listener.print(f"Build #{build.number}")
    return None


class BuildEngine:
    def __init__(self, registry: ListenerRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    def run(
        self,
        job: Job,
        *,
        builder: Optional[Step] = None,
        publishers: Iterable[Step] = (),
    ) -> Build:
        build = job.new_build()
        with build.log_file.open("w", encoding="utf-8") as stream:
            listener = TaskListener(stream)
            self._registry.fire_started(build, listener)

            result = Result.SUCCESS
            for step in (builder or echo_build_number, *publishers):
                result = result.combine(self._run_step(step, build, listener))

            build.finish(result)
            listener.print(f"Finished: {result.name}")
            self._registry.fire_completed(build, listener)
        return build

    def delete(self, build: Build) -> None:
        build.job.remove_build(build)
        try:
            shutil.rmtree(build.root_dir)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("failed to remove %s", build.root_dir, exc_info=True)
        self._registry.fire_deleted(build)

    @staticmethod
    def _run_step(step: Step, build: Build, listener: TaskListener) -> Result:
        try:
            return step(build, listener) or Result.SUCCESS
        except Exception as e:
            listener.error(f"{getattr(step, '__name__', step)!s} failed: {e}")
            return Result.FAILURE


__all__ = ["BuildEngine", "Step", "echo_build_number"]
