from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from _pytest.monkeypatch import MonkeyPatch  # type: ignore[import-not-found]

from build_symlink.config.config import BUILDS_DIR_ENV, DEFAULT_BUILDS_DIR
from build_symlink.jobs.engine import BuildEngine
from build_symlink.jobs.models import Job
from build_symlink.listeners.legacy_links import LegacyLinkSynchronizer
from build_symlink.listeners.run_listener import ListenerRegistry


@pytest.fixture(autouse=True)
def _no_builds_dir_override(monkeypatch: MonkeyPatch) -> None:
    """Keep a `BUILD_SYMLINK_BUILDS_DIR` from the outer environment out of tests."""
    monkeypatch.delenv(BUILDS_DIR_ENV, raising=False)


@pytest.fixture
def registry() -> ListenerRegistry:
    return ListenerRegistry()


@pytest.fixture
def synchronizer(registry: ListenerRegistry) -> LegacyLinkSynchronizer:
    sync = LegacyLinkSynchronizer()
    registry.register(sync)
    return sync


@pytest.fixture
def engine(
    registry: ListenerRegistry, synchronizer: LegacyLinkSynchronizer
) -> BuildEngine:
    return BuildEngine(registry)


@pytest.fixture
def make_job(tmp_path: Path) -> Callable[..., Job]:
    """
    Provide a function creating a job rooted at <tmp>/jobs/<full_name>.

    Usage in tests:
        job = make_job("p")
        job = make_job("d/p", builds_dir_template="/ext/${ITEM_FULL_NAME}")
    """

    def _make(full_name: str = "p", builds_dir_template: Optional[str] = None) -> Job:
        return Job(
            full_name=full_name,
            root_dir=tmp_path / "jobs" / full_name,
            builds_dir_template=builds_dir_template or DEFAULT_BUILDS_DIR,
        )

    return _make


@pytest.fixture
def external_builds_dir(tmp_path: Path, monkeypatch: MonkeyPatch) -> str:
    """Relocate builds to <tmp>/ext/${ITEM_FULL_NAME} through the environment."""
    template = str(tmp_path / "ext") + "/${ITEM_FULL_NAME}"
    monkeypatch.setenv(BUILDS_DIR_ENV, template)
    return template
