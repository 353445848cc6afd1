from __future__ import annotations

from pathlib import Path

import pytest

from build_symlink.bootstrap import job_from_config, register_listeners_from_config
from build_symlink.config.config import ConfigError, load_config
from build_symlink.listeners.legacy_links import LegacyLinkSynchronizer
from build_symlink.listeners.run_listener import ListenerRegistry


def test_registers_synchronizer_with_configured_legacy_links() -> None:
    cfg = load_config(
        overrides={"build_symlink": {"legacy_links": {"lastGood": "lastStableBuild"}}}
    )
    registry = ListenerRegistry()

    sync = register_listeners_from_config(registry, cfg)

    assert isinstance(sync, LegacyLinkSynchronizer)
    assert list(registry) == [sync]
    assert sync.legacy_links == {
        "lastSuccessful": "lastSuccessfulBuild",
        "lastStable": "lastStableBuild",
        "lastGood": "lastStableBuild",
    }


def test_invalid_config_is_rejected_before_registration() -> None:
    cfg = load_config(overrides={"build_symlink": {"builds_dir": "builds"}})
    registry = ListenerRegistry()

    with pytest.raises(ConfigError):
        register_listeners_from_config(registry, cfg)
    assert len(registry) == 0


def test_job_from_config_uses_configured_template(tmp_path: Path) -> None:
    cfg = load_config(
        overrides={"build_symlink": {"builds_dir": "/var/builds/${ITEM_FULL_NAME}"}}
    )
    job = job_from_config("d/p", tmp_path / "p", cfg)

    assert job.builds_dir == Path("/var/builds/d/p")
