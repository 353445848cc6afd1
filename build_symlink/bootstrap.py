"""
Wire build-symlink into a host's lifecycle dispatcher.

Nothing happens on import; a host calls `register_listeners_from_config` once,
after loading the config, from an explicit entry point.

Usage
-----
    from build_symlink.bootstrap import register_listeners_from_config, job_from_config
    from build_symlink.config.config import load_config
    from build_symlink.listeners.run_listener import ListenerRegistry

    cfg = load_config()
    registry = ListenerRegistry()
    register_listeners_from_config(registry, cfg)
    job = job_from_config("folder/job", Path("/var/jobs/folder/job"), cfg)
"""

from __future__ import annotations

from pathlib import Path

from omegaconf import DictConfig

from build_symlink.config.config import (
    builds_dir_template,
    ensure_symlink_config,
    legacy_links,
)
from build_symlink.jobs.models import Job
from build_symlink.listeners.legacy_links import LegacyLinkSynchronizer
from build_symlink.listeners.run_listener import ListenerRegistry


def register_listeners_from_config(
    registry: ListenerRegistry, cfg: DictConfig
) -> LegacyLinkSynchronizer:
    """Validate `cfg` and register a synchronizer for its legacy links.

    Raises:
        ConfigError: If the `build_symlink` section is missing or invalid.
    """
    ensure_symlink_config(cfg)
    sync = LegacyLinkSynchronizer(legacy_links(cfg))
    registry.register(sync)
    return sync


def job_from_config(full_name: str, root_dir: Path, cfg: DictConfig) -> Job:
    return Job(
        full_name=full_name,
        root_dir=root_dir,
        builds_dir_template=builds_dir_template(cfg),
    )
