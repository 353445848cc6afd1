"""
Config views for build-symlink.

- load_config(...):          packaged defaults + optional YAML file + overrides
- symlink_view(cfg):         read-only view rooted at `build_symlink`
- builds_dir_template(cfg):  raw builds-directory template (env var wins)
- legacy_links(cfg):         legacy link name -> permalink id
"""

from __future__ import annotations

import os
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, cast

from omegaconf import DictConfig, OmegaConf

ROOT_KEY = "build_symlink"
BUILDS_DIR_ENV = "BUILD_SYMLINK_BUILDS_DIR"
DEFAULT_BUILDS_DIR = "${ITEM_ROOTDIR}/builds"


class ConfigError(RuntimeError):
    pass


def _default_yaml() -> Path:
    return Path(str(pkg_files("build_symlink.config") / "default.yaml"))


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> DictConfig:
    """Compose the configuration tree.

    Layers, later ones winning:
      1) packaged `default.yaml`
      2) the YAML file at `path` (if given)
      3) `overrides` (if given)

    The result is read-only. Nothing is interpolated here; the builds
    directory template in particular is expanded per job.
    """
    layers = [OmegaConf.load(_default_yaml())]
    if path is not None:
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(OmegaConf.create(dict(overrides)))
    cfg = cast(DictConfig, OmegaConf.merge(*layers))
    OmegaConf.set_readonly(cfg, True)
    return cfg


def make_view(cfg: DictConfig, key: str) -> DictConfig:
    """Read-only copy of the subtree at dotted `key`.

    Raises:
        KeyError: If the subtree does not exist.
    """
    node = OmegaConf.select(cfg, key, default=None)
    if not isinstance(node, DictConfig):
        raise KeyError(key)
    view = OmegaConf.create(OmegaConf.to_container(node, resolve=False))
    OmegaConf.set_readonly(view, True)
    return view


def symlink_view(cfg: DictConfig) -> DictConfig:
    """Read-only view rooted at `build_symlink`."""
    return make_view(cfg, ROOT_KEY)


def builds_dir_template(cfg: DictConfig) -> str:
    """Return the builds directory template, e.g. ``${ITEM_ROOTDIR}/builds``.

    `BUILD_SYMLINK_BUILDS_DIR` overrides the configured value. The template is
    read unresolved so OmegaConf never tries to interpolate job placeholders.
    """
    env = os.environ.get(BUILDS_DIR_ENV)
    if env:
        return env
    raw = cast(dict, OmegaConf.to_container(symlink_view(cfg), resolve=False))
    value = raw.get("builds_dir")
    return str(value) if value else DEFAULT_BUILDS_DIR


def legacy_links(cfg: DictConfig) -> dict[str, str]:
    """Legacy link name -> permalink id, in configured order."""
    node = symlink_view(cfg).legacy_links
    return {str(k): str(v) for k, v in node.items()}


def _must_have(d: DictConfig, path: str, keys: Iterable[str]) -> None:
    missing = [k for k in keys if k not in d]
    if missing:
        raise ConfigError(f"Missing keys at {path}: {', '.join(missing)}")


def ensure_symlink_config(cfg: DictConfig) -> None:
    try:
        view = symlink_view(cfg)
    except KeyError as e:
        raise ConfigError(f"Missing config section: {ROOT_KEY}") from e
    _must_have(view, ROOT_KEY, ("builds_dir", "legacy_links"))

    template = builds_dir_template(cfg)
    if not (template.startswith("${ITEM_ROOTDIR}") or Path(template).is_absolute()):
        raise ConfigError(
            f"builds_dir must start with ${{ITEM_ROOTDIR}} or be absolute: {template}"
        )
    if not isinstance(view.legacy_links, DictConfig):
        raise ConfigError(f"{ROOT_KEY}.legacy_links must be a mapping")


__all__ = [
    "BUILDS_DIR_ENV",
    "DEFAULT_BUILDS_DIR",
    "ConfigError",
    "load_config",
    "make_view",
    "symlink_view",
    "builds_dir_template",
    "legacy_links",
    "ensure_symlink_config",
]
