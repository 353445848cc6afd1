"""
Helpers for creating and reading the symbolic links that make up a job's
permalinks.

A link is always replaced atomically: the new link is first created under a
temporary sibling name and then renamed over the old entry, so a reader never
observes a missing link in the middle of an update.

Typical layout:
    <job root>/
      builds/
        1/
        2/
        lastStableBuild -> 2
        lastFailedBuild -> -1
      lastStable -> builds/lastStableBuild
"""

from __future__ import annotations

import errno
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from build_symlink.common.task_listener import TaskListener

logger = logging.getLogger(__name__)

# Same bound the kernel applies before reporting ELOOP.
MAX_HOPS = 40


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.debug("could not remove temporary link %s", path)


def create_symlink(
    base_dir: Path, target: str, name: str, listener: TaskListener
) -> bool:
    """Create (or replace) `<base_dir>/<name> -> target`.

    Args:
        base_dir: Directory that holds the link.
        target: Raw link content; relative targets are resolved against `base_dir`.
        name: File name of the link.
        listener: Diagnostic sink that receives a message when creation fails.

    Returns:
        True if the link is in place, False if creation failed and was reported.

    Raises:
        InterruptedError: If the underlying system call was interrupted. The
            caller decides whether that is fatal.
    """
    link = base_dir / name
    tmp = base_dir / f".{name}.tmp-{uuid.uuid4().hex[:8]}"
    try:
        os.symlink(target, tmp)
        # Fails on a real directory, which is never replaced.
        os.replace(tmp, link)
    except InterruptedError:
        _discard(tmp)
        raise
    except OSError as e:
        _discard(tmp)
        listener.error(f"Failed to create symlink {link} -> {target}: {e}")
        logger.warning("failed to create symlink %s -> %s", link, target, exc_info=e)
        return False
    return True


def resolve_symlink(path: Path) -> Optional[str]:
    """Return the raw content of the link at `path`.

    Returns:
        The link content, or None if `path` does not exist or is not a link.

    Raises:
        OSError: For any other failure to read the link.
    """
    try:
        return os.readlink(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        if e.errno == errno.EINVAL:
            # exists, but is not a symlink
            return None
        raise


def resolve_symlink_to_path(path: Path) -> Optional[Path]:
    """Follow a single hop of the link at `path`, or None if it is not a link."""
    target = resolve_symlink(path)
    if target is None:
        return None
    return path.parent / target


def resolve_all(path: Path) -> Path:
    """Follow links from `path` until reaching something that is not a link.

    The final path need not exist: a dangling chain resolves to the first
    missing hop.
    """
    for _ in range(MAX_HOPS):
        nxt = resolve_symlink_to_path(path)
        if nxt is None:
            return path
        path = nxt
    raise OSError(errno.ELOOP, "too many levels of symbolic links", str(path))


__all__ = [
    "create_symlink",
    "resolve_symlink",
    "resolve_symlink_to_path",
    "resolve_all",
]
