from __future__ import annotations

import errno
import io
import os
from pathlib import Path

import pytest

from build_symlink.common.symlinks import (
    create_symlink,
    resolve_all,
    resolve_symlink,
    resolve_symlink_to_path,
)
from build_symlink.common.task_listener import NULL_LISTENER, TaskListener


def test_create_and_replace_symlink(tmp_path: Path) -> None:
    (tmp_path / "1").mkdir()
    (tmp_path / "2").mkdir()

    assert create_symlink(tmp_path, "1", "lastStableBuild", NULL_LISTENER)
    link = tmp_path / "lastStableBuild"
    assert link.is_symlink()
    assert os.readlink(link) == "1"

    assert create_symlink(tmp_path, "2", "lastStableBuild", NULL_LISTENER)
    assert os.readlink(link) == "2"
    # no temporary links left behind
    assert sorted(p.name for p in tmp_path.iterdir()) == ["1", "2", "lastStableBuild"]


def test_dangling_target_is_allowed(tmp_path: Path) -> None:
    create_symlink(tmp_path, "-1", "lastFailedBuild", NULL_LISTENER)
    link = tmp_path / "lastFailedBuild"
    assert link.is_symlink()
    assert not link.exists()
    assert resolve_symlink(link) == "-1"


def test_real_directory_is_not_replaced(tmp_path: Path) -> None:
    (tmp_path / "lastStableBuild").mkdir()
    (tmp_path / "lastStableBuild" / "keep").write_text("x", encoding="utf-8")
    out = io.StringIO()

    assert not create_symlink(tmp_path, "1", "lastStableBuild", TaskListener(out))

    assert (tmp_path / "lastStableBuild" / "keep").exists()
    assert not (tmp_path / "lastStableBuild").is_symlink()
    assert "ERROR: Failed to create symlink" in out.getvalue()
    assert [p.name for p in tmp_path.iterdir()] == ["lastStableBuild"]


def test_os_failure_is_reported_not_raised(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def _boom(_target: str, _link: Path) -> None:  # noqa: ARG001
        raise PermissionError(errno.EPERM, "no symlink perms")

    monkeypatch.setattr(os, "symlink", _boom, raising=True)
    out = io.StringIO()

    assert not create_symlink(tmp_path, "1", "lastStableBuild", TaskListener(out))

    assert not (tmp_path / "lastStableBuild").is_symlink()
    assert "no symlink perms" in out.getvalue()
    assert "failed to create symlink" in caplog.text


def test_interruption_propagates(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _interrupted(_target: str, _link: Path) -> None:  # noqa: ARG001
        raise InterruptedError(errno.EINTR, "interrupted")

    monkeypatch.setattr(os, "symlink", _interrupted, raising=True)

    with pytest.raises(InterruptedError):
        create_symlink(tmp_path, "1", "lastStableBuild", NULL_LISTENER)


def test_resolve_symlink_missing_and_regular_file(tmp_path: Path) -> None:
    assert resolve_symlink(tmp_path / "nope") is None
    (tmp_path / "plain").write_text("1", encoding="utf-8")
    assert resolve_symlink(tmp_path / "plain") is None


def test_resolve_symlink_surfaces_read_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _readlink_raises(_path: Path) -> str:  # noqa: ARG001
        raise OSError(errno.EIO, "simulated readlink failure")

    monkeypatch.setattr(os, "readlink", _readlink_raises, raising=True)
    with pytest.raises(OSError):
        resolve_symlink(tmp_path / "lastStableBuild")


def test_resolve_all_follows_chain(tmp_path: Path) -> None:
    builds = tmp_path / "builds"
    (builds / "3").mkdir(parents=True)
    (builds / "lastStableBuild").symlink_to("3")
    (tmp_path / "lastStable").symlink_to("builds/lastStableBuild")

    assert resolve_symlink_to_path(tmp_path / "lastStable") == builds / "lastStableBuild"
    assert resolve_all(tmp_path / "lastStable") == builds / "3"
    assert resolve_all(builds / "3") == builds / "3"


def test_resolve_all_stops_at_missing_hop(tmp_path: Path) -> None:
    (tmp_path / "lastStable").symlink_to("builds/lastStableBuild")
    assert resolve_all(tmp_path / "lastStable") == tmp_path / "builds" / "lastStableBuild"


def test_resolve_all_detects_loops(tmp_path: Path) -> None:
    (tmp_path / "a").symlink_to("b")
    (tmp_path / "b").symlink_to("a")
    with pytest.raises(OSError):
        resolve_all(tmp_path / "a")
