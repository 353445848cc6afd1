"""
Describe the permalink and legacy links of a job and render them with rich.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Optional, Sequence

from rich.console import Console
from rich.table import Table

from build_symlink.common.symlinks import resolve_all, resolve_symlink
from build_symlink.jobs.models import Job
from build_symlink.listeners.legacy_links import LEGACY_LINKS
from build_symlink.permalinks.permalinks import peephole_permalinks

LinkKind = Literal["permalink", "legacy"]


@dataclass(frozen=True)
class LinkStatus:
    name: str
    kind: LinkKind
    path: Path
    target: Optional[str]  # raw link content, None if absent or not a link
    final_path: Optional[Path]  # end of the link chain
    exists: bool  # whether `final_path` exists


def _status(name: str, kind: LinkKind, path: Path) -> LinkStatus:
    try:
        target = resolve_symlink(path)
        final = resolve_all(path) if target is not None else None
    except OSError:
        target, final = None, None
    return LinkStatus(
        name=name,
        kind=kind,
        path=path,
        target=target,
        final_path=final,
        exists=final is not None and final.exists(),
    )


def collect_link_status(
    job: Job, legacy_links: Mapping[str, str] = LEGACY_LINKS
) -> list[LinkStatus]:
    """Permalink links first (declaration order), then legacy links."""
    builds_dir = job.builds_dir
    out = [
        _status(pp.id, "permalink", builds_dir / pp.id)
        for pp in peephole_permalinks(job)
    ]
    out.extend(_status(name, "legacy", job.root_dir / name) for name in legacy_links)
    return out


def display_link_status(
    job: Job, statuses: Sequence[LinkStatus], console: Optional[Console] = None
) -> None:
    console = console or Console()
    console.rule(f"[bold cyan]Links for {job.full_name}")

    table = Table(title=str(job.root_dir))
    table.add_column("Link", style="cyan")
    table.add_column("Kind", style="white")
    table.add_column("Target", style="white")
    table.add_column("Resolves to", style="white")

    for s in statuses:
        if s.target is None:
            resolved = "[yellow]missing[/yellow]"
        elif s.exists:
            resolved = f"[green]{s.final_path}[/green]"
        else:
            resolved = f"[red]{s.final_path} (dangling)[/red]"
        table.add_row(s.name, s.kind, s.target or "-", resolved)

    console.print(table)
    console.rule()


__all__ = ["LinkStatus", "collect_link_status", "display_link_status"]
