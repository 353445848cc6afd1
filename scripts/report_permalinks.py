"""
report_permalinks.py

Show where a job's permalink links and legacy links currently point.

Usage:
    python scripts/report_permalinks.py --root /var/jobs/folder/job --name folder/job
    python scripts/report_permalinks.py --root ... --builds-dir '/ext/${ITEM_FULL_NAME}'
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from build_symlink.config.config import (
    builds_dir_template,
    ensure_symlink_config,
    legacy_links,
    load_config,
)
from build_symlink.jobs.models import Job
from build_symlink.report import collect_link_status, display_link_status


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__.split("\n\n")[1])
    p.add_argument("--root", type=Path, required=True, help="Job root directory")
    p.add_argument(
        "--name", default=None, help="Job full name (default: root dir name)"
    )
    p.add_argument(
        "--builds-dir",
        default=None,
        help="Builds directory template (default: from config)",
    )
    p.add_argument("--config", type=Path, default=None, help="Extra YAML config")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    ensure_symlink_config(cfg)

    job = Job(
        full_name=args.name or args.root.name,
        root_dir=args.root,
        builds_dir_template=args.builds_dir or builds_dir_template(cfg),
    )
    statuses = collect_link_status(job, legacy_links(cfg))
    display_link_status(job, statuses)


if __name__ == "__main__":
    main()
