"""Helpers for resolving the plans and archive directories."""

from __future__ import annotations

import os
from pathlib import Path

from hone.core.errors import NotFoundError

__all__ = [
    "ARCHIVE_DIR_NAME",
    "PLANS_DIR_NAME",
    "PRD_PREFIX",
    "PROGRESS_PREFIX",
    "TASKS_PREFIX",
    "require_plans_dir",
    "resolve_archive_dir",
    "resolve_plans_dir",
]

PLANS_DIR_NAME = ".plans"
ARCHIVE_DIR_NAME = "archive"

PRD_PREFIX = "prd-"
TASKS_PREFIX = "tasks-"
PROGRESS_PREFIX = "progress-"


def resolve_plans_dir(plans_dir: str | Path | None = None) -> Path:
    """Resolve the on-disk location of the plans directory.

    Args:
        plans_dir: Optional explicit directory. Falls back to the
            ``HONE_PLANS_DIR`` environment variable, then ``./.plans``.

    Returns:
        Absolute path of the plans directory (it may not exist yet).
    """

    chosen: str | Path | None = plans_dir
    env_path = os.getenv("HONE_PLANS_DIR")
    if chosen is None and env_path:
        chosen = env_path
    if chosen is None:
        chosen = Path.cwd() / PLANS_DIR_NAME

    return Path(chosen).expanduser().resolve()


def resolve_archive_dir(plans_dir: Path) -> Path:
    """Return the archive directory that lives inside ``plans_dir``."""

    return plans_dir / ARCHIVE_DIR_NAME


def require_plans_dir(plans_dir: Path) -> Path:
    """Ensure the plans directory exists.

    Raises:
        NotFoundError: If ``plans_dir`` is missing or not a directory
    """

    if not plans_dir.is_dir():
        raise NotFoundError(
            plans_dir,
            headline="Plans directory not found",
            details=(
                f"Expected a {PLANS_DIR_NAME} directory at: {plans_dir}\n\n"
                "Run hone from your project root, or pass --plans-dir."
            ),
        )
    return plans_dir
