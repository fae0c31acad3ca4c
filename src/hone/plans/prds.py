"""PRD discovery and status derivation.

Read-only helpers that list the PRDs in a plans directory, derive each
PRD's status from its YAML task file, and select the feature triplets that
are ready to be archived.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError as SchemaError

from hone.core.settings import PRD_PREFIX, TASKS_PREFIX
from hone.fs.archive import Triplet
from hone.plans.schemas import PrdInfo, PrdStatus, TaskFile
from hone.utils.debug import debug

__all__ = [
    "calculate_status",
    "extract_feature_name",
    "get_prd_info",
    "list_archivable_triplets",
    "list_prd_files",
    "list_prds",
    "load_task_file",
]


def extract_feature_name(prd_filename: str) -> str:
    """Extract the feature name from a PRD file name.

    Example:
        >>> extract_feature_name("prd-user-auth.md")
        'user-auth'
    """
    name = prd_filename
    if name.startswith(PRD_PREFIX):
        name = name[len(PRD_PREFIX) :]
    if name.endswith(".md"):
        name = name[: -len(".md")]
    return name


def list_prd_files(plans_dir: Path) -> list[str]:
    """Return the sorted ``prd-*.md`` file names directly inside ``plans_dir``."""
    if not plans_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in plans_dir.iterdir()
        if entry.is_file()
        and entry.name.startswith(PRD_PREFIX)
        and entry.name.endswith(".md")
    )


def load_task_file(task_path: Path) -> TaskFile | None:
    """Load and validate a task file.

    Returns:
        Parsed TaskFile, or None when the file is missing or malformed
    """
    if not task_path.is_file():
        return None

    try:
        raw = yaml.safe_load(task_path.read_text(encoding="utf-8"))
        return TaskFile.model_validate(raw)
    except (OSError, yaml.YAMLError, SchemaError) as e:
        debug(f"Error parsing task file {task_path.name}: {e}")
        return None


def calculate_status(task_file: TaskFile | None) -> tuple[PrdStatus, int, int]:
    """Derive a PRD status from its task file.

    Returns:
        Tuple of (status, completed_count, total_count)
    """
    if task_file is None or not task_file.tasks:
        return "not started", 0, 0

    total = len(task_file.tasks)
    completed = sum(1 for task in task_file.tasks if task.status == "completed")

    if completed == 0:
        return "not started", completed, total
    if completed == total:
        return "completed", completed, total
    return "in progress", completed, total


def get_prd_info(plans_dir: Path, prd_filename: str) -> PrdInfo:
    """Build the listing entry for a single PRD."""
    feature = extract_feature_name(prd_filename)
    task_filename = f"{TASKS_PREFIX}{feature}.yml"
    task_file = load_task_file(plans_dir / task_filename)
    status, completed, total = calculate_status(task_file)

    return PrdInfo(
        filename=prd_filename,
        feature=feature,
        task_file=task_filename if task_file else None,
        status=status,
        completed_count=completed if task_file else None,
        total_count=total if task_file else None,
    )


def list_prds(plans_dir: Path) -> list[PrdInfo]:
    """List every PRD in ``plans_dir`` with its status."""
    return [get_prd_info(plans_dir, name) for name in list_prd_files(plans_dir)]


def list_archivable_triplets(plans_dir: Path) -> list[Triplet]:
    """Return the triplets of every completed PRD, in file name order."""
    return [
        Triplet.for_feature(info.feature)
        for info in list_prds(plans_dir)
        if info.status == "completed"
    ]
