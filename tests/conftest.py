"""Pytest configuration and fixtures for hone tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

COMPLETED_TASKS = """feature: {feature}
prd: ./prd-{feature}.md
created_at: 2026-02-06T08:00:00.000Z
updated_at: 2026-02-06T12:00:00.000Z
tasks:
  - id: task-001
    title: "First task"
    status: completed
    dependencies: []
    acceptance_criteria: ["Works"]
    completed_at: 2026-02-06T10:00:00.000Z
  - id: task-002
    title: "Second task"
    status: completed
    dependencies:
      - task-001
    acceptance_criteria: ["Still works"]
    completed_at: 2026-02-06T11:00:00.000Z
"""

PARTIAL_TASKS = """feature: {feature}
prd: ./prd-{feature}.md
tasks:
  - id: task-001
    title: "Done task"
    status: completed
    completed_at: 2026-02-06T10:00:00.000Z
  - id: task-002
    title: "Pending task"
    status: pending
    completed_at: null
"""


@pytest.fixture
def plans_dir(tmp_path: Path) -> Path:
    """An empty .plans directory inside an isolated project root."""
    path = tmp_path / ".plans"
    path.mkdir()
    return path


@pytest.fixture
def make_feature(plans_dir: Path) -> Callable[..., None]:
    """Factory writing a PRD with optional task and progress files."""

    def _make(
        feature: str,
        *,
        completed: bool = True,
        with_tasks: bool = True,
        with_progress: bool = True,
    ) -> None:
        (plans_dir / f"prd-{feature}.md").write_text(
            f"# {feature}\n\n## Functional Requirements\n- REQ-F-001: Do it\n",
            encoding="utf-8",
        )
        if with_tasks:
            template = COMPLETED_TASKS if completed else PARTIAL_TASKS
            (plans_dir / f"tasks-{feature}.yml").write_text(
                template.format(feature=feature), encoding="utf-8"
            )
        if with_progress:
            (plans_dir / f"progress-{feature}.txt").write_text(
                f"progress for {feature}\n", encoding="utf-8"
            )

    return _make
