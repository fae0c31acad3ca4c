"""Tests for PRD discovery and status derivation."""

from collections.abc import Callable
from pathlib import Path

import pytest

from hone.fs.archive import Triplet
from hone.plans.prds import (
    calculate_status,
    extract_feature_name,
    get_prd_info,
    list_archivable_triplets,
    list_prd_files,
    list_prds,
    load_task_file,
)
from hone.plans.schemas import Task, TaskFile


class TestExtractFeatureName:
    """Test feature name extraction."""

    @pytest.mark.parametrize(
        ("filename", "feature"),
        [
            ("prd-user-auth.md", "user-auth"),
            ("prd-x.md", "x"),
            ("notes.md", "notes"),
        ],
    )
    def test_extracts_feature(self, filename: str, feature: str) -> None:
        assert extract_feature_name(filename) == feature


class TestListPrdFiles:
    """Test PRD file discovery."""

    def test_lists_only_prd_markdown_files(self, plans_dir: Path) -> None:
        """Test that task files, other markdown and directories are ignored."""
        for name in ("prd-b.md", "prd-a.md", "tasks-a.yml", "README.md"):
            (plans_dir / name).write_text("x", encoding="utf-8")
        (plans_dir / "prd-dir.md").mkdir()
        (plans_dir / "archive").mkdir()
        (plans_dir / "archive" / "prd-old.md").write_text("x", encoding="utf-8")

        assert list_prd_files(plans_dir) == ["prd-a.md", "prd-b.md"]

    def test_missing_directory_lists_nothing(self, tmp_path: Path) -> None:
        assert list_prd_files(tmp_path / "missing") == []


class TestLoadTaskFile:
    """Test task file parsing."""

    def test_parses_valid_file(
        self, plans_dir: Path, make_feature: Callable[..., None]
    ) -> None:
        make_feature("auth")

        task_file = load_task_file(plans_dir / "tasks-auth.yml")

        assert task_file is not None
        assert task_file.feature == "auth"
        assert [task.id for task in task_file.tasks] == ["task-001", "task-002"]
        assert task_file.tasks[1].dependencies == ["task-001"]
        assert task_file.tasks[0].completed_at is not None

    def test_missing_file_returns_none(self, plans_dir: Path) -> None:
        assert load_task_file(plans_dir / "tasks-none.yml") is None

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "feature: [unterminated",
            "- just\n- a list\n",
            "tasks:\n  - not a mapping\n",
        ],
    )
    def test_malformed_file_returns_none(self, plans_dir: Path, content: str) -> None:
        """Test that broken YAML or a non-mapping layout is treated as absent."""
        path = plans_dir / "tasks-bad.yml"
        path.write_text(content, encoding="utf-8")

        assert load_task_file(path) is None

    def test_sparse_tasks_are_accepted(self, plans_dir: Path) -> None:
        """Test that missing fields and unknown statuses do not reject the file."""
        path = plans_dir / "tasks-loose.yml"
        path.write_text(
            "tasks:\n"
            "  - id: t1\n"
            "    status: completed\n"
            "  - id: t2\n"
            "    status: blocked\n"
            "    completed_at: sometime\n",
            encoding="utf-8",
        )

        task_file = load_task_file(path)

        assert task_file is not None
        assert task_file.feature == ""
        assert [task.status for task in task_file.tasks] == [
            "completed",
            "blocked",
        ]
        assert calculate_status(task_file) == ("in progress", 1, 2)

    def test_numeric_ids_are_coerced(self, plans_dir: Path) -> None:
        path = plans_dir / "tasks-n.yml"
        path.write_text(
            "feature: n\ntasks:\n  - id: 1\n    title: One\n", encoding="utf-8"
        )

        task_file = load_task_file(path)

        assert task_file is not None
        assert task_file.tasks[0].id == "1"
        assert task_file.tasks[0].status == "pending"


class TestCalculateStatus:
    """Test status derivation."""

    def _task_file(self, *statuses: str) -> TaskFile:
        return TaskFile(
            feature="x",
            tasks=[
                Task(id=f"t{index}", title="T", status=status)
                for index, status in enumerate(statuses)
            ],
        )

    def test_no_task_file(self) -> None:
        assert calculate_status(None) == ("not started", 0, 0)

    def test_empty_task_list(self) -> None:
        assert calculate_status(self._task_file()) == ("not started", 0, 0)

    def test_nothing_completed(self) -> None:
        assert calculate_status(self._task_file("pending", "failed")) == (
            "not started",
            0,
            2,
        )

    def test_partially_completed(self) -> None:
        assert calculate_status(self._task_file("completed", "in_progress")) == (
            "in progress",
            1,
            2,
        )

    def test_all_completed(self) -> None:
        assert calculate_status(self._task_file("completed", "completed")) == (
            "completed",
            2,
            2,
        )


class TestPrdListing:
    """Test PRD listing and archive candidate selection."""

    def test_prd_without_task_file(
        self, plans_dir: Path, make_feature: Callable[..., None]
    ) -> None:
        make_feature("draft", with_tasks=False, with_progress=False)

        info = get_prd_info(plans_dir, "prd-draft.md")

        assert info.feature == "draft"
        assert info.task_file is None
        assert info.status == "not started"
        assert info.completed_count is None
        assert info.total_count is None

    def test_list_prds_reports_status(
        self, plans_dir: Path, make_feature: Callable[..., None]
    ) -> None:
        make_feature("done")
        make_feature("wip", completed=False)

        infos = {info.feature: info for info in list_prds(plans_dir)}

        assert infos["done"].status == "completed"
        assert infos["done"].task_file == "tasks-done.yml"
        assert (infos["done"].completed_count, infos["done"].total_count) == (2, 2)
        assert infos["wip"].status == "in progress"
        assert (infos["wip"].completed_count, infos["wip"].total_count) == (1, 2)

    def test_archivable_triplets_are_completed_only(
        self, plans_dir: Path, make_feature: Callable[..., None]
    ) -> None:
        """Test that only completed PRDs are offered for archiving."""
        make_feature("zeta")
        make_feature("alpha")
        make_feature("wip", completed=False)
        make_feature("draft", with_tasks=False)

        triplets = list_archivable_triplets(plans_dir)

        assert triplets == [Triplet.for_feature("alpha"), Triplet.for_feature("zeta")]

    def test_sparse_completed_task_file_is_archivable(self, plans_dir: Path) -> None:
        """A hand-written task file without feature or titles still counts."""
        (plans_dir / "prd-notes.md").write_text("# Notes", encoding="utf-8")
        (plans_dir / "tasks-notes.yml").write_text(
            "tasks:\n  - status: completed\n  - status: completed\n",
            encoding="utf-8",
        )

        assert list_archivable_triplets(plans_dir) == [Triplet.for_feature("notes")]
