"""Prune chain for archiving completed PRDs.

This module provides the PruneChain class that moves every completed PRD,
together with its task list and progress log, into the archive directory.
Each feature is archived independently: one failing feature is reported and
the remaining features are still processed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.markup import escape

from hone.core.errors import HoneError, ValidationError
from hone.core.settings import require_plans_dir, resolve_archive_dir
from hone.fs.archive import Triplet, archive_triplet
from hone.plans.prds import list_archivable_triplets


@dataclass
class PruneReport:
    """Summary of a prune run.

    Attributes:
        plans_dir: Plans directory that was pruned
        dry_run: Whether the run only previewed the moves
        candidates: Features whose PRD is completed
        archived: Features that were archived
        failed: Feature name -> error headline for features that failed
    """

    plans_dir: Path
    dry_run: bool
    candidates: list[str] = field(default_factory=list)
    archived: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def _prds(count: int) -> str:
    return "PRD" if count == 1 else "PRDs"


class PruneChain:
    """Archives completed PRD triplets with structured logging and Rich output."""

    def __init__(self, logger: Any = None, ui: Console | None = None) -> None:
        """Initialize prune chain.

        Args:
            logger: Optional structlog logger instance
            ui: Optional Rich console for output
        """
        self._logger = logger or structlog.get_logger()
        self._ui = ui or Console()

    def prune(
        self,
        plans_dir: Path,
        *,
        dry_run: bool = False,
        archive_dir: Path | None = None,
    ) -> PruneReport:
        """Archive (or preview archiving) every completed PRD.

        Args:
            plans_dir: Managed plans directory
            dry_run: Preview the moves without touching the filesystem
            archive_dir: Destination directory (defaults to ``<plans>/archive``)

        Returns:
            PruneReport describing what happened

        Raises:
            ValidationError: If ``dry_run`` is not a boolean
            NotFoundError: If the plans directory does not exist
        """
        if not isinstance(dry_run, bool):
            raise ValidationError(
                "Invalid dry-run flag",
                f"Expected true or false, got {dry_run!r}.",
            )

        require_plans_dir(plans_dir)
        archive = archive_dir or resolve_archive_dir(plans_dir)

        bound_logger = self._logger.bind(plans_dir=str(plans_dir), dry_run=dry_run)

        triplets = list_archivable_triplets(plans_dir)
        report = PruneReport(
            plans_dir=plans_dir,
            dry_run=dry_run,
            candidates=[triplet.feature_name for triplet in triplets],
        )
        bound_logger.info("prune.start", candidates=len(triplets))

        if not triplets:
            self._show_nothing_to_archive()
        elif dry_run:
            self._show_preview(plans_dir, triplets)
        else:
            self._archive_all(triplets, plans_dir, archive, report, bound_logger)

        bound_logger.info(
            "prune.summary",
            candidates=len(report.candidates),
            archived_count=len(report.archived),
            failed_count=len(report.failed),
        )
        return report

    def _archive_all(
        self,
        triplets: list[Triplet],
        plans_dir: Path,
        archive: Path,
        report: PruneReport,
        bound_logger: Any,
    ) -> None:
        count = len(triplets)
        self._ui.print(f"Archiving {count} completed {_prds(count)}...")

        for triplet in triplets:
            feature = triplet.feature_name
            try:
                moved = archive_triplet(triplet, root=plans_dir, archive_dir=archive)
            except HoneError as exc:
                report.failed[feature] = exc.headline
                bound_logger.warning(
                    "prune.failed",
                    feature=feature,
                    error=exc.code,
                    retryable=exc.retryable,
                )
                self._ui.print(
                    f"❌ [red]Failed to archive {escape(feature)}[/red]: "
                    f"{escape(exc.headline)}"
                )
                continue

            report.archived.append(feature)
            bound_logger.info(
                "prune.archived",
                feature=feature,
                files=[path.name for path in moved],
            )
            self._ui.print(f"✅ [green]Archived:[/green] {escape(feature)}")

        if report.archived:
            done = len(report.archived)
            self._ui.print(
                f"Moved {done} finished {_prds(done)} to archive: "
                f"{escape(', '.join(report.archived))}"
            )
        if report.failed:
            failed = len(report.failed)
            self._ui.print(
                f"[yellow]{failed} {_prds(failed)} could not be archived. "
                "Fix the errors above and run prune again.[/yellow]"
            )

    def _show_nothing_to_archive(self) -> None:
        self._ui.print("No completed PRDs found to archive.")
        self._ui.print("Complete some tasks with: hone run")
        self._ui.print("Or check status with: hone status")

    def _show_preview(self, plans_dir: Path, triplets: list[Triplet]) -> None:
        count = len(triplets)
        self._ui.print(
            f"🔍 [blue]Dry-run mode:[/blue] Preview of {count} {_prds(count)} "
            "that would be archived"
        )
        labels = (
            ("PRD", "primary_file"),
            ("Tasks", "task_file"),
            ("Progress", "progress_file"),
        )
        for triplet in triplets:
            self._ui.print(f"Feature: {escape(triplet.feature_name)}")
            for label, attr in labels:
                name = getattr(triplet, attr)
                if name and (plans_dir / name).is_file():
                    shown = f"{plans_dir.name}/{name}"
                    self._ui.print(f"  {label}: {escape(shown)}")

        names = ", ".join(triplet.feature_name for triplet in triplets)
        self._ui.print(
            f"Would move {count} finished {_prds(count)} to archive: {escape(names)}"
        )
        self._ui.print("Run without --dry-run to execute the archive operation")
