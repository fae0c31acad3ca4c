"""CLI command for archiving completed PRDs."""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from hone.chains.prune_chain import PruneChain
from hone.core.errors import HoneError, format_error
from hone.core.settings import resolve_plans_dir

DryRunFlag = Annotated[
    bool,
    typer.Option("--dry-run", help="Preview the archive moves without executing them."),
]
PlansDirOption = Annotated[
    Path | None,
    typer.Option(
        "--plans-dir",
        help="Optional override for the plans directory (default: ./.plans).",
    ),
]


def prune(dry_run: DryRunFlag = False, plans_dir: PlansDirOption = None) -> None:
    """Move completed PRDs and their task and progress files to the archive."""

    resolved = resolve_plans_dir(plans_dir)
    chain = PruneChain()

    try:
        report = chain.prune(resolved, dry_run=dry_run)
    except HoneError as exc:
        typer.secho(
            format_error(exc.headline, exc.details), err=True, fg=typer.colors.RED
        )
        raise typer.Exit(code=exc.exit_code) from exc

    if report.failed:
        raise typer.Exit(code=1)
