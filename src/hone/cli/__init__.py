"""CLI entrypoints for hone."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from hone.cli.prune import prune

app: TyperType = typer.Typer(help="Plan, track and archive PRD work.")


@app.callback()
def main() -> None:
    """hone keeps PRDs, task lists and progress logs in .plans/."""


app.command("prune")(prune)

__all__ = ["app"]
