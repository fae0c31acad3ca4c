"""Extend chain for persisting a rewritten PRD and its task list.

The content itself comes from the generation step; this chain only makes
sure that the PRD and, optionally, its task file are replaced together or
not at all when validation rejects the new content.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from hone.core.errors import ValidationError
from hone.core.settings import TASKS_PREFIX
from hone.fs.atomic import AtomicTransaction

# Returns a list of human-readable issues; empty means the content is valid
Validator = Callable[[str, str | None], list[str]]

_PRD_NAME = re.compile(r"^prd-(?P<feature>.+)\.md$")


def derive_task_filename(prd_path: Path | str) -> str:
    """Map ``prd-<feature>.md`` to ``tasks-<feature>.yml``.

    Raises:
        ValidationError: If the path is empty or not a PRD file name
    """
    if not isinstance(prd_path, (str, Path)) or not str(prd_path):
        raise ValidationError("PRD file path is required")

    match = _PRD_NAME.match(Path(prd_path).name)
    if match is None:
        raise ValidationError(
            "Invalid PRD filename format",
            f"Expected prd-<feature>.md, got {Path(prd_path).name}.",
        )
    return f"{TASKS_PREFIX}{match.group('feature')}.yml"


@dataclass
class ExtendResult:
    """Outcome of a successful extension.

    Attributes:
        prd_path: PRD file that was rewritten
        task_path: Task file that was rewritten (if any)
        created: Files that did not exist before
    """

    prd_path: Path
    task_path: Path | None = None
    created: list[Path] = field(default_factory=list)


class ExtendChain:
    """Writes an extended PRD (and task list) as one all-or-nothing step."""

    def __init__(self, logger: Any = None) -> None:
        """Initialize extend chain.

        Args:
            logger: Optional structlog logger instance
        """
        self._logger = logger or structlog.get_logger()

    def persist(
        self,
        prd_path: Path | str,
        prd_content: str,
        *,
        task_content: str | None = None,
        task_path: Path | str | None = None,
        validate: Validator | None = None,
    ) -> ExtendResult:
        """Stage, validate and commit the new PRD and task file content.

        Args:
            prd_path: PRD file to rewrite
            prd_content: New PRD text
            task_content: New task file text (optional)
            task_path: Task file to rewrite; derived from ``prd_path`` if omitted
            validate: Optional check run on the staged content before commit

        Returns:
            ExtendResult describing the written files

        Raises:
            ValidationError: If ``validate`` reports issues (nothing is written)
            FilesystemError: If staging or committing fails
        """
        prd = Path(prd_path)
        task: Path | None = None
        if task_content is not None:
            task = Path(task_path) if task_path else prd.with_name(
                derive_task_filename(prd)
            )

        bound_logger = self._logger.bind(
            prd=str(prd), task_file=str(task) if task else None
        )

        with AtomicTransaction() as transaction:
            operations = [transaction.prepare_write(prd, prd_content)]
            if task is not None and task_content is not None:
                operations.append(transaction.prepare_write(task, task_content))
            bound_logger.info("extend.staged", pending=transaction.pending_count)

            if validate is not None:
                issues = validate(prd_content, task_content)
                if issues:
                    bound_logger.warning("extend.rejected", issues=issues)
                    raise ValidationError(
                        f"Extended PRD failed validation: {prd.name}",
                        "\n".join(f"  • {issue}" for issue in issues),
                    )

        created = [op.target_path for op in operations if not op.original_exists]
        bound_logger.info(
            "extend.committed",
            written=[str(op.target_path) for op in operations],
            created=[str(path) for path in created],
        )
        return ExtendResult(prd_path=prd, task_path=task, created=created)
