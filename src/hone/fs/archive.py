"""Two-phase archival moves with best-effort undo.

Each file is first renamed into a hidden temp name inside the archive
directory (vacating the source in one step), then renamed to its final
name within that same directory. When anything fails, files that are still
sitting at their temp name are moved back to where they came from.
"""

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from hone.core.errors import (
    NotFoundError,
    ValidationError,
    classify_os_error,
)
from hone.core.settings import (
    ARCHIVE_DIR_NAME,
    PRD_PREFIX,
    PROGRESS_PREFIX,
    TASKS_PREFIX,
)
from hone.fs.paths import (
    ensure_dir,
    normalize_path,
    temp_path_for,
    validate_within_root,
)
from hone.utils.debug import debug


@dataclass
class FileMoveOperation:
    """One pending or resolved archival move.

    Attributes:
        source_path: Where the file lives before archiving
        target_path: Final location inside the archive directory
        temp_path: Hidden staging name inside the archive directory
        staged: True while the file sits at ``temp_path``
    """

    source_path: Path
    target_path: Path
    temp_path: Path
    staged: bool = False


@dataclass(frozen=True)
class Triplet:
    """A feature's PRD plus its optional task list and progress log.

    File names are relative to the managed root. Only members that exist
    when the triplet is archived take part in the move.
    """

    feature_name: str
    primary_file: str
    task_file: str | None = None
    progress_file: str | None = None

    @classmethod
    def for_feature(cls, feature_name: str) -> "Triplet":
        """Build the conventional triplet for ``feature_name``."""
        return cls(
            feature_name=feature_name,
            primary_file=f"{PRD_PREFIX}{feature_name}.md",
            task_file=f"{TASKS_PREFIX}{feature_name}.yml",
            progress_file=f"{PROGRESS_PREFIX}{feature_name}.txt",
        )

    def members(self) -> list[str]:
        """Return the non-empty member file names, primary first."""
        return [
            name
            for name in (self.primary_file, self.task_file, self.progress_file)
            if name
        ]


def _validate_target_name(target_name: str) -> None:
    if not isinstance(target_name, str) or not target_name.strip():
        raise ValidationError(
            "Target name is required for archiving",
            "Pass the file name the archived copy should have.",
        )
    if "/" in target_name or os.sep in target_name or (
        os.altsep and os.altsep in target_name
    ):
        raise ValidationError(
            f"Invalid target name: {target_name}",
            "The archive name must be a plain file name without directories.",
        )
    if target_name.startswith("."):
        raise ValidationError(
            f"Invalid target name: {target_name}",
            "Hidden names are reserved for temporary files.",
        )


def _resolve_archive_dir(root: Path, archive_dir: Path | str | None) -> Path:
    if archive_dir is None:
        return root / ARCHIVE_DIR_NAME
    return validate_within_root(root, archive_dir)


def _stage(operation: FileMoveOperation) -> None:
    os.rename(operation.source_path, operation.temp_path)
    operation.staged = True
    debug(f"Staged {operation.source_path} -> {operation.temp_path}")


def _commit(operation: FileMoveOperation) -> None:
    os.replace(operation.temp_path, operation.target_path)
    operation.staged = False
    debug(f"Archived {operation.source_path} -> {operation.target_path}")


def _undo(operation: FileMoveOperation) -> None:
    """Move a staged file back to its source, logging instead of raising."""
    if not operation.staged:
        return
    try:
        os.rename(operation.temp_path, operation.source_path)
        operation.staged = False
        debug(f"Restored {operation.source_path} from {operation.temp_path}")
    except OSError as e:
        debug(
            f"Failed to restore {operation.source_path} "
            f"(left at {operation.temp_path}): {e}"
        )


def _failing_path(operation: FileMoveOperation | None, fallback: Path) -> Path:
    if operation is None:
        return fallback
    # A failed stage never set the flag, a failed commit left it set
    return operation.target_path if operation.staged else operation.source_path


def archive_file(
    source_path: Path | str,
    target_name: str,
    *,
    root: Path | str,
    archive_dir: Path | str | None = None,
) -> Path:
    """Move one file from the managed root into the archive directory.

    An existing regular file at the destination is replaced.

    Args:
        source_path: File to archive (relative paths resolve against ``root``)
        target_name: Plain file name for the archived copy
        root: Managed root the source must live in
        archive_dir: Destination directory (defaults to ``<root>/archive``)

    Returns:
        Final path of the archived file

    Raises:
        ValidationError: If an argument is empty or malformed
        TraversalError: If the source or archive dir lies outside of ``root``
        NotFoundError: If the source does not exist
        FilesystemError: If a rename fails (classified by errno)
    """
    if not isinstance(source_path, (str, os.PathLike)) or not str(source_path):
        raise ValidationError(
            "Source path is required for archiving",
            "Pass the path of the file to archive.",
        )
    _validate_target_name(target_name)

    root_path = normalize_path(root)
    source = validate_within_root(root_path, source_path)
    archive = _resolve_archive_dir(root_path, archive_dir)

    if not source.exists():
        raise NotFoundError(source)
    if not source.is_file():
        raise ValidationError(
            f"Not a regular file: {source}",
            "Only files can be archived.",
        )

    ensure_dir(archive, subject=source.name)

    target = archive / target_name
    operation = FileMoveOperation(
        source_path=source,
        target_path=target,
        temp_path=temp_path_for(target),
    )

    try:
        _stage(operation)
        _commit(operation)
    except OSError as e:
        failing = _failing_path(operation, source)
        _undo(operation)
        raise classify_os_error(
            e, action="archive", path=failing, subject=source.name
        ) from e
    except BaseException:
        _undo(operation)
        raise

    return target


def _plan_moves(
    triplet: Triplet, root: Path, archive: Path
) -> list[FileMoveOperation]:
    # Confine every member before looking at the filesystem
    sources = [validate_within_root(root, name) for name in triplet.members()]

    operations: list[FileMoveOperation] = []
    for source in sources:
        if not source.is_file():
            debug(f"Skipping missing member of {triplet.feature_name}: {source}")
            continue
        target = archive / source.name
        operations.append(
            FileMoveOperation(
                source_path=source,
                target_path=target,
                temp_path=temp_path_for(target),
            )
        )
    return operations


def archive_triplet(
    triplet: Triplet,
    *,
    root: Path | str,
    archive_dir: Path | str | None = None,
) -> list[Path]:
    """Archive every existing member of a triplet.

    All present members are staged first, then committed in order. On
    failure, members still staged are moved back to their sources; members
    already committed stay archived, so a retry only handles what is left.

    Args:
        triplet: Feature files to archive
        root: Managed root the files live in
        archive_dir: Destination directory (defaults to ``<root>/archive``)

    Returns:
        Final archive paths, in member order

    Raises:
        ValidationError: If the triplet lacks a feature or primary file name
        TraversalError: If a member or the archive dir lies outside of ``root``
        NotFoundError: If none of the members exist
        FilesystemError: If a rename fails (subject is the feature name)
    """
    if (
        not isinstance(triplet, Triplet)
        or not triplet.feature_name
        or not triplet.primary_file
    ):
        raise ValidationError(
            "Invalid PRD triplet",
            "A triplet needs a feature name and a primary PRD file name.",
        )

    root_path = normalize_path(root)
    archive = _resolve_archive_dir(root_path, archive_dir)
    operations = _plan_moves(triplet, root_path, archive)

    if not operations:
        raise NotFoundError(
            root_path / triplet.primary_file,
            headline=f"Nothing to archive for {triplet.feature_name}",
            details=(
                "None of the PRD, task or progress files exist in "
                f"{root_path}.\n\nIt may already have been archived."
            ),
        )

    ensure_dir(archive, subject=triplet.feature_name)

    current: FileMoveOperation | None = None
    committed: list[FileMoveOperation] = []
    try:
        for operation in operations:
            current = operation
            _stage(operation)
        for operation in operations:
            current = operation
            _commit(operation)
            committed.append(operation)
    except OSError as e:
        failing = _failing_path(current, root_path)
        _rollback_staged(operations, committed, triplet.feature_name)
        raise classify_os_error(
            e, action="archive", path=failing, subject=triplet.feature_name
        ) from e
    except BaseException:
        _rollback_staged(operations, committed, triplet.feature_name)
        raise

    return [operation.target_path for operation in operations]


def _rollback_staged(
    operations: Sequence[FileMoveOperation],
    committed: Sequence[FileMoveOperation],
    feature: str,
) -> None:
    for operation in operations:
        _undo(operation)
    if committed:
        debug(
            f"Partially archived {feature}: "
            f"{', '.join(op.target_path.name for op in committed)} kept in archive"
        )
