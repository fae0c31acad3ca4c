"""Atomic file writes with explicit commit and rollback.

Content is staged into a hidden sibling temp file and published with a
single ``os.replace``, so any reader sees either the previous content or the
complete new content. A staged write must always be resolved by exactly one
terminal call (commit or rollback); an unresolved operation leaves its temp
file behind.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import TracebackType

from hone.core.errors import (
    CorruptedOperationError,
    HoneError,
    InvalidTransition,
    ValidationError,
    classify_os_error,
)
from hone.fs.paths import temp_path_for
from hone.utils.debug import debug


class OperationState(str, Enum):
    """Resolution state of a staged write.

    Attributes:
        PREPARED: Temp file written, target untouched
        COMMITTED: Temp file renamed onto the target
        ROLLED_BACK: Temp file removed, target untouched
    """

    PREPARED = "prepared"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class AtomicFileOperation:
    """A single staged write.

    Attributes:
        target_path: Final destination of the content
        temp_path: Hidden sibling file holding the staged content
        content: Text that was staged
        original_exists: Whether the target existed when the write was staged
        state: Current resolution state
    """

    target_path: Path
    temp_path: Path
    content: str
    original_exists: bool
    state: OperationState = OperationState.PREPARED


def _is_blank(path: Path | str | None) -> bool:
    return path is None or str(path) in ("", os.curdir)


def _discard_temp(temp_path: Path) -> None:
    """Remove a temp file, logging instead of raising on failure."""
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        debug(f"Failed to remove temp file {temp_path}: {e}")


def prepare_atomic_write(path: Path | str, content: str) -> AtomicFileOperation:
    """Stage ``content`` for ``path`` without touching the target.

    Args:
        path: Target file path
        content: Text to write (encoded as UTF-8)

    Returns:
        AtomicFileOperation in the PREPARED state

    Raises:
        ValidationError: If the path is empty or the content is not text
        FilesystemError: If the temp file cannot be written
    """
    if not isinstance(path, (str, os.PathLike)) or _is_blank(path):
        raise ValidationError(
            "File path is required for atomic write operation",
            "Pass the path of the file that should be written.",
        )
    if not isinstance(content, str):
        raise ValidationError(
            "Content must be a string",
            f"Got {type(content).__name__} instead of text.",
        )

    target = Path(path)
    temp = temp_path_for(target)
    original_exists = target.exists()

    created = False
    try:
        # "x" refuses to reuse a temp path some other operation already owns
        with open(temp, "x", encoding="utf-8", newline="") as handle:
            created = True
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
    except UnicodeEncodeError as e:
        if created:
            _discard_temp(temp)
        raise ValidationError(
            "Content must be valid text",
            f"Content for {target.name} cannot be encoded as UTF-8: {e.reason}",
        ) from e
    except OSError as e:
        if created:
            _discard_temp(temp)
        raise classify_os_error(e, action="write", path=target) from e
    except BaseException:
        if created:
            _discard_temp(temp)
        raise

    debug(f"Staged {target} via {temp.name} (overwrite={original_exists})")
    return AtomicFileOperation(
        target_path=target,
        temp_path=temp,
        content=content,
        original_exists=original_exists,
    )


def commit_atomic_write(operation: AtomicFileOperation) -> None:
    """Publish a staged write by renaming its temp file onto the target.

    On failure the temp file is removed and the target is left exactly as
    it was before the call.

    Args:
        operation: A PREPARED operation

    Raises:
        ValidationError: If the operation is missing its paths
        InvalidTransition: If the operation is not PREPARED
        CorruptedOperationError: If the temp file no longer exists
        FilesystemError: If the rename fails
    """
    if _is_blank(operation.target_path) or _is_blank(operation.temp_path):
        raise ValidationError(
            "Invalid atomic operation: target and temp paths are required",
            "Stage the write with prepare_atomic_write() before committing it.",
        )
    if operation.state is not OperationState.PREPARED:
        raise InvalidTransition("commit", operation.state.value)

    temp = Path(operation.temp_path)
    target = Path(operation.target_path)

    if not temp.exists():
        operation.state = OperationState.ROLLED_BACK
        raise CorruptedOperationError(temp, target)

    try:
        os.replace(temp, target)
    except OSError as e:
        _discard_temp(temp)
        operation.state = OperationState.ROLLED_BACK
        raise classify_os_error(e, action="commit", path=target) from e

    operation.state = OperationState.COMMITTED
    debug(f"Committed {target}")


def rollback_atomic_write(operation: AtomicFileOperation) -> None:
    """Abandon a staged write. A missing temp file is not an error.

    Raises:
        InvalidTransition: If the operation was already committed
        FilesystemError: If the temp file exists but cannot be removed
    """
    if operation.state is OperationState.COMMITTED:
        raise InvalidTransition("roll back", operation.state.value)

    if not _is_blank(operation.temp_path):
        temp = Path(operation.temp_path)
        try:
            temp.unlink(missing_ok=True)
        except OSError as e:
            subject = Path(operation.target_path).name
            raise classify_os_error(
                e, action="roll back", path=temp, subject=subject
            ) from e

    operation.state = OperationState.ROLLED_BACK
    debug(f"Rolled back staged write for {operation.target_path}")


def atomic_write_file(path: Path | str, content: str) -> None:
    """Write ``content`` to ``path`` atomically (prepare + commit)."""
    operation = prepare_atomic_write(path, content)
    commit_atomic_write(operation)


class AtomicTransaction:
    """Stage several writes and resolve them together, in staging order.

    Commits run strictly in the order the writes were staged. If one commit
    fails, writes committed before it stay committed while the failed write
    and every later one are rolled back before the error is re-raised.
    ``pending_count`` is 0 after any commit or rollback.

    Used as a context manager the transaction commits on a clean exit and
    rolls back when the block raises::

        with AtomicTransaction() as txn:
            txn.prepare_write(prd_path, prd_text)
            txn.prepare_write(task_path, task_text)
    """

    def __init__(self) -> None:
        self._pending: list[AtomicFileOperation] = []
        self._resolving = False

    @property
    def pending_count(self) -> int:
        """Number of staged writes that are not yet resolved."""
        return len(self._pending)

    def prepare_write(self, path: Path | str, content: str) -> AtomicFileOperation:
        """Stage one write and append it to the pending list."""
        if self._resolving:
            raise InvalidTransition(
                "add a write to", "being resolved", noun="a transaction"
            )
        operation = prepare_atomic_write(path, content)
        self._pending.append(operation)
        return operation

    def commit(self) -> None:
        """Commit every pending write in staging order."""
        self._resolving = True
        try:
            for index, operation in enumerate(self._pending):
                try:
                    commit_atomic_write(operation)
                except BaseException:
                    # Earlier commits stay; the failed one and all later ones go
                    unresolved = self._pending[index:]
                    debug(
                        f"Commit failed at {operation.target_path}; "
                        f"{index} committed, rolling back {len(unresolved)}"
                    )
                    self._discard(unresolved)
                    raise
        finally:
            self._pending.clear()
            self._resolving = False

    def rollback(self) -> None:
        """Remove the temp files of every pending write."""
        self._resolving = True
        try:
            self._discard(self._pending)
        finally:
            self._pending.clear()
            self._resolving = False

    @staticmethod
    def _discard(operations: list[AtomicFileOperation]) -> None:
        for operation in operations:
            try:
                rollback_atomic_write(operation)
            except HoneError as e:
                debug(f"Rollback of {operation.target_path} failed: {e!r}")

    def __enter__(self) -> "AtomicTransaction":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit: commit on success, roll back on error."""
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
