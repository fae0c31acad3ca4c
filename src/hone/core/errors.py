"""Custom exceptions for hone.

This module defines the typed exceptions raised by the filesystem mutation
layer and the commands built on top of it. Every error carries a short
headline plus a remediation hint so the command surface can print a
two-part message and exit non-zero.
"""

import errno as errno_codes
from enum import Enum
from pathlib import Path
from typing import Any


class HoneError(Exception):
    """Base exception for all hone errors.

    Attributes:
        headline: One-line summary of what went wrong
        details: Human-readable remediation hint (optional)
        exit_code: Process exit code the command surface should use
    """

    retryable: bool = False

    def __init__(
        self,
        headline: str,
        details: str | None = None,
        exit_code: int = 1,
    ) -> None:
        """Initialize HoneError.

        Args:
            headline: One-line summary of the failure
            details: Remediation hint (optional)
            exit_code: Exit code for the command surface
        """
        self.headline = headline
        self.details = details
        self.exit_code = exit_code
        super().__init__(headline)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for machine-readable output.

        Returns:
            Dictionary representation suitable for JSON output
        """
        result: dict[str, Any] = {
            "error": self.code,
            "message": self.headline,
            "retryable": self.retryable,
        }

        if self.details is not None:
            result["details"] = self.details

        return result

    @property
    def code(self) -> str:
        """Stable snake_case identifier for the error type."""
        return "hone_error"

    def __repr__(self) -> str:
        """Return repr string for debugging."""
        return f"{type(self).__name__}(headline={self.headline!r})"


class ValidationError(HoneError):
    """Raised when caller input is malformed (empty path, non-text content)."""

    @property
    def code(self) -> str:
        return "validation_error"


class InvalidTransition(ValidationError):
    """Raised when an operation is asked to move to an illegal state.

    Examples are committing an operation twice, committing after rollback,
    or rolling back an operation that has already been committed.
    """

    def __init__(self, action: str, state: str, noun: str = "an operation") -> None:
        self.action = action
        self.state = state
        super().__init__(
            f"Cannot {action} {noun} that is already {state}",
            "Each staged write must be resolved exactly once: either commit "
            "it or roll it back.",
        )

    @property
    def code(self) -> str:
        return "invalid_transition"


class NotFoundError(HoneError):
    """Raised when a file or directory that must exist is missing.

    Attributes:
        path: The path that could not be found
    """

    def __init__(
        self,
        path: Path | str,
        headline: str | None = None,
        details: str | None = None,
    ) -> None:
        self.path = Path(path)
        super().__init__(
            headline or f"File not found: {path}",
            details
            or f"Could not find file: {path}\n\nPlease check the path and try again.",
        )

    @property
    def code(self) -> str:
        return "not_found"

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["path"] = str(self.path)
        return result


class TraversalError(HoneError):
    """Raised when a path resolves outside of the managed root directory.

    Attributes:
        path: The candidate path as supplied by the caller
        root: The managed root it was checked against
    """

    def __init__(self, path: Path | str, root: Path | str) -> None:
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(
            f"Path escapes the managed directory: {path}",
            f"Only files inside {root} can be modified.\n\n"
            "Pass a path that stays within the plans directory.",
        )

    @property
    def code(self) -> str:
        return "path_traversal"

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["path"] = str(self.path)
        result["root"] = str(self.root)
        return result


class CorruptedOperationError(HoneError):
    """Raised when a staged temp file vanished before it could be committed.

    This indicates that something outside of hone touched the temp file.
    """

    def __init__(self, temp_path: Path | str, target_path: Path | str) -> None:
        self.temp_path = Path(temp_path)
        self.target_path = Path(target_path)
        super().__init__(
            f"Atomic operation corrupted: temp file missing for {target_path}",
            f"Expected staged file {temp_path} was not found.\n\n"
            "Another process may have removed it. The target file was left "
            "unchanged; re-run the command.",
        )

    @property
    def code(self) -> str:
        return "corrupted_operation"


class FilesystemErrorKind(str, Enum):
    """Classification of an OS-level failure.

    Attributes:
        PERMISSION_DENIED: Missing read/write permission on a path
        SOURCE_VANISHED: The source disappeared while the operation ran
        TARGET_COLLISION: Something non-replaceable already sits at the target
        CROSS_DEVICE: Rename across filesystems is not supported
        DISK_FULL: No space (or quota) left on the device
        READ_ONLY: The filesystem is mounted read-only
        UNCLASSIFIED: Any other OS error
    """

    PERMISSION_DENIED = "permission_denied"
    SOURCE_VANISHED = "source_vanished"
    TARGET_COLLISION = "target_collision"
    CROSS_DEVICE = "cross_device"
    DISK_FULL = "disk_full"
    READ_ONLY = "read_only"
    UNCLASSIFIED = "unclassified"


_ERRNO_KINDS: dict[int, FilesystemErrorKind] = {
    errno_codes.EACCES: FilesystemErrorKind.PERMISSION_DENIED,
    errno_codes.EPERM: FilesystemErrorKind.PERMISSION_DENIED,
    errno_codes.ENOENT: FilesystemErrorKind.SOURCE_VANISHED,
    errno_codes.EEXIST: FilesystemErrorKind.TARGET_COLLISION,
    errno_codes.ENOTEMPTY: FilesystemErrorKind.TARGET_COLLISION,
    errno_codes.EISDIR: FilesystemErrorKind.TARGET_COLLISION,
    errno_codes.ENOTDIR: FilesystemErrorKind.TARGET_COLLISION,
    errno_codes.EXDEV: FilesystemErrorKind.CROSS_DEVICE,
    errno_codes.ENOSPC: FilesystemErrorKind.DISK_FULL,
    errno_codes.EROFS: FilesystemErrorKind.READ_ONLY,
}
if hasattr(errno_codes, "EDQUOT"):
    _ERRNO_KINDS[errno_codes.EDQUOT] = FilesystemErrorKind.DISK_FULL

_HEADLINES: dict[FilesystemErrorKind, str] = {
    FilesystemErrorKind.PERMISSION_DENIED: "Permission denied",
    FilesystemErrorKind.SOURCE_VANISHED: "File disappeared during operation",
    FilesystemErrorKind.TARGET_COLLISION: "Target name already in use",
    FilesystemErrorKind.CROSS_DEVICE: "Cross-device move not supported",
    FilesystemErrorKind.DISK_FULL: "Insufficient disk space",
    FilesystemErrorKind.READ_ONLY: "Read-only filesystem",
    FilesystemErrorKind.UNCLASSIFIED: "Filesystem operation failed",
}

_HINTS: dict[FilesystemErrorKind, str] = {
    FilesystemErrorKind.PERMISSION_DENIED: (
        "Check that you own the files and directories involved and that they "
        "are writable, then try again."
    ),
    FilesystemErrorKind.SOURCE_VANISHED: (
        "A file or directory was removed while the operation was running. "
        "Make sure no other process is editing the plans directory and retry."
    ),
    FilesystemErrorKind.TARGET_COLLISION: (
        "Something that cannot be replaced (for example a directory) already "
        "exists at the destination. Move it out of the way and retry."
    ),
    FilesystemErrorKind.CROSS_DEVICE: (
        "The source and the destination are on different filesystems. Keep "
        "the archive directory on the same volume as the plans directory."
    ),
    FilesystemErrorKind.DISK_FULL: (
        "Free up disk space (or raise your quota) and try again."
    ),
    FilesystemErrorKind.READ_ONLY: (
        "The filesystem is mounted read-only. Remount it read-write or run "
        "the command from a writable location."
    ),
    FilesystemErrorKind.UNCLASSIFIED: (
        "Review the underlying error above and try again."
    ),
}

_RETRYABLE_KINDS = frozenset(
    {
        FilesystemErrorKind.SOURCE_VANISHED,
        FilesystemErrorKind.DISK_FULL,
        FilesystemErrorKind.UNCLASSIFIED,
    }
)


class FilesystemError(HoneError):
    """Raised when the operating system rejects a write, rename or delete.

    Attributes:
        kind: Classified failure category
        action: What hone was doing (e.g. "write", "archive")
        path: The path the failing call was made on
        subject: User-facing name of the thing being processed
        errno: Original errno value (if any)
    """

    def __init__(
        self,
        kind: FilesystemErrorKind,
        *,
        action: str,
        path: Path | str,
        subject: str | None = None,
        errno: int | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize FilesystemError.

        Args:
            kind: Classified failure category
            action: Verb describing the attempted operation
            path: Path involved in the failing call
            subject: Display name (file name or feature name)
            errno: Original errno value (optional)
            reason: Original OS error message (optional)
        """
        self.kind = kind
        self.action = action
        self.path = Path(path)
        self.subject = subject or self.path.name
        self.errno = errno
        self.reason = reason

        headline = f"{_HEADLINES[kind]} while trying to {action} {self.subject}"
        details = _HINTS[kind]
        if reason:
            details = f"Path: {path}\nError: {reason}\n\n{details}"

        super().__init__(headline, details)

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.kind in _RETRYABLE_KINDS

    @property
    def code(self) -> str:
        return f"filesystem_{self.kind.value}"

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["kind"] = self.kind.value
        result["path"] = str(self.path)
        result["subject"] = self.subject
        if self.errno is not None:
            result["errno"] = self.errno
        return result

    def __repr__(self) -> str:
        return (
            f"FilesystemError(kind={self.kind.value!r}, "
            f"action={self.action!r}, "
            f"path={str(self.path)!r})"
        )


def classify_os_error(
    exc: OSError,
    *,
    action: str,
    path: Path | str,
    subject: str | None = None,
) -> FilesystemError:
    """Translate an OSError into a classified FilesystemError.

    Args:
        exc: The error raised by the operating system
        action: Verb describing the attempted operation
        path: Path the failing call was made on
        subject: Display name for messages (defaults to the file name)

    Returns:
        FilesystemError ready to be raised (callers chain it with ``from exc``)
    """
    kind = _ERRNO_KINDS.get(exc.errno or -1, FilesystemErrorKind.UNCLASSIFIED)
    return FilesystemError(
        kind,
        action=action,
        path=path,
        subject=subject,
        errno=exc.errno,
        reason=exc.strerror or str(exc),
    )


def format_error(headline: str, details: str | None = None) -> str:
    """Format an error message in hone style with the ✗ symbol."""
    output = f"✗ {headline}"
    if details:
        output += f"\n\n{details}"
    return output
