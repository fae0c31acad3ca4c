"""Path utilities for filesystem operations.

This module provides path normalization, managed-root confinement and
temp-path derivation for the atomic write and archive operations.
"""

import os
import uuid
from pathlib import Path

from hone.core.errors import TraversalError, classify_os_error
from hone.utils.debug import debug

TEMP_MARKER = ".tmp."


def normalize_path(path: Path | str, root: Path | None = None) -> Path:
    """Normalize a path for consistent handling.

    ``~`` is expanded and ``..`` segments are collapsed, but symlinks are
    left in place so the result still names the entry the caller meant.

    Args:
        path: Path to normalize
        root: Optional root directory for relative paths (defaults to cwd)

    Returns:
        Normalized absolute path
    """
    # Convert to Path if needed
    if not isinstance(path, Path):
        path = Path(path)

    path = path.expanduser()

    # Make absolute using root if provided
    if not path.is_absolute():
        base = normalize_path(root) if root is not None else Path.cwd()
        path = base / path

    return Path(os.path.normpath(path))


def _escapes(root: Path, candidate: Path) -> bool:
    relative = os.path.relpath(candidate, root)
    first_part = Path(relative).parts[0] if relative != os.curdir else relative
    return first_part == os.pardir or os.path.isabs(relative)


def validate_within_root(root: Path | str, candidate: Path | str) -> Path:
    """Confine a candidate path to the managed root directory.

    The candidate must stay inside ``root`` both as written and with every
    symlink followed, and a relative candidate is taken relative to
    ``root``. No filesystem entry is created, renamed or deleted here.

    Args:
        root: Managed root directory
        candidate: Path supplied by the caller

    Returns:
        Absolute path of the candidate itself (a symlink is not followed)

    Raises:
        TraversalError: If the candidate lies or points outside of ``root``
    """
    lexical_root = normalize_path(root)
    lexical = normalize_path(candidate, lexical_root)

    if _escapes(lexical_root, lexical) or _escapes(
        lexical_root.resolve(), lexical.resolve()
    ):
        debug(f"Rejected path outside root: {candidate} -> {lexical.resolve()}")
        raise TraversalError(candidate, lexical_root)

    return lexical


def temp_path_for(target: Path | str) -> Path:
    """Derive a hidden, collision-resistant sibling temp path for ``target``.

    The result looks like ``<dir>/.<name>.tmp.<8 hex chars>`` so that the
    final rename stays within one directory (and therefore one filesystem).

    Args:
        target: Final destination path

    Returns:
        Temp path in the same directory as ``target``
    """
    target = Path(target)
    suffix = uuid.uuid4().hex[:8]
    return target.parent / f".{target.name}{TEMP_MARKER}{suffix}"


def ensure_dir(path: Path, *, subject: str | None = None) -> None:
    """Ensure a directory exists, creating parents as needed.

    Args:
        path: Directory that should exist
        subject: Display name used if creation fails

    Raises:
        FilesystemError: If the directory cannot be created
    """
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
        debug(f"Created directory: {path}")
    except OSError as e:
        raise classify_os_error(
            e, action="create directory", path=path, subject=subject or path.name
        ) from e
