"""Crash-consistent filesystem mutations for hone.

This package provides atomic single-file writes, ordered multi-file write
transactions, and two-phase archival moves confined to a managed root.
"""

from hone.fs.archive import (
    FileMoveOperation,
    Triplet,
    archive_file,
    archive_triplet,
)
from hone.fs.atomic import (
    AtomicFileOperation,
    AtomicTransaction,
    OperationState,
    atomic_write_file,
    commit_atomic_write,
    prepare_atomic_write,
    rollback_atomic_write,
)
from hone.fs.paths import normalize_path, temp_path_for, validate_within_root

__all__ = [
    "AtomicFileOperation",
    "AtomicTransaction",
    "FileMoveOperation",
    "OperationState",
    "Triplet",
    "archive_file",
    "archive_triplet",
    "atomic_write_file",
    "commit_atomic_write",
    "normalize_path",
    "prepare_atomic_write",
    "rollback_atomic_write",
    "temp_path_for",
    "validate_within_root",
]
