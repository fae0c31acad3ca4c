"""Orchestration chains built on the filesystem layer."""

from hone.chains.extend_chain import ExtendChain, ExtendResult, derive_task_filename
from hone.chains.prune_chain import PruneChain, PruneReport

__all__ = [
    "ExtendChain",
    "ExtendResult",
    "PruneChain",
    "PruneReport",
    "derive_task_filename",
]
