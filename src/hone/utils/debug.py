"""Trace output for the hone filesystem layer.

The fs modules never raise from their cleanup paths (temp removal after a
failed commit, moving a staged file back after a failed archive). Those
outcomes would otherwise be invisible, so each stage, commit, rollback and
undo step calls ``debug()`` with the paths involved.

Set ``HONE_DEBUG`` to ``1``, ``true`` or ``yes`` to see the trace::

    $ HONE_DEBUG=1 hone prune --dry-run
    [DEBUG] Skipping missing member of auth: /work/.plans/progress-auth.txt
"""

import os
import sys
from typing import Any

# Read once; tests reload the module to flip it
_DEBUG_ENABLED = os.environ.get("HONE_DEBUG", "").lower() in ("1", "true", "yes")


def debug(msg: Any) -> None:
    """Write ``[DEBUG] <msg>`` to stdout when tracing is enabled."""
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stdout)
