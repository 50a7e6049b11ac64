"""DazzleScan - Concurrent Directory Scanning Library.

DazzleScan walks a directory tree in parallel and streams matching paths
and directory-read errors to the caller as they are discovered. The number
of directory reads in flight is capped, every reachable entry is visited
exactly once, and one unreadable directory never fails the whole scan.

Choose your interface:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Streaming (inside an event loop):
    from dazzlescan.aio import scan, collect

Blocking:
    from dazzlescan.sync import scan_sync
━━━━━━━━━━━━━━━━━━━━━━━━━━

Filters live in ``dazzlescan.predicates``; platform helpers (hidden files,
application directories) live in ``dazzlescan.platform``.
"""

import logging

__version__ = "0.1.0"

from ._common import (
    UNLIMITED_DEPTH,
    ConduitClosedError,
    Predicate,
    ScanConfig,
    ScanError,
    default_concurrency,
)

# Re-export submodules for convenient access
from . import aio
from . import sync
from . import predicates

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "UNLIMITED_DEPTH",
    "ConduitClosedError",
    "Predicate",
    "ScanConfig",
    "ScanError",
    "default_concurrency",
    "aio",
    "sync",
    "predicates",
]
