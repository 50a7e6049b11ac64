"""Blocking entry points for callers without an event loop."""

import asyncio
from typing import Any, List, Optional, Tuple

from .._common.config import Predicate, ScanConfig
from .._common.errors import ScanError
from ..aio.collector import collect
from ..aio.error_policies import ErrorPolicy


def scan_sync(
    root: Any,
    max_depth: Optional[int] = None,
    predicate: Optional[Predicate] = None,
    *,
    config: Optional[ScanConfig] = None,
    policy: Optional[ErrorPolicy] = None,
) -> Tuple[List[str], Optional[ScanError]]:
    """Scan a directory tree and wait for the whole result.

    Runs the streaming scan on a fresh event loop and drains it. Every
    accepted path is returned, even when some directories failed; the
    first failure observed is returned alongside.

    Args:
        root: Directory to scan
        max_depth: Levels to descend below root; negative means unlimited
        predicate: Entry filter ``(path, entry) -> bool``; None accepts all
        config: Scan configuration
        policy: Error policy (defaults to first-error-wins)

    Returns:
        Tuple of (paths in discovery order, first error or None)

    Raises:
        RuntimeError: If called from inside a running event loop
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError(
            "scan_sync() cannot be called from a running event loop; "
            "await dazzlescan.aio.collect() instead"
        )
    return asyncio.run(collect(root, max_depth, predicate, config=config, policy=policy))
