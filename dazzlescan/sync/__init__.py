"""Synchronous interface of DazzleScan.

Wraps the async engine for code that does not run an event loop:

    from dazzlescan.sync import scan_sync

    paths, error = scan_sync("/data", max_depth=2)
"""

from .api import scan_sync

__all__ = [
    'scan_sync',
]
