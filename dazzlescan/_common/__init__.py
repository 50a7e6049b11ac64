"""Common components shared across DazzleScan.

This internal package contains non-I/O code: configuration, the depth
policy and the exception types. It should NOT be imported directly by
users; the public names are re-exported from the top-level package.

Important: This package must NEVER import from aio or sync to avoid
circular dependencies.
"""

from .config import (
    UNLIMITED_DEPTH,
    Predicate,
    ScanConfig,
    default_concurrency,
    next_depth,
    should_descend,
)
from .errors import ConduitClosedError, ScanError

__all__ = [
    'UNLIMITED_DEPTH',
    'Predicate',
    'ScanConfig',
    'default_concurrency',
    'next_depth',
    'should_descend',
    'ConduitClosedError',
    'ScanError',
]
