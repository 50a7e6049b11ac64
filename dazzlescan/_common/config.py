"""Configuration system for DazzleScan.

This module defines how users specify a scan: how deep to go, how many
directory reads may be in flight, and how much each conduit may buffer.
It also holds the depth policy the traversal engine follows.
"""

import os
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol


UNLIMITED_DEPTH = -1


class Predicate(Protocol):
    """Capability interface for entry filters.

    Any callable taking ``(path, entry)`` and returning a bool qualifies,
    where ``entry`` is the ``os.DirEntry`` reported by the listing. A
    predicate must be total: if the entry metadata cannot be resolved it
    answers False instead of raising.
    """

    def __call__(self, path: str, entry: Any) -> bool:
        ...


def default_concurrency() -> int:
    """Number of directory reads allowed in flight by default.

    Half of the logical CPUs, never less than one.
    """
    return max(1, (os.cpu_count() or 1) // 2)


def should_descend(remaining_depth: int) -> bool:
    """Check if a directory at this depth budget may be recursed into.

    Args:
        remaining_depth: Levels left below the current directory;
            negative means unlimited

    Returns:
        True unless the budget is exhausted
    """
    return remaining_depth != 0


def next_depth(remaining_depth: int) -> int:
    """Depth budget handed to a child directory.

    Negative budgets are unlimited and propagate unchanged.
    """
    if remaining_depth < 0:
        return remaining_depth
    return remaining_depth - 1


def is_valid_depth(max_depth: Any) -> bool:
    """True for a plain integer depth (bool is rejected)."""
    return isinstance(max_depth, int) and not isinstance(max_depth, bool)


def check_depth(max_depth: Any) -> int:
    """Return ``max_depth`` or raise ValueError if it is not an integer."""
    if not is_valid_depth(max_depth):
        raise ValueError(f"max_depth must be an integer, got {max_depth!r}")
    return max_depth


@dataclass
class ScanConfig:
    """Configuration for a directory scan."""

    max_depth: int = UNLIMITED_DEPTH        # < 0 means no limit
    max_concurrent: Optional[int] = None    # Directory reads in flight
    buffer_size: int = 1                    # Items each conduit holds

    def __post_init__(self):
        self.ensure_valid()

    @property
    def concurrency(self) -> int:
        """Effective limiter capacity."""
        if self.max_concurrent is None:
            return default_concurrency()
        return self.max_concurrent

    @classmethod
    def shallow(cls, max_depth: int = 0) -> 'ScanConfig':
        """Create config that lists the root and stops.

        Args:
            max_depth: Extra levels to descend (default 0 = immediate children)

        Returns:
            ScanConfig for shallow scanning
        """
        return cls(max_depth=max_depth)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not is_valid_depth(self.max_depth):
            errors.append("max_depth must be an integer")

        if self.max_concurrent is not None and self.max_concurrent < 1:
            errors.append("max_concurrent must be at least 1")

        if self.buffer_size < 1:
            errors.append("buffer_size must be at least 1")

        return errors

    def ensure_valid(self) -> 'ScanConfig':
        """Raise ValueError if the configuration is inconsistent."""
        errors = self.validate()
        if errors:
            raise ValueError("Invalid scan configuration: " + "; ".join(errors))
        return self
