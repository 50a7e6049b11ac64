"""Testing utilities for DazzleScan consumers."""

from .fixtures import build_tree, build_wide_tree, reference_listing, summarize

__all__ = ['build_tree', 'build_wide_tree', 'reference_listing', 'summarize']
