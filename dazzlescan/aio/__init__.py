"""Asynchronous implementation of DazzleScan.

This package contains the native async/await traversal engine. Directory
reads run in worker threads and overlap up to the limiter's capacity;
results and errors stream out through two conduits.
"""

# Core building blocks
from .conduit import AsyncConduit
from .limiter import ConcurrencyLimiter
from .engine import AsyncScanEngine

# Error policies
from .error_policies import (
    ErrorPolicy,
    FirstErrorPolicy,
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    ThresholdPolicy,
)

# High-level API
from .api import ScanStream, scan
from .collector import AsyncPathCollector, collect

__all__ = [
    # Core
    'AsyncConduit',
    'ConcurrencyLimiter',
    'AsyncScanEngine',
    # Error policies
    'ErrorPolicy',
    'FirstErrorPolicy',
    'CollectErrorsPolicy',
    'ContinueOnErrorsPolicy',
    'ThresholdPolicy',
    # High-level API
    'ScanStream',
    'scan',
    'AsyncPathCollector',
    'collect',
]
