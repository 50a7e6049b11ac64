"""Collectors that turn a scan stream into a single answer.

The collector drains both conduits of a ScanStream to completion, keeps
accepted paths in discovery order and lets an ErrorPolicy decide which
failure to surface. Discovery order depends on scheduling, so it differs
between runs.
"""

from typing import Any, List, Optional, Tuple

from .._common.config import Predicate, ScanConfig
from .._common.errors import ScanError
from .api import ScanStream, scan
from .error_policies import ErrorPolicy, FirstErrorPolicy

ScanOutcome = Tuple[List[str], Optional[ScanError]]


class AsyncPathCollector:
    """Collects every accepted path plus the error chosen by a policy.

    Partial results are never thrown away: a scan with failures still
    returns every path found in the readable parts of the tree.
    """

    def __init__(self, policy: Optional[ErrorPolicy] = None):
        """Initialize collector.

        Args:
            policy: How to absorb failures (defaults to FirstErrorPolicy)
        """
        self.policy = policy or FirstErrorPolicy()
        self.reset()

    def reset(self):
        """Reset collected paths and the policy state."""
        self.paths: List[str] = []
        self.policy.reset()

    def get_result(self) -> ScanOutcome:
        """Get paths collected so far and the surfaced error."""
        return self.paths, self.policy.result()

    async def process_stream(self, stream: ScanStream) -> ScanOutcome:
        """Drain a scan until both conduits are closed.

        If the policy raises, the stream is still drained to the end so no
        producer is left blocked, then the exception is re-raised.

        Args:
            stream: A running scan

        Returns:
            Tuple of (paths in discovery order, surfaced error or None)
        """
        self.reset()
        abort: Optional[BaseException] = None

        async for path, error in stream.events():
            if error is None:
                self.paths.append(path)
            elif abort is None:
                try:
                    self.policy.handle(error)
                except Exception as e:
                    abort = e
        await stream.wait()

        if abort is not None:
            raise abort
        return self.get_result()


async def collect(
    root: Any,
    max_depth: Optional[int] = None,
    predicate: Optional[Predicate] = None,
    *,
    config: Optional[ScanConfig] = None,
    policy: Optional[ErrorPolicy] = None,
) -> ScanOutcome:
    """Scan a tree and gather the results into a list.

    Args:
        root: Directory to scan
        max_depth: Levels to descend below root; negative means unlimited
        predicate: Entry filter; None accepts all
        config: Scan configuration
        policy: Error policy (defaults to first-error-wins)

    Returns:
        Tuple of (paths in discovery order, first error or None)
    """
    stream = scan(root, max_depth, predicate, config=config)
    return await AsyncPathCollector(policy).process_stream(stream)
