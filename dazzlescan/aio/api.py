"""High-level async API for DazzleScan.

``scan`` starts a traversal and hands back its two live conduits at once;
the caller consumes paths and errors while the tree is still being walked.
"""

import asyncio
from typing import Any, AsyncIterator, Dict, Optional, Tuple

from .._common.config import Predicate, ScanConfig, check_depth
from .._common.errors import ConduitClosedError, ScanError
from .conduit import AsyncConduit
from .engine import AsyncScanEngine
from .limiter import ConcurrencyLimiter

# (path, None) for a result, (None, error) for a failure
ScanEvent = Tuple[Optional[str], Optional[ScanError]]


class ScanStream:
    """Handle on a running scan.

    ``results`` and ``errors`` are closed together when the whole traversal
    completes; that is the only termination signal. Both must be drained,
    or producers stall waiting to emit.
    """

    def __init__(self, engine: AsyncScanEngine):
        self._engine = engine

    @property
    def results(self) -> AsyncConduit:
        """Conduit of accepted paths."""
        return self._engine.results

    @property
    def errors(self) -> AsyncConduit:
        """Conduit of ScanError instances."""
        return self._engine.errors

    @property
    def done(self) -> bool:
        """True once the traversal has finished."""
        return self._engine.finished

    async def wait(self) -> None:
        """Wait for the traversal to finish.

        Only returns if someone keeps draining both conduits.
        """
        await self._engine.wait()

    def get_stats(self) -> Dict[str, Any]:
        """Counters of the underlying engine."""
        return self._engine.get_stats()

    async def events(self) -> AsyncIterator[ScanEvent]:
        """Select over both conduits until both are closed.

        Yields:
            ``(path, None)`` for each result and ``(None, error)`` for each
            failure, in whatever order they arrive
        """
        sources = {'results': self.results, 'errors': self.errors}
        getters = {
            asyncio.ensure_future(conduit.get()): kind
            for kind, conduit in sources.items()
        }
        try:
            while getters:
                done, _ = await asyncio.wait(getters, return_when=asyncio.FIRST_COMPLETED)
                for future in done:
                    kind = getters.pop(future)
                    try:
                        item = future.result()
                    except ConduitClosedError:
                        continue
                    getters[asyncio.ensure_future(sources[kind].get())] = kind
                    if kind == 'results':
                        yield item, None
                    else:
                        yield None, item
        finally:
            # A getter may have finished while the consumer held the last
            # event; its item is already off the queue and must go back.
            for future, kind in getters.items():
                if not future.done():
                    future.cancel()
                elif not future.cancelled() and future.exception() is None:
                    sources[kind].unget(future.result())

    def __aiter__(self) -> AsyncIterator[ScanEvent]:
        return self.events()

    def __repr__(self) -> str:
        state = "done" if self.done else "running"
        return f"ScanStream({state}, outstanding={self._engine.outstanding})"


def scan(
    root: Any,
    max_depth: Optional[int] = None,
    predicate: Optional[Predicate] = None,
    *,
    config: Optional[ScanConfig] = None,
) -> ScanStream:
    """Start scanning a directory tree.

    Must be called from a running event loop. Returns immediately; the
    traversal proceeds in background tasks.

    Args:
        root: Directory to scan
        max_depth: Levels to descend below root (overrides config;
            negative means unlimited, 0 lists root only)
        predicate: Entry filter ``(path, entry) -> bool``; None accepts all
        config: Scan configuration

    Returns:
        ScanStream exposing the results and errors conduits

    Raises:
        ValueError: If max_depth is not an integer or config is invalid

    Example:
        >>> stream = scan('/data', predicate=filter_file)
        >>> async for path, error in stream:
        ...     print(path or error)
    """
    config = (config or ScanConfig()).ensure_valid()
    max_depth = check_depth(config.max_depth if max_depth is None else max_depth)

    engine = AsyncScanEngine(
        predicate,
        limiter=ConcurrencyLimiter(config.concurrency),
        results=AsyncConduit(config.buffer_size, name='results'),
        errors=AsyncConduit(config.buffer_size, name='errors'),
    )
    engine.start(root, max_depth)
    return ScanStream(engine)
