"""Async traversal engine.

Walks a directory tree by fanning out one task per directory. Scheduling a
task is cheap and unbounded; the directory read itself waits for a slot
from the ConcurrencyLimiter. Listings run in worker threads via
``asyncio.to_thread`` so several reads overlap.

Completion is tracked with an outstanding-task counter: the spawner
increments it before scheduling, each task decrements it on exit, and the
task that brings it back to zero closes both conduits.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional, Set, Tuple

from .._common.config import Predicate, check_depth, next_depth, should_descend
from .._common.errors import ScanError
from .conduit import AsyncConduit
from .limiter import ConcurrencyLimiter

logger = logging.getLogger(__name__)

# (child path, accepted by predicate, is a directory)
Child = Tuple[str, bool, bool]


def _matches(predicate: Optional[Predicate], path: str, entry: os.DirEntry) -> bool:
    if predicate is None:
        return True
    try:
        return bool(predicate(path, entry))
    except OSError:
        # Metadata vanished or became unreadable mid-scan
        return False


def _is_directory(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _read_directory(path: str, predicate: Optional[Predicate]) -> List[Child]:
    """List a directory and evaluate the predicate for each child.

    Runs in a worker thread, so predicate stat calls stay off the loop.
    Children keep the order the listing returns them in.
    """
    children = []
    with os.scandir(path) as iterator:
        for entry in iterator:
            children.append((entry.path, _matches(predicate, entry.path, entry), _is_directory(entry)))
    return children


class AsyncScanEngine:
    """Recursive, bounded-concurrency directory scanner.

    One engine runs one scan. Accepted paths go to ``results``, directory
    read failures go to ``errors`` as ScanError. Both conduits are closed
    exactly once, after the root task and every descendant have finished.
    """

    def __init__(
        self,
        predicate: Optional[Predicate] = None,
        *,
        limiter: Optional[ConcurrencyLimiter] = None,
        results: Optional[AsyncConduit] = None,
        errors: Optional[AsyncConduit] = None,
    ):
        """Initialize engine.

        Args:
            predicate: Entry filter; None accepts everything
            limiter: Limiter gating directory reads (default sized from CPUs)
            results: Conduit receiving accepted paths
            errors: Conduit receiving ScanError instances
        """
        self.predicate = predicate
        self.limiter = limiter or ConcurrencyLimiter()
        self.results = results if results is not None else AsyncConduit(name='results')
        self.errors = errors if errors is not None else AsyncConduit(name='errors')

        self._outstanding = 0
        self._tasks: Set[asyncio.Task] = set()
        self._finished = asyncio.Event()
        self._started = False

        self.directories_read = 0
        self.directories_failed = 0

    @property
    def outstanding(self) -> int:
        """Tasks spawned but not yet finished."""
        return self._outstanding

    @property
    def finished(self) -> bool:
        """True once both conduits have been closed."""
        return self._finished.is_set()

    def start(self, root: Any, max_depth: int) -> None:
        """Launch the root task.

        Must be called from a running event loop. Returns immediately.

        Args:
            root: Directory to scan (str or PathLike)
            max_depth: Levels to descend below root; negative means unlimited
        """
        max_depth = check_depth(max_depth)
        if self._started:
            raise RuntimeError("AsyncScanEngine can only be started once")
        self._started = True
        root = os.fspath(root)
        logger.debug("Starting scan of %s (max_depth=%d, capacity=%d)",
                     root, max_depth, self.limiter.capacity)
        # The root is never throttled; the limiter only gates descendants
        self._spawn(root, max_depth, gated=False)

    async def wait(self) -> None:
        """Wait until the traversal has finished and both conduits are closed."""
        await self._finished.wait()

    def _spawn(self, path: str, remaining_depth: int, gated: bool = True) -> None:
        self._outstanding += 1
        task = asyncio.get_running_loop().create_task(self._run(path, remaining_depth, gated))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, path: str, remaining_depth: int, gated: bool) -> None:
        try:
            if gated:
                async with self.limiter:
                    await self.traverse(path, remaining_depth)
            else:
                await self.traverse(path, remaining_depth)
        except Exception as e:
            # A predicate broke its contract; report it like a failed directory
            logger.exception("Unexpected error while scanning %s", path)
            await self.errors.put(ScanError(path, e))
        finally:
            self._outstanding -= 1
            if self._outstanding == 0:
                await self._close()

    async def traverse(self, path: str, remaining_depth: int) -> None:
        """Process one directory.

        Emits accepted children, spawns a task per sub-directory while the
        depth budget allows, and reports a read failure as a single error.
        Rejection by the predicate never prevents recursion.

        Args:
            path: Directory to list
            remaining_depth: Depth budget for this directory
        """
        try:
            children = await asyncio.to_thread(_read_directory, path, self.predicate)
        except OSError as e:
            self.directories_failed += 1
            logger.debug("Cannot read %s: %s", path, e)
            await self.errors.put(ScanError(path, e))
            return

        self.directories_read += 1
        descend = should_descend(remaining_depth)

        for child_path, accepted, is_dir in children:
            if accepted:
                await self.results.put(child_path)
            if descend and is_dir:
                self._spawn(child_path, next_depth(remaining_depth))

    async def _close(self) -> None:
        logger.debug("Scan finished: %d directories read, %d failed, %d results",
                     self.directories_read, self.directories_failed, self.results.count)
        await self.results.close()
        await self.errors.close()
        self._finished.set()

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics.

        Returns:
            Dictionary of counters for this scan
        """
        return {
            'directories_read': self.directories_read,
            'directories_failed': self.directories_failed,
            'results': self.results.count,
            'errors': self.errors.count,
            'outstanding': self._outstanding,
            'max_concurrent': self.limiter.capacity,
            'peak_concurrent': self.limiter.peak,
            'finished': self.finished,
        }
