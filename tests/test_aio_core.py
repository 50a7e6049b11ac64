"""Tests for async core building blocks: conduit, limiter and engine."""

import asyncio
import os

import pytest

from dazzlescan import ConduitClosedError, ScanError
from dazzlescan.aio import AsyncConduit, AsyncScanEngine, ConcurrencyLimiter
from dazzlescan.testing import reference_listing


async def drain(engine):
    """Read both conduits of an engine until they close."""
    async def read_all(conduit):
        return [item async for item in conduit]

    return await asyncio.gather(read_all(engine.results), read_all(engine.errors))


# Tests for AsyncConduit

@pytest.mark.asyncio
async def test_conduit_delivers_items_then_closes():
    """Items written before close are all read, then iteration stops."""
    conduit = AsyncConduit(maxsize=4, name='test')

    await conduit.put('a')
    await conduit.put('b')
    await conduit.close()

    assert [item async for item in conduit] == ['a', 'b']
    assert conduit.closed
    assert conduit.drained
    assert conduit.count == 2


@pytest.mark.asyncio
async def test_conduit_rejects_double_close():
    """A conduit is closed exactly once."""
    conduit = AsyncConduit(name='once')
    await conduit.close()

    with pytest.raises(ConduitClosedError) as exc_info:
        await conduit.close()
    assert "once" in str(exc_info.value)


@pytest.mark.asyncio
async def test_conduit_rejects_put_after_close():
    """No write may happen after closing."""
    conduit = AsyncConduit()
    await conduit.close()

    with pytest.raises(ConduitClosedError):
        await conduit.put('late')


@pytest.mark.asyncio
async def test_conduit_get_after_drain_keeps_raising():
    """Once the end has been seen, every later get reports it too."""
    conduit = AsyncConduit()
    await conduit.close()

    with pytest.raises(ConduitClosedError):
        await conduit.get()
    with pytest.raises(ConduitClosedError):
        await conduit.get()


@pytest.mark.asyncio
async def test_conduit_put_blocks_while_full():
    """Producers wait for the consumer once the buffer is full."""
    conduit = AsyncConduit(maxsize=1)
    await conduit.put(1)

    blocked = asyncio.ensure_future(conduit.put(2))
    await asyncio.sleep(0.01)
    assert not blocked.done()

    assert await conduit.get() == 1
    await asyncio.wait_for(blocked, timeout=1)
    assert await conduit.get() == 2


@pytest.mark.asyncio
async def test_conduit_unget_returns_item_first():
    """A handed-back item is read again before the buffered ones."""
    conduit = AsyncConduit(maxsize=4)
    await conduit.put('a')
    await conduit.put('b')
    await conduit.close()

    taken = await conduit.get()
    conduit.unget(taken)

    assert [item async for item in conduit] == ['a', 'b']
    assert conduit.count == 2


def test_conduit_rejects_zero_buffer():
    """An unbounded or zero-sized buffer is not allowed."""
    with pytest.raises(ValueError):
        AsyncConduit(maxsize=0)


# Tests for ConcurrencyLimiter

@pytest.mark.asyncio
async def test_limiter_defaults_to_half_the_cpus():
    """Default capacity is half the logical CPUs, at least one."""
    limiter = ConcurrencyLimiter()
    assert limiter.capacity == max(1, (os.cpu_count() or 1) // 2)
    assert limiter.available == limiter.capacity


@pytest.mark.asyncio
async def test_limiter_blocks_when_exhausted():
    """acquire waits until a slot is released."""
    limiter = ConcurrencyLimiter(1)
    await limiter.acquire()
    assert limiter.in_flight == 1
    assert limiter.available == 0

    waiter = asyncio.ensure_future(limiter.acquire())
    await asyncio.sleep(0.01)
    assert not waiter.done()

    limiter.release()
    await asyncio.wait_for(waiter, timeout=1)
    assert limiter.in_flight == 1
    limiter.release()
    assert limiter.peak == 1


@pytest.mark.asyncio
async def test_limiter_context_manager_releases_on_error():
    """The slot is returned even when the guarded block raises."""
    limiter = ConcurrencyLimiter(2)

    with pytest.raises(OSError):
        async with limiter:
            assert limiter.in_flight == 1
            raise OSError("read failed")

    assert limiter.in_flight == 0
    assert limiter.available == 2


@pytest.mark.asyncio
async def test_limiter_rejects_over_release():
    """Releasing more than was acquired is a bug."""
    limiter = ConcurrencyLimiter(1)
    with pytest.raises(RuntimeError):
        limiter.release()


def test_limiter_rejects_zero_capacity():
    """Capacity must be positive."""
    with pytest.raises(ValueError):
        ConcurrencyLimiter(0)


# Tests for AsyncScanEngine

@pytest.mark.asyncio
async def test_engine_scans_whole_tree(sample_tree):
    """The engine reports every entry under root exactly once."""
    engine = AsyncScanEngine(limiter=ConcurrencyLimiter(2))
    engine.start(sample_tree, -1)

    results, errors = await drain(engine)
    await engine.wait()

    assert errors == []
    assert len(results) == len(set(results))
    assert set(results) == reference_listing(sample_tree)
    assert engine.finished
    assert engine.outstanding == 0


@pytest.mark.asyncio
async def test_engine_closes_conduits_once_done(sample_tree):
    """Both conduits are closed when the traversal has finished."""
    engine = AsyncScanEngine()
    engine.start(sample_tree, 0)
    await drain(engine)
    await engine.wait()

    assert engine.results.closed
    assert engine.errors.closed
    with pytest.raises(ConduitClosedError):
        await engine.results.put('late')


@pytest.mark.asyncio
async def test_engine_can_only_start_once(sample_tree):
    """One engine runs one scan."""
    engine = AsyncScanEngine()
    engine.start(sample_tree, 0)
    with pytest.raises(RuntimeError):
        engine.start(sample_tree, 0)
    await drain(engine)


@pytest.mark.asyncio
async def test_engine_rejects_non_integer_depth(sample_tree):
    """The engine refuses a depth it cannot count down to zero."""
    engine = AsyncScanEngine()
    with pytest.raises(ValueError):
        engine.start(sample_tree, 0.5)
    assert engine.outstanding == 0


@pytest.mark.asyncio
async def test_engine_reports_missing_root(tmp_path):
    """An unreadable root gives no results and exactly one error."""
    missing = tmp_path / 'missing'
    engine = AsyncScanEngine()
    engine.start(missing, -1)

    results, errors = await drain(engine)

    assert results == []
    assert len(errors) == 1
    assert isinstance(errors[0], ScanError)
    assert isinstance(errors[0].cause, FileNotFoundError)
    assert errors[0].path == str(missing)
    assert engine.get_stats()['directories_failed'] == 1


@pytest.mark.asyncio
async def test_engine_reports_file_root(tmp_path):
    """Scanning a regular file reports not-a-directory."""
    target = tmp_path / 'plain.txt'
    target.write_text('x')
    engine = AsyncScanEngine()
    engine.start(target, -1)

    results, errors = await drain(engine)

    assert results == []
    assert len(errors) == 1
    assert isinstance(errors[0].cause, NotADirectoryError)


@pytest.mark.asyncio
async def test_engine_recurses_into_rejected_directories(sample_tree):
    """Filtering and traversal are independent: rejected dirs are still walked."""
    def only_python(path, entry):
        return entry.name.endswith('.py') and not entry.is_dir()

    engine = AsyncScanEngine(only_python)
    engine.start(sample_tree, -1)
    results, errors = await drain(engine)

    assert errors == []
    assert str(sample_tree / 'src' / 'deep' / 'deeper' / 'deepest' / 'bottom.py') in results
    assert str(sample_tree / 'src' / 'pkg.py' / '__init__.py') in results
    assert str(sample_tree / 'src' / 'deep') not in results


@pytest.mark.asyncio
async def test_engine_treats_predicate_oserror_as_rejection(sample_tree):
    """A predicate whose metadata lookup fails simply rejects the entry."""
    def flaky(path, entry):
        if entry.name == 'main.py':
            raise FileNotFoundError(path)
        return True

    engine = AsyncScanEngine(flaky)
    engine.start(sample_tree, -1)
    results, errors = await drain(engine)

    assert errors == []
    assert str(sample_tree / 'src' / 'main.py') not in results
    assert str(sample_tree / 'src' / 'util.py') in results


@pytest.mark.asyncio
async def test_engine_reports_broken_predicate_as_error(sample_tree):
    """A predicate raising anything else fails that directory only."""
    def broken(path, entry):
        if entry.name == 'guide.txt':
            raise ValueError("bad predicate")
        return True

    engine = AsyncScanEngine(broken)
    engine.start(sample_tree, -1)
    results, errors = await drain(engine)
    await engine.wait()

    assert len(errors) == 1
    assert errors[0].path == str(sample_tree / 'docs')
    assert isinstance(errors[0].cause, ValueError)
    # Other sub-trees are unaffected
    assert str(sample_tree / 'src' / 'main.py') in results
    assert engine.outstanding == 0


@pytest.mark.asyncio
async def test_engine_stats(sample_tree):
    """get_stats reflects the finished scan."""
    engine = AsyncScanEngine(limiter=ConcurrencyLimiter(3))
    engine.start(sample_tree, -1)
    results, _ = await drain(engine)
    await engine.wait()

    stats = engine.get_stats()
    # root, docs, images, src, pkg.py, deep, deeper, deepest, hollow
    assert stats['directories_read'] == 9
    assert stats['directories_failed'] == 0
    assert stats['results'] == len(results)
    assert stats['errors'] == 0
    assert stats['max_concurrent'] == 3
    assert 1 <= stats['peak_concurrent'] <= 3
    assert stats['finished'] is True
