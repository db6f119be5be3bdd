"""Tests for SharedAwaitable and the internal helpers."""

import anyio
import pytest
from klaw_option._internal import SharedAwaitable, is_awaitable, noop_failure, stringify


class TestSharedAwaitable:
    """Tests for run-once awaiting."""

    @pytest.mark.asyncio
    async def test_runs_source_once(self):
        calls = 0

        async def source():
            nonlocal calls
            calls += 1
            return 'value'

        shared = SharedAwaitable(source())
        assert not shared.started
        assert await shared == 'value'
        assert await shared == 'value'
        assert await shared.get() == 'value'
        assert calls == 1
        assert shared.done

    @pytest.mark.asyncio
    async def test_none_result_is_a_value(self):
        async def source():
            return None

        shared = SharedAwaitable(source())
        assert await shared is None
        assert await shared is None

    @pytest.mark.asyncio
    async def test_error_is_replayed(self):
        async def source():
            raise KeyError('missing')

        shared = SharedAwaitable(source())
        with pytest.raises(KeyError):
            await shared
        with pytest.raises(KeyError):
            await shared

    @pytest.mark.asyncio
    async def test_replayed_traceback_is_stable(self):
        """Each re-raise starts from the traceback of the original failure."""

        async def source():
            raise KeyError('missing')

        shared = SharedAwaitable(source())
        depths = []
        for _ in range(3):
            with pytest.raises(KeyError) as exc_info:
                await shared
            depths.append(len(exc_info.traceback))
        assert depths[1] == depths[2]
        assert depths[0] >= depths[1]

    @pytest.mark.asyncio
    async def test_concurrent_awaiters_share_outcome(self):
        calls = 0
        results = []

        async def source():
            nonlocal calls
            calls += 1
            await anyio.sleep(0.01)
            return 7

        shared = SharedAwaitable(source())

        async def waiter():
            results.append(await shared)

        async with anyio.create_task_group() as tg:
            for _ in range(3):
                tg.start_soon(waiter)

        assert calls == 1
        assert results == [7, 7, 7]

    @pytest.mark.asyncio
    async def test_discard_before_start(self):
        async def source():
            return 1

        shared = SharedAwaitable(source())
        assert shared.discard() is True
        assert shared.done
        with pytest.raises(RuntimeError, match='discarded'):
            await shared

    @pytest.mark.asyncio
    async def test_discard_after_start_is_refused(self):
        async def source():
            return 1

        shared = SharedAwaitable(source())
        await shared
        assert shared.discard() is False
        assert await shared == 1

    @pytest.mark.asyncio
    async def test_cancelled_run_releases_waiters(self):
        async def source():
            await anyio.sleep(10)
            return 1

        shared = SharedAwaitable(source())

        async with anyio.create_task_group() as tg:
            tg.start_soon(shared.get)
            await anyio.sleep(0.01)
            tg.cancel_scope.cancel()

        assert shared.done
        with pytest.raises(RuntimeError, match='cancelled'):
            await shared

    def test_repr(self):
        async def source():
            return 1

        coro = source()
        shared = SharedAwaitable(coro)
        assert repr(shared) == 'SharedAwaitable(state=idle)'
        shared.discard()
        assert repr(shared) == 'SharedAwaitable(state=done)'


class TestHelpers:
    """Tests for stringify, is_awaitable, noop_failure."""

    def test_stringify_uses_repr(self):
        assert stringify('a') == "'a'"
        assert stringify([1, 2]) == '[1, 2]'

    def test_stringify_broken_repr(self):
        class Broken:
            def __repr__(self):
                raise RuntimeError('no')

        assert stringify(Broken()) == '<Broken object>'

    def test_stringify_limit(self):
        assert stringify(list(range(100)), limit=8) == '[0, 1...'
        assert stringify(12, limit=8) == '12'

    @pytest.mark.parametrize('limit', [1, 2, 3, 4, 5])
    def test_stringify_never_exceeds_limit(self, limit):
        """Tiny limits cut the text instead of padding it with an ellipsis."""
        assert len(stringify('abcdefgh', limit=limit)) == limit
        assert stringify('abcdefgh', limit=2) == "'a"

    def test_is_awaitable(self):
        async def coro():
            return 1

        c = coro()
        assert is_awaitable(c)
        c.close()
        assert not is_awaitable(1)
        assert not is_awaitable(lambda: None)

    def test_noop_failure(self):
        assert noop_failure(ValueError('x')) is None
