"""SharedAwaitable: run an awaitable once, hand its outcome to every awaiter."""

from __future__ import annotations

from collections.abc import Awaitable, Generator
from enum import Enum
from types import TracebackType
from typing import Any

import anyio

__all__ = ['SharedAwaitable']


class _State(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    DONE = 'done'


class SharedAwaitable[T]:
    """Memoising wrapper around a single-shot awaitable.

    Coroutines can only be awaited once. SharedAwaitable drives the source on
    the first await and stores either its value or its exception; every later
    or concurrent await gets the same outcome. Concurrent awaiters park on an
    ``anyio.Event`` until the first one settles, so this works under any
    anyio backend.

    Example:
        ```python
        shared = SharedAwaitable(fetch())
        a, b = await shared, await shared  # fetch() ran once
        ```
    """

    __slots__ = ('_error', '_settled', '_source', '_state', '_traceback', '_value')

    def __init__(self, source: Awaitable[T]) -> None:
        self._source: Awaitable[T] | None = source
        self._state = _State.IDLE
        self._value: T | None = None
        self._error: BaseException | None = None
        self._traceback: TracebackType | None = None
        self._settled: anyio.Event | None = None

    @property
    def started(self) -> bool:
        """True once the source has been driven (or discarded)."""
        return self._state is not _State.IDLE

    @property
    def done(self) -> bool:
        """True once the outcome is known."""
        return self._state is _State.DONE

    def __await__(self) -> Generator[Any, Any, T]:
        return self.get().__await__()

    async def get(self) -> T:
        """Await the source (once) and return its value or raise its error."""
        if self._state is _State.IDLE:
            await self._run()
        elif self._state is _State.RUNNING:
            assert self._settled is not None
            await self._settled.wait()

        if self._error is not None:
            # every awaiter sees the traceback captured when the source failed
            raise self._error.with_traceback(self._traceback)
        return self._value  # type: ignore[return-value]

    def discard(self) -> bool:
        """Drop a source that has not started yet.

        Coroutine sources are closed so they never warn about not being
        awaited. Later awaits raise RuntimeError.

        Returns:
            True if the source was discarded, False if it had already started.
        """
        if self._state is not _State.IDLE:
            return False
        close = getattr(self._source, 'close', None)
        if callable(close):
            close()
        self._source = None
        self._error = RuntimeError('awaitable was discarded before it ran')
        self._state = _State.DONE
        return True

    async def _run(self) -> None:
        source = self._source
        assert source is not None
        self._state = _State.RUNNING
        self._settled = anyio.Event()
        settled = False
        try:
            self._value = await source
            settled = True
        except Exception as exc:
            self._error = exc
            self._traceback = exc.__traceback__
            settled = True
        finally:
            if not settled:
                # Cancelled mid-flight; parked awaiters must not hang.
                self._error = RuntimeError('awaitable was cancelled before it settled')
            self._state = _State.DONE
            self._source = None
            self._settled.set()

    def __repr__(self) -> str:
        return f'SharedAwaitable(state={self._state.value})'
