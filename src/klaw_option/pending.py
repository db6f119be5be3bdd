"""PendingOption: an Option that is still being computed.

PendingOption wraps an ``Awaitable[Option[T]]`` and offers the Option
combinators over it. Every combinator returns a new PendingOption; nothing
runs until the chain is awaited.

Example:
    ```python
    async def find_user(id: int) -> Option[User]:
        ...

    name = await (
        PendingOption(find_user(1))
        .filter(lambda u: u.active)
        .map(lambda u: u.name)
        .unwrap_or('anonymous')
    )
    ```
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Coroutine, Generator
from typing import Any

import anyio

from klaw_option._internal.helpers import is_awaitable
from klaw_option._internal.shared import SharedAwaitable
from klaw_option._logging import get_logger, log_swallowed
from klaw_option.option import Option, and_opt, none, or_opt, some, xor_opt
from klaw_option.result import Err, Ok

__all__ = ['PendingOption']

logger = get_logger(__name__)


class PendingOption[T]:
    """Async-aware Option wrapper.

    Unlike a bare coroutine, a PendingOption can be awaited any number of
    times: the source runs once and its outcome is shared. If the source
    raises (or resolves to something that is not an Option), the
    PendingOption resolves to ``none()``, the same way a failing
    ``Option.map`` callback degrades to Nothing.

    Each await hands back a fresh copy, so mutating the Option you got from
    one await does not affect the next.

    Example:
        ```python
        async def example():
            pending = some(2).and_(fetch_option())
            assert isinstance(pending, PendingOption)
            assert await pending == some(3)
        ```
    """

    __slots__ = ('_ready', '_shared')

    def __init__(self, source: Option[T] | Awaitable[Option[T]]) -> None:
        """Lift an Option, a PendingOption or an awaitable of an Option.

        Raises:
            TypeError: If source is none of those.
        """
        self._ready: Option[T] | None = None
        self._shared: SharedAwaitable[Any] | None = None
        if isinstance(source, PendingOption):
            self._ready = source._ready
            self._shared = source._shared
        elif isinstance(source, Option):
            self._ready = source.clone()
        elif is_awaitable(source):
            self._shared = SharedAwaitable(source)
        else:
            msg = f'PendingOption expects an Option or an awaitable, got {type(source).__name__}'
            raise TypeError(msg)

    @classmethod
    def from_option(cls, option: Option[T]) -> PendingOption[T]:
        """Create an already-settled PendingOption."""
        return cls(option)

    def __await__(self) -> Generator[Any, Any, Option[T]]:
        return self._resolve().__await__()

    async def _resolve(self) -> Option[T]:
        if self._ready is not None:
            return self._ready.clone()
        assert self._shared is not None
        try:
            value = await self._shared
        except Exception as exc:
            log_swallowed(logger, 'pending', exc)
            return none()
        if not isinstance(value, Option):
            return none()
        return value.clone()

    # --- Combining ---

    def and_[U](self, x: Option[U] | Awaitable[Option[U]]) -> PendingOption[U]:
        """none() if this resolves empty, otherwise x."""
        other = PendingOption(x)

        async def _and() -> Option[U]:
            return and_opt(await self, await other)

        return PendingOption(_and())

    def or_(self, x: Option[T] | Awaitable[Option[T]]) -> PendingOption[T]:
        """This option if it resolves occupied, otherwise x."""
        other = PendingOption(x)

        async def _or() -> Option[T]:
            return or_opt(await self, await other)

        return PendingOption(_or())

    def xor(self, y: Option[T] | Awaitable[Option[T]]) -> PendingOption[T]:
        """Occupied side if exactly one side resolves occupied, else none().

        Both sides are awaited concurrently.
        """
        other = PendingOption(y)

        async def _xor() -> Option[T]:
            left, right = await _gather(self, other)
            return xor_opt(left, right)

        return PendingOption(_xor())

    def zip[U](self, other: Option[U] | Awaitable[Option[U]]) -> PendingOption[tuple[T, U]]:
        """some((a, b)) if both sides resolve occupied, else none().

        Both sides are awaited concurrently.
        """
        pending = PendingOption(other)

        async def _zipped() -> Option[tuple[T, U]]:
            left, right = await _gather(self, pending)
            if left.is_some() and right.is_some():
                return some((left.unwrap(), right.unwrap()))
            return none()

        return PendingOption(_zipped())

    # --- Derivation (callback failures degrade to Nothing) ---

    def and_then[U](self, f: Callable[[T], Option[U] | Awaitable[Option[U]]]) -> PendingOption[U]:
        """Chain with f, which may return an Option or an awaitable of one."""

        async def _chained() -> Option[U]:
            option = await self
            if option.is_none():
                return none()
            try:
                outcome = f(option.unwrap())
            except Exception as exc:
                log_swallowed(logger, 'and_then', exc)
                return none()
            return await _settle(outcome)

        return PendingOption(_chained())

    def or_else(self, f: Callable[[], Option[T] | Awaitable[Option[T]]]) -> PendingOption[T]:
        """This option if occupied, otherwise the Option produced by f."""

        async def _recovered() -> Option[T]:
            option = await self
            if option.is_some():
                return option
            try:
                outcome = f()
            except Exception as exc:
                log_swallowed(logger, 'or_else', exc)
                return none()
            return await _settle(outcome)

        return PendingOption(_recovered())

    def map[U](self, f: Callable[[T], U | Awaitable[U]]) -> PendingOption[U]:
        """Transform the value with a sync or async function.

        Example:
            ```python
            async def double(x: int) -> int:
                return x * 2

            assert await PendingOption(some(5)).map(double) == some(10)
            ```
        """

        async def _mapped() -> Option[U]:
            option = await self
            if option.is_none():
                return none()
            try:
                value = f(option.unwrap())
                if is_awaitable(value):
                    value = await value
            except Exception as exc:
                log_swallowed(logger, 'map', exc)
                return none()
            return some(value)

        return PendingOption(_mapped())

    def filter(self, f: Callable[[T], bool | Awaitable[bool]]) -> PendingOption[T]:
        """Keep the value only if the (sync or async) predicate holds."""

        async def _filtered() -> Option[T]:
            option = await self
            if option.is_none():
                return none()
            try:
                keep = f(option.unwrap())
                if is_awaitable(keep):
                    keep = await keep
            except Exception as exc:
                log_swallowed(logger, 'filter', exc)
                return none()
            return option if keep else none()

        return PendingOption(_filtered())

    def inspect(self, f: Callable[[T], object]) -> PendingOption[T]:
        """Call f with the value for side effects. Failures of f are ignored."""

        async def _inspected() -> Option[T]:
            option = await self
            if option.is_some():
                try:
                    seen = f(option.unwrap())
                    if is_awaitable(seen):
                        await seen
                except Exception as exc:
                    log_swallowed(logger, 'inspect', exc)
            return option

        return PendingOption(_inspected())

    # --- Terminal ---

    def is_some(self) -> Coroutine[Any, Any, bool]:
        """Coroutine: True if this resolves occupied."""

        async def _is_some() -> bool:
            return (await self).is_some()

        return _is_some()

    def is_none(self) -> Coroutine[Any, Any, bool]:
        """Coroutine: True if this resolves empty."""

        async def _is_none() -> bool:
            return (await self).is_none()

        return _is_none()

    def unwrap_or(self, default: T) -> Coroutine[Any, Any, T]:
        """Coroutine: the value, or default if this resolves empty."""

        async def _unwrap() -> T:
            return (await self).unwrap_or(default)

        return _unwrap()

    def match[U, F](self, f: Callable[[T], U], g: Callable[[], F]) -> Coroutine[Any, Any, U | F]:
        """Coroutine: Option.match on the resolved option.

        Raises:
            OptionError: PredicateException, if the branch that runs raises.
        """

        async def _matched() -> U | F:
            return (await self).match(f, g)

        return _matched()

    def ok_or[E](self, e: E) -> Coroutine[Any, Any, Ok[T] | Err[E]]:
        """Coroutine: Ok(value), or Err(e) if this resolves empty."""

        async def _ok_or() -> Ok[T] | Err[E]:
            return (await self).ok_or(e)

        return _ok_or()

    def to_option(self) -> Coroutine[Any, Any, Option[T]]:
        """Coroutine: the resolved Option. Same as ``await self``."""
        return self._resolve()

    def __repr__(self) -> str:
        if self._ready is not None:
            return f'PendingOption({self._ready!r})'
        return f'PendingOption({self._shared!r})'


async def _settle[U](outcome: object) -> Option[U]:
    """Normalise what an and_then/or_else callback returned into an Option."""
    if isinstance(outcome, Option):
        return outcome
    if is_awaitable(outcome):
        return await PendingOption(outcome)
    return none()


async def _gather[A, B](
    left: PendingOption[A], right: PendingOption[B]
) -> tuple[Option[A], Option[B]]:
    results: dict[str, Option[Any]] = {}

    async with anyio.create_task_group() as tg:

        async def run_left() -> None:
            results['left'] = await left

        async def run_right() -> None:
            results['right'] = await right

        tg.start_soon(run_left)
        tg.start_soon(run_right)

    return results['left'], results['right']
