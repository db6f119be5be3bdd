"""Option type: a mutable slot holding either a value of type T or nothing.

Unlike ``T | None``, an Option can hold ``None`` itself: ``some(None)`` is
occupied, ``none()`` is empty.

Failure policy, in one place:

- Derivation combinators (``map``, ``filter``, ``and_then``, ``inspect``,
  ``or_else``, ``take_if``, ``is_some_and``, ``is_none_or``, ``map_or``)
  swallow callback exceptions and degrade to Nothing / False / unchanged.
- Defaulting combinators (``get_or_insert_with``, ``map_or_else``,
  ``unwrap_or_else``, ``match``) must produce a value, so a callback
  exception is re-raised as ``OptionError(PredicateException)`` with the
  original attached. An exception that is already an OptionError passes
  through untouched.

Mutating methods (``insert``, ``get_or_insert``, ``get_or_insert_with``,
``replace``, ``take``, ``take_if``) change the instance in place; every other
method leaves it alone and returns a new value.

Example:
    ```python
    from klaw_option import none, some

    x = some(2)
    x.map(lambda n: n * 2)        # some(4)
    x.map(lambda n: 1 / 0)        # none()
    x.take()                      # some(2), x is now none()

    y = none()
    y.get_or_insert(5)            # 5, y is now some(5)
    ```
"""

from __future__ import annotations

import asyncio
import copy
import weakref
from collections.abc import Awaitable, Callable, Generator
from typing import TYPE_CHECKING, Any, Final, TypeIs, overload

import msgspec

from klaw_option._internal.helpers import is_awaitable, noop_failure, stringify
from klaw_option._internal.shared import SharedAwaitable
from klaw_option._logging import get_logger, log_swallowed
from klaw_option.errors import ErrorReason, OptionError
from klaw_option.result import Err, Ok, is_result

if TYPE_CHECKING:
    from klaw_option.pending import PendingOption

__all__ = [
    'Option',
    'ReplaceTrigger',
    'and_opt',
    'is_option',
    'none',
    'or_opt',
    'some',
    'xor_opt',
]

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Slot: one immutable cell per state, swapped in a single assignment
# ---------------------------------------------------------------------


class _Filled[T](msgspec.Struct, frozen=True):
    value: T


class _Vacant(msgspec.Struct, frozen=True, gc=False):
    pass


_EMPTY: Final = _Vacant()

type _Slot[T] = _Filled[T] | _Vacant


def _attempt[R](combinator: str, f: Callable[..., R], *args: Any) -> R | _Vacant:
    """Run a derivation callback. Returns _EMPTY instead of raising."""
    try:
        return f(*args)
    except Exception as exc:
        log_swallowed(logger, combinator, exc)
        return _EMPTY


def _require[R](message: str, f: Callable[..., R], *args: Any) -> R:
    """Run a defaulting callback. Foreign failures become PredicateException."""
    try:
        return f(*args)
    except OptionError:
        raise
    except Exception as exc:
        raise OptionError(message, ErrorReason.PREDICATE_EXCEPTION, exc) from exc


def _from_slot[T](slot: _Slot[T]) -> Option[T]:
    option: Option[T] = Option.__new__(Option)
    option._slot = slot
    return option


# ---------------------------------------------------------------------
# Option[T]
# ---------------------------------------------------------------------


class Option[T]:
    """A value of type T that may or may not be present.

    Build with :func:`some` / :func:`none` (or ``Option(value)`` /
    ``Option()``). Two Options are equal when both are empty or both hold
    equal values. Options are mutable, so they are not hashable.

    Examples:
        >>> some(42).unwrap()
        42
        >>> str(some(42)), str(none())
        ('Some { 42 }', 'None')
        >>> some(None).is_some()
        True
    """

    __slots__ = ('_slot',)

    def __init__(self, *value: T) -> None:
        if len(value) > 1:
            msg = f'Option() takes at most one value, got {len(value)}'
            raise TypeError(msg)
        self._slot: _Slot[T] = _Filled(value[0]) if value else _EMPTY

    @property
    def _value(self) -> T:
        slot = self._slot
        if isinstance(slot, _Filled):
            return slot.value
        raise OptionError('`value` is accessed on `None`', ErrorReason.NONE_VALUE_ACCESSED)

    # --- Querying ---

    def is_some(self) -> bool:
        """Return True if the option holds a value."""
        return isinstance(self._slot, _Filled)

    def is_none(self) -> bool:
        """Return True if the option is empty."""
        return not isinstance(self._slot, _Filled)

    def is_some_and(self, f: Callable[[T], bool]) -> bool:
        """Return True if the option holds a value and f(value) is truthy.

        If f raises, returns False.

        Example:
            ```python
            some(2).is_some_and(lambda n: n > 0)   # True
            some(2).is_some_and(lambda n: 1 / 0)   # False
            none().is_some_and(lambda n: n > 0)    # False
            ```
        """
        if self.is_none():
            return False
        outcome = _attempt('is_some_and', f, self._value)
        return False if outcome is _EMPTY else bool(outcome)

    def is_none_or(self, f: Callable[[T], bool]) -> bool:
        """Return True if the option is empty or f(value) is truthy.

        If f raises, returns True.
        """
        if self.is_none():
            return True
        outcome = _attempt('is_none_or', f, self._value)
        return True if outcome is _EMPTY else bool(outcome)

    # --- Derivation (callback failures degrade to Nothing) ---

    def map[U](self, f: Callable[[T], U]) -> Option[U]:
        """Apply f to the contained value.

        Args:
            f: Function to apply to the value.

        Returns:
            some(f(value)), or none() if empty or if f raises.
        """
        if self.is_none():
            return none()
        outcome = _attempt('map', f, self._value)
        return none() if outcome is _EMPTY else some(outcome)

    def map_or[U](self, default: U, f: Callable[[T], U]) -> U:
        """Return f(value), or default if empty or if f raises."""
        if self.is_none():
            return default
        outcome = _attempt('map_or', f, self._value)
        return default if outcome is _EMPTY else outcome

    def filter(self, f: Callable[[T], bool]) -> Option[T]:
        """Return a copy of the option if f(value) is truthy, else none().

        If f raises, returns none().
        """
        if self.is_none():
            return none()
        outcome = _attempt('filter', f, self._value)
        if outcome is _EMPTY or not outcome:
            return none()
        return self.clone()

    @overload
    def and_then[U](self, f: Callable[[T], Awaitable[Option[U]]]) -> PendingOption[U]: ...
    @overload
    def and_then[U](self, f: Callable[[T], Option[U]]) -> Option[U]: ...
    def and_then[U](self, f: Callable[[T], Any]) -> Option[U] | PendingOption[U]:
        """Feed the contained value to f and return the Option it produces.

        Also known as flatmap or bind. If f returns an awaitable, the result
        is a PendingOption over it.

        Args:
            f: Function that takes T and returns Option[U] (or an awaitable of one).

        Returns:
            The Option returned by f; none() if empty or if f raises.
        """
        if self.is_none():
            return none()
        outcome = _attempt('and_then', f, self._value)
        if outcome is _EMPTY:
            return none()
        if is_awaitable(outcome):
            from klaw_option.pending import PendingOption

            return PendingOption(outcome)
        return outcome

    def inspect(self, f: Callable[[T], object]) -> Option[T]:
        """Call f with the contained value for side effects.

        Failures of f are ignored. Returns a copy of the option, never the
        option itself.
        """
        if self.is_some():
            _attempt('inspect', f, self._value)
        return self.clone()

    def or_else(self, f: Callable[[], Option[T]]) -> Option[T]:
        """Return a copy of the option if it holds a value, else f().

        If f raises, returns none().
        """
        if self.is_some():
            return self.clone()
        outcome = _attempt('or_else', f)
        return none() if outcome is _EMPTY else outcome

    # --- Combining (awaitable arguments hand off to PendingOption) ---

    @overload
    def and_[U](self, x: Awaitable[Option[U]]) -> PendingOption[U]: ...
    @overload
    def and_[U](self, x: Option[U]) -> Option[U]: ...
    def and_[U](self, x: Option[U] | Awaitable[Option[U]]) -> Option[U] | PendingOption[U]:
        """Return none() if the option is empty, otherwise x.

        Example:
            ```python
            some(2).and_(some(3))              # some(3)
            none().and_(some(3))               # none()
            await some(2).and_(fetch_option()) # PendingOption -> Option
            ```
        """
        if is_awaitable(x):
            return self.to_pending_option().and_(x)
        return and_opt(self, x)

    @overload
    def or_(self, x: Awaitable[Option[T]]) -> PendingOption[T]: ...
    @overload
    def or_(self, x: Option[T]) -> Option[T]: ...
    def or_(self, x: Option[T] | Awaitable[Option[T]]) -> Option[T] | PendingOption[T]:
        """Return a copy of the option if it holds a value, otherwise x."""
        if is_awaitable(x):
            return self.to_pending_option().or_(x)
        return or_opt(self, x)

    @overload
    def xor(self, y: Awaitable[Option[T]]) -> PendingOption[T]: ...
    @overload
    def xor(self, y: Option[T]) -> Option[T]: ...
    def xor(self, y: Option[T] | Awaitable[Option[T]]) -> Option[T] | PendingOption[T]:
        """Return the occupied side if exactly one side holds a value, else none()."""
        if is_awaitable(y):
            return self.to_pending_option().xor(y)
        return xor_opt(self, y)

    # --- Extraction ---

    def unwrap(self) -> T:
        """Return the contained value.

        Raises:
            OptionError: NoneUnwrapped, if the option is empty.
        """
        if self.is_some():
            return self._value
        raise OptionError('`unwrap` is called on `None`', ErrorReason.NONE_UNWRAPPED)

    def expect(self, msg: str | None = None) -> T:
        """Return the contained value, or raise with msg.

        Raises:
            OptionError: NoneExpected, if the option is empty.
        """
        if self.is_some():
            return self._value
        raise OptionError(msg if msg is not None else '`expect` is called on `None`', ErrorReason.NONE_EXPECTED)

    def unwrap_or(self, default: T) -> T:
        """Return the contained value or default."""
        return self._value if self.is_some() else default

    def unwrap_or_else(self, make_default: Callable[[], T]) -> T:
        """Return the contained value or make_default().

        Raises:
            OptionError: PredicateException, if make_default raises.
        """
        if self.is_some():
            return self._value
        return _require('unwrap_or_else callback raised an exception', make_default)

    def map_or_else[U](self, make_default: Callable[[], U], f: Callable[[T], U]) -> U:
        """Return f(value), or make_default() if empty.

        A plain exception from f falls back to make_default(); an OptionError
        from f propagates.

        Raises:
            OptionError: PredicateException, if make_default raises.
        """
        if self.is_some():
            try:
                return f(self._value)
            except OptionError:
                raise
            except Exception as exc:
                log_swallowed(logger, 'map_or_else', exc)
        return _require('map_or_else `make_default` callback raised an exception', make_default)

    def match[U, F](self, f: Callable[[T], U], g: Callable[[], F]) -> U | F:
        """Return f(value) if the option holds a value, else g().

        Example:
            ```python
            some(2).match(lambda n: n * 2, lambda: 0)  # 4
            none().match(lambda n: n * 2, lambda: 0)   # 0
            ```

        Raises:
            OptionError: PredicateException, if the branch that runs raises.
        """
        if self.is_some():
            return _require('match `f` branch raised an exception', f, self._value)
        return _require('match `g` branch raised an exception', g)

    # --- Mutation ---

    def insert(self, x: T) -> T:
        """Store x, overwriting any current value, and return it."""
        self._slot = _Filled(x)
        return x

    def get_or_insert(self, x: T) -> T:
        """Return the contained value, storing x first if the option is empty."""
        if self.is_none():
            self._slot = _Filled(x)
        return self._value

    def get_or_insert_with(self, f: Callable[[], T]) -> T:
        """Return the contained value, storing f() first if the option is empty.

        If f raises, the option stays empty.

        Raises:
            OptionError: PredicateException, if f raises.
        """
        if self.is_none():
            self._slot = _Filled(_require('get_or_insert_with callback raised an exception', f))
        return self._value

    @overload
    def replace(self, x: Awaitable[T]) -> tuple[Option[T], ReplaceTrigger[T]]: ...
    @overload
    def replace(self, x: T) -> Option[T]: ...
    def replace(self, x: T | Awaitable[T]) -> Option[T] | tuple[Option[T], ReplaceTrigger[T]]:
        """Store x and return the previous state as an independent Option.

        Given an awaitable, the write is deferred. The option is left as is
        and ``(snapshot, trigger)`` is returned: ``snapshot`` is a copy of
        the current state, and awaiting ``trigger`` drives x and stores its
        result. If x raises, nothing is written. To store an awaitable object
        itself, use :meth:`insert`.

        Example:
            ```python
            x = some(2)
            old, trigger = x.replace(fetch_five())
            assert x == some(2)
            await trigger
            assert x == some(5) and old == some(2)
            ```
        """
        if is_awaitable(x):
            return self.clone(), ReplaceTrigger(self, x)
        previous = self._slot
        self._slot = _Filled(x)
        return _from_slot(previous)

    def take(self) -> Option[T]:
        """Move the value out, leaving the option empty."""
        previous = self._slot
        self._slot = _EMPTY
        return _from_slot(previous)

    def take_if(self, f: Callable[[T], bool]) -> Option[T]:
        """Move the value out if f(value) is truthy.

        On a falsy result, or if f raises, the option is left unchanged and
        none() is returned.
        """
        if self.is_none():
            return none()
        outcome = _attempt('take_if', f, self._value)
        if outcome is _EMPTY or not outcome:
            return none()
        return self.take()

    # --- Conversion ---

    def clone(self) -> Option[T]:
        """Return a shallow copy. The contained value itself is shared."""
        return _from_slot(self._slot)

    def flatten[U](self: Option[Option[U]]) -> Option[U]:
        """Remove one level of nesting: some(some(x)) -> some(x).

        A non-Option value is returned wrapped as some(value).
        """
        if self.is_none():
            return none()
        inner = self._value
        if isinstance(inner, Option):
            return inner.clone()
        return some(inner)

    def ok_or[E](self, e: E) -> Ok[T] | Err[E]:
        """Convert to Result: Ok(value), or Err(e) if empty."""
        return Ok(self._value) if self.is_some() else Err(e)

    def ok_or_else[E](self, make_err: Callable[[], E]) -> Ok[T] | Err[E]:
        """Convert to Result: Ok(value), or Err(make_err()) if empty."""
        return Ok(self._value) if self.is_some() else Err(make_err())

    def transpose_result[U, E](self: Option[Ok[U] | Err[E]]) -> Ok[Option[U]] | Err[E]:
        """Turn an Option of a Result into a Result of an Option.

        none() -> Ok(none()); some(Ok(v)) -> Ok(some(v)); some(Err(e)) -> Err(e).
        A non-Result value gives Ok(some(value)).
        """
        if self.is_none():
            return Ok(none())
        inner = self._value
        if not is_result(inner):
            return Ok(some(inner))
        if isinstance(inner, Ok):
            return Ok(some(inner.value))
        return Err(inner.error)

    def transpose_awaitable[U](self: Option[Awaitable[U]]) -> PendingOption[U]:
        """Turn an Option of an awaitable into a PendingOption of its result.

        Nested awaitables are awaited until a plain value comes out.
        """
        from klaw_option.pending import PendingOption

        if self.is_none():
            return PendingOption.from_option(none())
        return PendingOption(_resolve_some(self._value))

    def to_pending_option(self) -> PendingOption[T]:
        """Lift a copy of the option into a PendingOption."""
        from klaw_option.pending import PendingOption

        return PendingOption.from_option(self.clone())

    # --- Dunder ---

    def __copy__(self) -> Option[T]:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> Option[T]:
        if self.is_none():
            return none()
        return some(copy.deepcopy(self._value, memo))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self._slot == other._slot

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.is_none():
            return 'None'
        return f'Some {{ {stringify(self._value)} }}'

    def __repr__(self) -> str:
        if self.is_none():
            return 'none()'
        return f'some({stringify(self._value)})'


async def _resolve_some[U](value: Any) -> Option[U]:
    while is_awaitable(value):
        value = await value
    return some(value)


# ---------------------------------------------------------------------
# Deferred replace
# ---------------------------------------------------------------------


def _retrieve_failure(future: asyncio.Future[Any]) -> None:
    if not future.cancelled():
        noop_failure(future.exception())


class ReplaceTrigger[T]:
    """The deferred half of ``Option.replace(awaitable)``.

    Awaiting the trigger drives the source awaitable and, if it succeeds,
    stores the result in the target option. Until then the target is
    untouched. The trigger is one-shot: awaiting it again (or from several
    tasks at once) waits for the same run and never writes twice.

    Triggers on the same option apply in the order their sources settle,
    not the order they were created. Dropping a trigger without awaiting
    it abandons the replacement: a coroutine source that never started is
    closed, and a failing future source is never reported as unretrieved.

    Attributes:
        applied: True once the write happened.
        cancelled: True if cancel() won before the write.
    """

    __slots__ = ('__weakref__', '_applied', '_cancelled', '_source', '_target')

    def __init__(self, target: Option[T], source: Awaitable[T]) -> None:
        self._target = target
        self._source = SharedAwaitable(source)
        self._applied = False
        self._cancelled = False
        # An abandoned trigger must not leak its source's failure.
        if asyncio.isfuture(source):
            source.add_done_callback(_retrieve_failure)
        weakref.finalize(self, self._source.discard)

    @property
    def applied(self) -> bool:
        return self._applied

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """True once the trigger can no longer write."""
        return self._applied or self._cancelled or self._source.done

    def cancel(self) -> bool:
        """Abandon the replacement.

        A source that has not started is closed. A source that is already
        running finishes, but its result is dropped.

        Returns:
            True if the trigger was cancelled, False if it had already settled.
        """
        if self.done:
            return False
        self._cancelled = True
        self._source.discard()
        log_swallowed(logger, 'replace', event='deferred_replace_cancelled')
        return True

    def __await__(self) -> Generator[Any, Any, None]:
        return self._run().__await__()

    async def _run(self) -> None:
        if self._cancelled:
            return
        try:
            value = await self._source
        except Exception as exc:
            noop_failure(exc)
            log_swallowed(logger, 'replace', exc, event='deferred_replace_failed')
            return
        if self._cancelled or self._applied:
            return
        self._target._slot = _Filled(value)
        self._applied = True

    def __repr__(self) -> str:
        if self._applied:
            state = 'applied'
        elif self._cancelled:
            state = 'cancelled'
        elif self._source.done:
            state = 'failed'
        else:
            state = 'pending'
        return f'ReplaceTrigger({state})'


# ---------------------------------------------------------------------
# Constructors, type guard & free-function parity
# ---------------------------------------------------------------------


def some[T](value: T) -> Option[T]:
    """Wrap a value (any value, None included) in an occupied Option."""
    return Option(value)


def none[T]() -> Option[T]:
    """Create an empty Option."""
    return Option()


def is_option(x: object) -> TypeIs[Option[Any]]:
    """Return True if x is an Option."""
    return isinstance(x, Option)


def and_opt[T, U](a: Option[T], b: Option[U]) -> Option[U]:
    """none() if a is empty, otherwise b."""
    return none() if a.is_none() else b


def or_opt[T](a: Option[T], b: Option[T]) -> Option[T]:
    """A copy of a if it holds a value, otherwise b."""
    return a.clone() if a.is_some() else b


def xor_opt[T](a: Option[T], b: Option[T]) -> Option[T]:
    """The occupied one of a and b if exactly one holds a value, else none()."""
    if a.is_some() and b.is_none():
        return a.clone()
    if a.is_none() and b.is_some():
        return b.clone()
    return none()
