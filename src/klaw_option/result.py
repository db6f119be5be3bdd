"""Ok / Err: the Result that Option converts to and from.

``Option.ok_or`` and ``Option.transpose_result`` produce these, and
``Ok.ok()`` / ``Err.err()`` lead back to Option. Both variants are frozen
msgspec structs, so they compare by value and encode without adapters.

Misuse (``unwrap`` on Err, ``unwrap_err`` on Ok, ``expect`` on Err) raises
RuntimeError carrying the rendered payload.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NoReturn, TypeIs

import msgspec

from klaw_option._internal.helpers import stringify

if TYPE_CHECKING:
    from klaw_option.option import Option

__all__ = ['Err', 'Ok', 'Result', 'err', 'is_result', 'ok']


class Ok[T](msgspec.Struct, frozen=True, gc=False):
    """The success side of a Result.

    Examples:
        >>> Ok(2).map(lambda n: n * 2)
        Ok(value=4)
        >>> Ok(2).ok()
        some(2)
    """

    value: T

    # --- Querying ---

    def is_ok(self) -> TypeIs[Ok[T]]:
        return True

    def is_err(self) -> TypeIs[Err[object]]:
        return False

    def is_ok_and(self, pred: Callable[[T], bool]) -> bool:
        """Return pred(value)."""
        return pred(self.value)

    def is_err_and(self, _pred: Callable[[object], bool]) -> bool:
        return False

    # --- Extraction ---

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Ok has no error to return.

        Raises:
            RuntimeError: Always.
        """
        raise RuntimeError(f'`unwrap_err` is called on `Ok`: {stringify(self.value)}')

    def unwrap_or(self, _default: T) -> T:
        return self.value

    def unwrap_or_else(self, _f: Callable[[object], T]) -> T:
        return self.value

    def expect(self, _msg: str) -> T:
        return self.value

    # --- Transforming ---

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Ok(f(value))."""
        return Ok(f(self.value))

    def map_err(self, _f: Callable[[object], object]) -> Ok[T]:
        return self

    def and_then[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Return the Result f builds from the value."""
        return f(self.value)

    def or_else(self, _f: Callable[[object], object]) -> Ok[T]:
        return self

    def and_[U, E](self, other: Ok[U] | Err[E]) -> Ok[U] | Err[E]:
        return other

    def or_(self, _other: object) -> Ok[T]:
        return self

    # --- Back to Option ---

    def ok(self) -> Option[T]:
        """some(value)."""
        from klaw_option.option import some

        return some(self.value)

    def err(self) -> Option[object]:
        """none()."""
        from klaw_option.option import none

        return none()


class Err[E](msgspec.Struct, frozen=True, gc=False):
    """The failure side of a Result.

    ``error`` can be any value, not only an exception: ``none().ok_or('missing')``
    gives ``Err('missing')``.
    """

    error: E

    # --- Querying ---

    def is_ok(self) -> TypeIs[Ok[object]]:
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        return True

    def is_ok_and(self, _pred: Callable[[object], bool]) -> bool:
        return False

    def is_err_and(self, pred: Callable[[E], bool]) -> bool:
        """Return pred(error)."""
        return pred(self.error)

    # --- Extraction ---

    def unwrap(self) -> NoReturn:
        """Err has no value to return.

        Raises:
            RuntimeError: Always, with the rendered error.
        """
        raise RuntimeError(f'`unwrap` is called on `Err`: {stringify(self.error)}')

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[E], T]) -> T:
        """Build the fallback from the error."""
        return f(self.error)

    def expect(self, msg: str) -> NoReturn:
        """Raise with msg and the rendered error.

        Raises:
            RuntimeError: Always, as ``'<msg>: <error>'``.
        """
        raise RuntimeError(f'{msg}: {stringify(self.error)}')

    # --- Transforming ---

    def map(self, _f: Callable[[object], object]) -> Err[E]:
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Err(f(error))."""
        return Err(f(self.error))

    def and_then(self, _f: Callable[[object], object]) -> Err[E]:
        return self

    def or_else[T, F](self, f: Callable[[E], Ok[T] | Err[F]]) -> Ok[T] | Err[F]:
        """Return the Result f builds from the error."""
        return f(self.error)

    def and_(self, _other: object) -> Err[E]:
        return self

    def or_[T, F](self, other: Ok[T] | Err[F]) -> Ok[T] | Err[F]:
        return other

    # --- Back to Option ---

    def ok(self) -> Option[object]:
        """none()."""
        from klaw_option.option import none

        return none()

    def err(self) -> Option[E]:
        """some(error)."""
        from klaw_option.option import some

        return some(self.error)


type Result[T, E] = Ok[T] | Err[E]


def ok[T](value: T) -> Ok[T]:
    return Ok(value)


def err[E](error: E) -> Err[E]:
    return Err(error)


def is_result(x: object) -> TypeIs[Ok[object] | Err[object]]:
    """Return True if x is an Ok or an Err."""
    return isinstance(x, Ok | Err)
