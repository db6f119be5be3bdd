"""Option error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

from enum import StrEnum

import msgspec

__all__ = [
    'ErrorReason',
    'OptionError',
    'OptionFailure',
]


class ErrorReason(StrEnum):
    """Reason codes carried by every OptionError."""

    NONE_VALUE_ACCESSED = 'NoneValueAccessed'
    NONE_EXPECTED = 'NoneExpected'
    NONE_UNWRAPPED = 'NoneUnwrapped'
    PREDICATE_EXCEPTION = 'PredicateException'


class OptionFailure(msgspec.Struct, frozen=True, gc=False):
    """Option operation failed - struct variant for Result[T, OptionFailure].

    ``cause`` is the rendered original exception, if there was one.
    """

    reason: ErrorReason
    message: str
    cause: str | None = None

    def to_exception(self) -> OptionError:
        """Convert to exception for raise-based code."""
        return OptionError(self.message, self.reason)


class OptionError(Exception):
    """Option operation failed - exception variant.

    Raised by ``unwrap``/``expect`` on Nothing and by defaulting combinators
    whose callback failed. In the latter case the original exception is
    available both as ``original`` and as ``__cause__``.

    Example:
        ```python
        try:
            none().unwrap()
        except OptionError as e:
            assert e.reason is ErrorReason.NONE_UNWRAPPED
        ```
    """

    def __init__(
        self,
        message: str,
        reason: ErrorReason,
        original: BaseException | None = None,
    ) -> None:
        self.message = message
        self.reason = reason
        self.original = original
        super().__init__(message)
        if original is not None:
            self.__cause__ = original

    def to_struct(self) -> OptionFailure:
        """Convert to struct for Result-based code."""
        from klaw_option._internal.helpers import stringify

        cause = stringify(self.original) if self.original is not None else None
        return OptionFailure(self.reason, self.message, cause)

    def __repr__(self) -> str:
        return f'OptionError({self.message!r}, reason={self.reason.value})'
