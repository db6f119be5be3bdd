"""OptionCombinators: the combinator surface shared by Option and PendingOption.

Option answers synchronously (or hands off to PendingOption when given an
awaitable); PendingOption answers with another PendingOption. Both run the
same algebra, the ``and_opt``/``or_opt``/``xor_opt`` free functions in
``klaw_option.option``, and differ only in when they suspend.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ['OptionCombinators']


@runtime_checkable
class OptionCombinators[T](Protocol):
    """Protocol for containers that combine like an Option."""

    @abstractmethod
    def and_(self, x: Any) -> Any:
        """Nothing if self is Nothing, otherwise x."""
        ...

    @abstractmethod
    def or_(self, x: Any) -> Any:
        """Self if it is Some, otherwise x."""
        ...

    @abstractmethod
    def xor(self, y: Any) -> Any:
        """Some if exactly one side is Some, otherwise Nothing."""
        ...

    @abstractmethod
    def and_then(self, f: Callable[[T], Any]) -> Any:
        """Feed the value to f, which returns an Option (or an awaitable of one)."""
        ...

    @abstractmethod
    def map(self, f: Callable[[T], Any]) -> Any:
        """Transform the value, degrading to Nothing if f raises."""
        ...

    @abstractmethod
    def filter(self, f: Callable[[T], bool]) -> Any:
        """Keep the value only if f returns True."""
        ...
