"""Small helpers shared by Option, PendingOption and Result."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from typing import Any, TypeIs

__all__ = ['is_awaitable', 'noop_failure', 'stringify']


def stringify(x: object, limit: int | None = None) -> str:
    """Render a value for diagnostics without ever raising.

    Args:
        x: Any value.
        limit: Maximum length of the output. If None, the configured
            ``stringify_limit`` is used.

    Returns:
        The value's repr, or ``<TypeName object>`` if repr itself fails.
    """
    try:
        text = repr(x)
    except Exception:
        text = f'<{type(x).__name__} object>'

    if limit is None:
        from klaw_option._config import get_config

        limit = get_config().stringify_limit
    if limit is None or len(text) <= limit:
        return text
    if limit < 4:
        return text[:limit]
    return text[: limit - 3] + '...'


def is_awaitable(x: object) -> TypeIs[Awaitable[Any]]:
    """Return True if x can be awaited (coroutine, Task, Future, PendingOption...)."""
    return inspect.isawaitable(x)


def noop_failure(_exc: BaseException | None) -> None:
    """Failure handler for fire-and-forget awaitables. Discards the error."""
    return None
