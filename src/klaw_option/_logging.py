"""Structured logging for klaw-option.

Option never logs on its happy path. The only events are recoveries that
would otherwise be invisible: a derivation callback that raised and was
degraded to Nothing, or a deferred replace whose source failed or was
cancelled. All of them go out at debug level and only when
``OptionConfig.log_swallowed`` is on.

structlog events and stdlib records share one ProcessorFormatter, so an
application that routes its own logging through the root logger gets the
same JSON (or console) lines from both.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from collections.abc import Callable

    type LogHook = Callable[[dict[str, Any]], None]

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'log_swallowed',
    'remove_log_hook',
]

_hooks: list[LogHook] = []


def _run_hooks(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: hand each hook its own copy of the event."""
    for hook in tuple(_hooks):
        with contextlib.suppress(Exception):
            hook(dict(event_dict))
    return event_dict


def _enrichers() -> list[Any]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    import structlog

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _run_hooks,
    ]


def _formatter(json_output: bool, stream: TextIO) -> logging.Formatter:
    import structlog

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_enrichers(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Replaces the root logger's handlers with a single stream handler.
    Events below ``level`` are dropped before any processor (hooks
    included) sees them.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
        json_output: JSON lines if True, a console renderer otherwise.
        stream: Where to write. Defaults to stderr.
    """
    import structlog

    target = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_enrichers(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # module-level loggers are created at import, before configuration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(_formatter(json_output, target))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, usually for ``__name__``."""
    import structlog

    return structlog.get_logger(name)


def log_swallowed(
    logger: Any,
    combinator: str,
    exc: BaseException | None = None,
    *,
    event: str = 'callback_failed',
) -> None:
    """Record a failure that was recovered from instead of raised.

    Does nothing unless ``get_config().log_swallowed`` is set.

    Args:
        logger: Logger to emit on.
        combinator: Name of the method that recovered.
        exc: The exception that was swallowed, if there was one.
        event: Event name.
    """
    from klaw_option._config import get_config

    if not get_config().log_swallowed:
        return
    fields: dict[str, Any] = {'combinator': combinator}
    if exc is not None:
        fields['error'] = repr(exc)
    logger.debug(event, **fields)


# --- Hooks ---


def add_log_hook(hook: LogHook) -> None:
    """Register a callable that receives a copy of every emitted event dict.

    A hook that raises is ignored; it never breaks logging or other hooks.
    """
    _hooks.append(hook)


def remove_log_hook(hook: LogHook) -> None:
    """Unregister a hook. Unknown hooks are ignored."""
    with contextlib.suppress(ValueError):
        _hooks.remove(hook)


def clear_log_hooks() -> None:
    _hooks.clear()
