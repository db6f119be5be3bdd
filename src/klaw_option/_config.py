"""Library configuration: OptionConfig, init() and get_config()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_option._logging import configure_logging

__all__ = [
    'OptionConfig',
    'get_config',
    'init',
    'reset_config',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'', '0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class OptionConfig:
    """Configuration for klaw-option.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = the library
            leaves logging alone.
        log_swallowed: Log callback failures that derivation combinators
            recover from (debug level).
        stringify_limit: Maximum length of rendered values in ``str(option)``
            and error messages. None = unlimited.
    """

    log_level: str | None = None
    log_swallowed: bool = False
    stringify_limit: int | None = None


# Global configuration (set by init(), or lazily from the environment)
_config: OptionConfig | None = None


def _detect_log_level() -> str | None:
    value = os.environ.get('KLAW_OPTION_LOG_LEVEL', '').strip()
    return value.upper() or None


def _detect_log_swallowed() -> bool:
    """Read KLAW_OPTION_LOG_SWALLOWED.

    Accepts 1/true/yes/on and 0/false/no/off (case-insensitive). Anything else
    warns and counts as false.
    """
    value = os.environ.get('KLAW_OPTION_LOG_SWALLOWED', '').strip().lower()
    if value in _TRUTHY:
        return True
    if value not in _FALSY:
        logging.warning("Unknown KLAW_OPTION_LOG_SWALLOWED value '%s', defaulting to false", value)
    return False


def _detect_stringify_limit() -> int | None:
    value = os.environ.get('KLAW_OPTION_STRINGIFY_LIMIT', '').strip()
    if not value:
        return None
    try:
        limit = int(value)
    except ValueError:
        logging.warning("Invalid KLAW_OPTION_STRINGIFY_LIMIT value '%s', ignoring", value)
        return None
    if limit <= 0:
        logging.warning("KLAW_OPTION_STRINGIFY_LIMIT must be positive, got %d, ignoring", limit)
        return None
    return limit


def init(
    log_level: str | None = None,
    log_swallowed: bool | None = None,
    stringify_limit: int | None = None,
) -> OptionConfig:
    """Initialize klaw-option with the given configuration.

    Arguments left as None are read from the environment
    (``KLAW_OPTION_LOG_LEVEL``, ``KLAW_OPTION_LOG_SWALLOWED``,
    ``KLAW_OPTION_STRINGIFY_LIMIT``).

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.
        log_swallowed: Log recovered callback failures at debug level.
        stringify_limit: Maximum rendered value length. Must be positive.

    Returns:
        The OptionConfig that was set.

    Raises:
        ValueError: If stringify_limit is not positive.

    Example:
        ```python
        from klaw_option import init

        init(log_level="DEBUG", log_swallowed=True)
        ```
    """
    global _config  # noqa: PLW0603

    if stringify_limit is not None and stringify_limit <= 0:
        msg = f'stringify_limit must be positive, got {stringify_limit}'
        raise ValueError(msg)

    _config = OptionConfig(
        log_level=log_level.upper() if log_level is not None else _detect_log_level(),
        log_swallowed=log_swallowed if log_swallowed is not None else _detect_log_swallowed(),
        stringify_limit=stringify_limit if stringify_limit is not None else _detect_stringify_limit(),
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> OptionConfig:
    """Get the current configuration.

    If init() has not been called, the config is built from the environment
    on first use. Logging is not configured in that case.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = OptionConfig(
            log_level=_detect_log_level(),
            log_swallowed=_detect_log_swallowed(),
            stringify_limit=_detect_stringify_limit(),
        )
    return _config


def reset_config() -> None:
    """Forget the current configuration. The next get_config() re-reads the environment."""
    global _config  # noqa: PLW0603

    _config = None
