"""klaw-option: a mutable Option[T] for Python 3.13+.

Flat imports (preferred):
    from klaw_option import Option, some, none, is_option
    from klaw_option import PendingOption, ReplaceTrigger
    from klaw_option import Ok, Err, Result
    from klaw_option import OptionError, ErrorReason

Submodule imports (for organization):
    from klaw_option.option import Option, some, none
    from klaw_option.pending import PendingOption
    from klaw_option.result import Ok, Err
    from klaw_option.errors import OptionError
"""

# Configuration
from klaw_option._config import OptionConfig, get_config, init

# Logging
from klaw_option._logging import add_log_hook, configure_logging, get_logger, remove_log_hook

# Errors
from klaw_option.errors import ErrorReason, OptionError, OptionFailure

# Option types
from klaw_option.option import (
    Option,
    ReplaceTrigger,
    and_opt,
    is_option,
    none,
    or_opt,
    some,
    xor_opt,
)

# Async
from klaw_option.pending import PendingOption

# Protocols
from klaw_option.protocols import OptionCombinators

# Result types
from klaw_option.result import Err, Ok, Result, err, is_result, ok

__all__ = [
    # Result types
    'Err',
    # Errors
    'ErrorReason',
    'Ok',
    # Option types
    'Option',
    'OptionCombinators',
    # Configuration
    'OptionConfig',
    'OptionError',
    'OptionFailure',
    # Async
    'PendingOption',
    'ReplaceTrigger',
    'Result',
    # Logging
    'add_log_hook',
    'and_opt',
    'configure_logging',
    'err',
    'get_config',
    'get_logger',
    'init',
    'is_option',
    'is_result',
    'none',
    'ok',
    'or_opt',
    'remove_log_hook',
    'some',
    'xor_opt',
]
