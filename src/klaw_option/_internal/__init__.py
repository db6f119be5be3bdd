"""Internal helpers. Not part of the public API."""

from klaw_option._internal.helpers import is_awaitable, noop_failure, stringify
from klaw_option._internal.shared import SharedAwaitable

__all__ = ['SharedAwaitable', 'is_awaitable', 'noop_failure', 'stringify']
