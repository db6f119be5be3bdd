"""Pytest configuration and shared fixtures for klaw-option tests."""

from collections.abc import Generator

import pytest
from klaw_option._config import reset_config
from klaw_option._logging import clear_log_hooks


@pytest.fixture(autouse=True)
def fresh_config() -> Generator[None]:
    """Every test starts from an unconfigured library and no log hooks."""
    reset_config()
    clear_log_hooks()
    yield
    reset_config()
    clear_log_hooks()


@pytest.fixture
def sample_some():
    """Sample occupied Option."""
    from klaw_option import some

    return some(2)


@pytest.fixture
def sample_none():
    """Sample empty Option."""
    from klaw_option import none

    return none()
