"""Shared fixtures for plugincheck tests."""

import pytest

from plugincheck.config import Settings
from plugincheck.logging import remove_handler


@pytest.fixture(autouse=True)
def _detach_cli_log_handler():
    """CLI tests install a root handler bound to a captured stream."""
    yield
    remove_handler()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)
