"""
Pytest plugin for starlens testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["starlens.testing.conftest"]

Or import the fixtures directly:

    from starlens.testing.fixtures import mock_source, event_cache
"""

# Re-export all fixtures for pytest auto-discovery
from starlens.testing.fixtures import (
    event_cache,
    frozen_clock,
    mock_source,
    small_collection,
)

__all__ = [
    "mock_source",
    "frozen_clock",
    "event_cache",
    "small_collection",
]
