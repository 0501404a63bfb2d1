"""Shared fixtures for the starlens test suite."""

from starlens.testing.fixtures import (  # noqa: F401
    event_cache,
    frozen_clock,
    mock_source,
    small_collection,
)
