"""starlens testing utilities.

Provides an in-memory star source and fixtures for testing code that uses
starlens.
"""

from starlens.testing.fixtures import FROZEN_NOW, FrozenClock, create_mock_events, star_at
from starlens.testing.mock import MockCall, MockCollection, MockStarSource

__all__ = [
    # Mock source
    "MockStarSource",
    "MockCollection",
    "MockCall",
    # Helpers
    "FROZEN_NOW",
    "FrozenClock",
    "create_mock_events",
    "star_at",
]
