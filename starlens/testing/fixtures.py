"""
Pytest fixtures for starlens testing.

Provides common fixtures and event factories for testing star analytics.
"""

from collections.abc import Generator
from datetime import date, datetime, timedelta, timezone

import pytest

from starlens.cache import EventCache
from starlens.testing.mock import MockStarSource
from starlens.types.stars import CollectionKey, StarEvent

# Fixed "now" used by the clock fixtures
FROZEN_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def create_mock_events(
    count: int,
    start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
    spacing: timedelta = timedelta(hours=1),
    actor_prefix: str = "user",
) -> list[StarEvent]:
    """
    Create evenly spaced star events, oldest first.

    Args:
        count: Number of events
        start: Timestamp of the first event
        spacing: Gap between consecutive events
        actor_prefix: Prefix for generated actor logins

    Returns:
        List of StarEvent objects
    """
    return [
        StarEvent(timestamp=start + spacing * i, actor=f"{actor_prefix}-{i}")
        for i in range(count)
    ]


def star_at(stamp: str, actor: str = "octocat") -> StarEvent:
    """Build a StarEvent from an ISO-8601 timestamp such as "2024-01-02T10:00:00Z"."""
    parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    return StarEvent(timestamp=parsed.astimezone(timezone.utc), actor=actor)


class FrozenClock:
    """A settable clock for cache TTL and "today" calculations."""

    def __init__(self, now: datetime = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


# ============================================================================
# Source and Cache Fixtures
# ============================================================================


@pytest.fixture
def mock_source() -> Generator[MockStarSource, None, None]:
    """
    Provide an empty MockStarSource.

    Example:
        ```python
        def test_my_feature(mock_source):
            key = mock_source.add_collection("octo", "reef", events, created_at)
            ...
            assert mock_source.was_called("fetch_page")
        ```
    """
    source = MockStarSource()
    yield source
    source.reset()


@pytest.fixture
def frozen_clock() -> FrozenClock:
    """Provide a clock frozen at FROZEN_NOW."""
    return FrozenClock()


@pytest.fixture
def event_cache(frozen_clock: FrozenClock) -> EventCache:
    """Provide an EventCache driven by the frozen clock."""
    return EventCache(clock=frozen_clock)


@pytest.fixture
def small_collection(mock_source: MockStarSource) -> CollectionKey:
    """
    Register a 250-star repository created on 2024-01-01.

    Events are spaced four hours apart, the last one on 2024-02-11.
    """
    events = create_mock_events(250, spacing=timedelta(hours=4))
    return mock_source.add_collection("octo", "reef", events, date(2024, 1, 1))


__all__ = [
    "FROZEN_NOW",
    "FrozenClock",
    "create_mock_events",
    "star_at",
    "mock_source",
    "frozen_clock",
    "event_cache",
    "small_collection",
]
