"""starlens type definitions.

This module exports all data model types used by the package.
"""

from starlens.types.series import (
    DailyBucket,
    HourlyBucket,
    StarAnalytics,
    StarSeries,
    TrendDirection,
    TrendSummary,
)
from starlens.types.stars import (
    CacheEntry,
    CollectionKey,
    CollectionSummary,
    FetchReport,
    PageOutcome,
    PageResult,
    StarEvent,
)

__all__ = [
    # Collection types
    "CollectionKey",
    "CollectionSummary",
    "StarEvent",
    "PageOutcome",
    "PageResult",
    "FetchReport",
    "CacheEntry",
    # Series types
    "DailyBucket",
    "HourlyBucket",
    "TrendDirection",
    "TrendSummary",
    "StarSeries",
    "StarAnalytics",
]
