"""starlens - GitHub star history aggregation."""

from starlens.analytics import StarAnalyticsService
from starlens.budget import RateBudgetGuard
from starlens.cache import EventCache, SingleFlight
from starlens.client import StarlensClient
from starlens.config import AnalyticsConfig
from starlens.exceptions import (
    ConfigurationError,
    RateLimitExceededError,
    StarlensError,
    UpstreamUnavailableError,
)
from starlens.logging import configure_logging, get_logger
from starlens.orchestrator import BatchFetchOrchestrator
from starlens.sampling import plan_pages
from starlens.source import StarSource
from starlens.timeseries import TimeSeriesBuilder, classify_trend
from starlens.transport import AsyncHTTPTransport, RetryConfig
from starlens.types import (
    CollectionKey,
    DailyBucket,
    HourlyBucket,
    StarAnalytics,
    StarEvent,
    TrendDirection,
    TrendSummary,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main client
    "StarlensClient",
    "StarAnalyticsService",
    # Engine components
    "StarSource",
    "plan_pages",
    "BatchFetchOrchestrator",
    "RateBudgetGuard",
    "EventCache",
    "SingleFlight",
    "TimeSeriesBuilder",
    "classify_trend",
    # Types
    "CollectionKey",
    "StarEvent",
    "DailyBucket",
    "HourlyBucket",
    "TrendDirection",
    "TrendSummary",
    "StarAnalytics",
    # Exceptions
    "StarlensError",
    "UpstreamUnavailableError",
    "RateLimitExceededError",
    "ConfigurationError",
    # Configuration
    "AnalyticsConfig",
    "AsyncHTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
