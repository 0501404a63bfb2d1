"""
Star analytics: summary, cached or sampled stargazer fetch, dense series.

``StarAnalyticsService.compute_star_analytics`` is the single entry point.
It either returns a complete StarAnalytics (possibly built from a partial
fetch, reflected in ``data_completeness``) or raises one top-level error.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from starlens.budget import RateBudgetGuard
from starlens.cache import EventCache, SingleFlight, utc_now
from starlens.config import AnalyticsConfig
from starlens.logging import get_logger
from starlens.orchestrator import BatchFetchOrchestrator
from starlens.sampling import plan_pages
from starlens.source import StarSource
from starlens.timeseries import TimeSeriesBuilder
from starlens.types.series import StarAnalytics
from starlens.types.stars import CollectionKey, CollectionSummary, FetchReport, StarEvent

logger = get_logger("analytics")

RECENT_DAYS = 30


@dataclass(frozen=True)
class _Events:
    events: tuple[StarEvent, ...] | set[StarEvent]
    from_cache: bool
    stopped_early: bool = False


class StarAnalyticsService:
    """
    Computes star analytics for repositories.

    Example:
        ```python
        cache = EventCache()
        service = StarAnalyticsService(source, cache)
        analytics = await service.compute_star_analytics(CollectionKey("octo", "reef"))
        print(analytics.trends.direction)
        ```
    """

    def __init__(
        self,
        source: StarSource,
        cache: EventCache | None = None,
        config: AnalyticsConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        builder: TimeSeriesBuilder | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            source: Upstream stargazer source
            cache: Shared event cache (default: a new cache using config.cache_ttl)
            config: Sampling, batching and caching configuration
            clock: Returns the current aware UTC time
            builder: Time series builder
        """
        self.source = source
        self.config = config or AnalyticsConfig()
        self.cache = cache or EventCache(ttl=self.config.cache_ttl, clock=clock)
        self.clock = clock
        self.builder = builder or TimeSeriesBuilder()
        self._flights: SingleFlight[_Events] = SingleFlight()

    async def compute_star_analytics(
        self,
        key: CollectionKey,
        full_scan: bool = False,
        refresh: bool = False,
    ) -> StarAnalytics:
        """
        Compute the complete star analytics for a repository.

        Args:
            key: Repository to analyse
            full_scan: Fetch every page instead of sampling large repositories.
                Concurrent sampled and full-scan requests fetch separately; a
                fresh cache entry from either mode serves both unless refresh
                is set
            refresh: Ignore any cached events and fetch again

        Returns:
            StarAnalytics with dense history, hourly activity and trends

        Raises:
            UpstreamUnavailableError: If the repository summary cannot be fetched
            RateLimitExceededError: If the summary call itself is rate limited
        """
        logger.info("Computing star analytics for %s (full_scan=%s)", key.slug, full_scan)
        summary = await self.source.fetch_collection_summary(key)

        gathered = await self._events(key, summary, full_scan, refresh)

        today = max(self.clock().date(), summary.created_at)
        series = self.builder.build(
            summary.created_at, today, gathered.events, summary.total_items
        )

        age_in_days = (today - summary.created_at).days
        avg_per_day = (
            summary.total_items / age_in_days if age_in_days > 0 else float(summary.total_items)
        )

        analytics = StarAnalytics(
            owner=key.owner,
            repo=key.repo,
            total_items=summary.total_items,
            created_at=summary.created_at,
            age_in_days=age_in_days,
            avg_per_day=avg_per_day,
            daily_history=series.daily,
            hourly_activity=series.hourly,
            trends=series.trends,
            recent_activity=series.daily[-RECENT_DAYS:],
            data_completeness=series.data_completeness,
            events_observed=series.observed_total,
            from_cache=gathered.from_cache,
            stopped_early=gathered.stopped_early,
        )

        logger.info(
            "Star analytics computed for %s: total=%d days=%d completeness=%.1f%% "
            "avg7d=%.2f trend=%s",
            key.slug,
            summary.total_items,
            len(series.daily),
            series.data_completeness,
            series.trends.avg_7d,
            series.trends.direction.value,
        )
        return analytics

    async def _events(
        self,
        key: CollectionKey,
        summary: CollectionSummary,
        full_scan: bool,
        refresh: bool,
    ) -> _Events:
        if not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("Using cached stargazers for %s (%d events)", key.slug, len(cached.events))
                return _Events(events=cached.events, from_cache=True)

        if self.config.single_flight:
            return await self._flights.do(
                (key, full_scan), lambda: self._fetch(key, summary, full_scan)
            )
        return await self._fetch(key, summary, full_scan)

    async def _fetch(
        self, key: CollectionKey, summary: CollectionSummary, full_scan: bool
    ) -> _Events:
        config = self.config
        pages = plan_pages(
            summary.total_items,
            full_scan,
            page_size=config.page_size,
            head_pages=config.head_pages,
            tail_pages=config.tail_pages,
            max_pages=config.max_sampled_pages,
        )
        logger.info(
            "Fetching stargazers for %s: total=%d planned_pages=%d",
            key.slug,
            summary.total_items,
            len(pages),
        )

        orchestrator = BatchFetchOrchestrator(
            self.source,
            RateBudgetGuard(self.source, floor=config.quota_floor),
            batch_size=config.batch_size,
            page_size=config.page_size,
        )
        report = await orchestrator.fetch(key, pages)
        self._store(key, report)
        return _Events(
            events=report.events, from_cache=False, stopped_early=report.stopped_early
        )

    def _store(self, key: CollectionKey, report: FetchReport) -> None:
        # Rate-limited runs stay uncached so the gap is refilled once quota resets
        if not report.events or report.rate_limited_pages:
            logger.debug("Not caching incomplete fetch for %s", key.slug)
            return
        self.cache.put(key, report.events)
