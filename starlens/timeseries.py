"""
Dense star time series and trend statistics.

Turns an unordered set of star events into a calendar-dense daily series
(creation day through today) and an hourly series for the trailing week,
reconciles the cumulative counts with the authoritative total when only a
sample of events was observed, and derives trend statistics.

The output depends only on the inputs: events are aggregated by day and hour
keys, so their order never matters.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta, timezone

from starlens.types.series import (
    DailyBucket,
    HourlyBucket,
    StarSeries,
    TrendDirection,
    TrendSummary,
)
from starlens.types.stars import StarEvent

HOURLY_WINDOW_DAYS = 7
TREND_THRESHOLD = 0.10
# sum30 above this counts as growth when the previous window was empty
EMPTY_BASELINE_UP_THRESHOLD = 10


def round_half_up(numerator: int, denominator: int) -> int:
    """Round a non-negative ratio to the nearest integer, halves up."""
    return (2 * numerator + denominator) // (2 * denominator)


def classify_trend(sum30: int, sum_prev30: int) -> TrendDirection:
    """Compare the last 30 days of stars with the 30 days before them."""
    if sum_prev30 > 0:
        change = (sum30 - sum_prev30) / sum_prev30
        if change > TREND_THRESHOLD:
            return TrendDirection.UP
        if change < -TREND_THRESHOLD:
            return TrendDirection.DOWN
        return TrendDirection.STABLE
    if sum30 > EMPTY_BASELINE_UP_THRESHOLD:
        return TrendDirection.UP
    return TrendDirection.STABLE


def _mean(values: Sequence[int]) -> float:
    return sum(values) / len(values) if values else 0.0


class TimeSeriesBuilder:
    """Builds dense daily/hourly star series for one collection."""

    def __init__(self, hourly_window_days: int = HOURLY_WINDOW_DAYS) -> None:
        self.hourly_window_days = hourly_window_days

    def build(
        self,
        created_at: date,
        today: date,
        events: Iterable[StarEvent],
        reported_total: int,
    ) -> StarSeries:
        """
        Build the complete series.

        Args:
            created_at: First day of the series (repository creation, UTC)
            today: Last day of the series (UTC)
            events: Observed star events, in any order
            reported_total: Authoritative star count from the summary call

        Returns:
            StarSeries with dense daily and hourly buckets, completeness and trends

        Raises:
            ValueError: If created_at is after today
        """
        if created_at > today:
            raise ValueError(f"created_at {created_at} is after today {today}")

        hourly_start = today - timedelta(days=self.hourly_window_days)
        by_day: Counter[date] = Counter()
        by_hour: Counter[datetime] = Counter()

        for event in events:
            stamp = event.timestamp.astimezone(timezone.utc)
            day = stamp.date()
            by_day[day] += 1
            if hourly_start <= day <= today:
                by_hour[stamp.replace(minute=0, second=0, microsecond=0)] += 1

        daily = self._dense_daily(created_at, today, by_day)
        hourly = self._dense_hourly(hourly_start, today, by_hour)

        observed = daily[-1].cumulative_count
        completeness = self._completeness(observed, reported_total)
        if 0 < observed != reported_total:
            for bucket in daily:
                bucket.cumulative_count = round_half_up(
                    bucket.cumulative_count * reported_total, observed
                )

        return StarSeries(
            daily=daily,
            hourly=hourly,
            trends=self.trends(daily),
            observed_total=observed,
            data_completeness=completeness,
        )

    def _dense_daily(
        self, start: date, end: date, by_day: Counter[date]
    ) -> list[DailyBucket]:
        series: list[DailyBucket] = []
        cumulative = 0
        day = start
        while day <= end:
            count = by_day.get(day, 0)
            cumulative += count
            series.append(DailyBucket(date=day, daily_count=count, cumulative_count=cumulative))
            day += timedelta(days=1)
        return series

    def _dense_hourly(
        self, start: date, end: date, by_hour: Counter[datetime]
    ) -> list[HourlyBucket]:
        hour = datetime.combine(start, time(0), tzinfo=timezone.utc)
        last = datetime.combine(end, time(23), tzinfo=timezone.utc)
        series: list[HourlyBucket] = []
        while hour <= last:
            series.append(HourlyBucket(hour=hour, count=by_hour.get(hour, 0)))
            hour += timedelta(hours=1)
        return series

    @staticmethod
    def _completeness(observed: int, reported_total: int) -> float:
        if reported_total <= 0:
            return 100.0
        return min(observed / reported_total * 100, 100.0)

    @staticmethod
    def trends(daily: Sequence[DailyBucket]) -> TrendSummary:
        """
        Derive trend statistics from a corrected daily series.

        Args:
            daily: Non-empty dense daily series, oldest first

        Returns:
            TrendSummary for the series
        """
        last7 = [bucket.daily_count for bucket in daily[-7:]]
        last30 = daily[-30:]
        prev30 = daily[-60:-30]

        sum30 = sum(bucket.daily_count for bucket in last30)
        sum_prev30 = sum(bucket.daily_count for bucket in prev30)

        avg_7d = _mean(last7)
        avg_30d = _mean([bucket.daily_count for bucket in last30])

        # max() keeps the first maximal element, i.e. the earliest date
        peak = max(daily, key=lambda bucket: bucket.daily_count)

        start = last30[0].cumulative_count
        final = daily[-1].cumulative_count
        growth = (final - start) / start * 100 if start > 0 else 0.0

        return TrendSummary(
            avg_7d=avg_7d,
            avg_30d=avg_30d,
            peak_day=peak,
            velocity=avg_7d,
            direction=classify_trend(sum30, sum_prev30),
            growth_rate_percent=growth,
        )
