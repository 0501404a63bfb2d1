"""Time-series and analytics data models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


class TrendDirection(str, Enum):
    """Direction of recent star growth."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass
class DailyBucket:
    """Stars gained on one calendar day."""

    date: date
    daily_count: int
    cumulative_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "daily": self.daily_count,
            "cumulative": self.cumulative_count,
        }


@dataclass(frozen=True)
class HourlyBucket:
    """Stars gained within one UTC hour."""

    hour: datetime
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour.strftime("%Y-%m-%dT%H:00:00Z"),
            "stars": self.count,
        }


@dataclass(frozen=True)
class TrendSummary:
    """Trend statistics derived from a daily series."""

    avg_7d: float
    avg_30d: float
    peak_day: DailyBucket
    velocity: float  # stars/day, equal to avg_7d
    direction: TrendDirection
    growth_rate_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "avg7d": round(self.avg_7d, 2),
            "avg30d": round(self.avg_30d, 2),
            "peakDay": {
                "date": self.peak_day.date.isoformat(),
                "stars": self.peak_day.daily_count,
            },
            "velocity": round(self.velocity, 2),
            "trend": self.direction.value,
            "growthRate": round(self.growth_rate_percent, 2),
        }


@dataclass(frozen=True)
class StarSeries:
    """Dense daily and hourly series with completeness and trends."""

    daily: list[DailyBucket]
    hourly: list[HourlyBucket]
    trends: TrendSummary
    observed_total: int
    data_completeness: float  # percentage, 0-100


@dataclass(frozen=True)
class StarAnalytics:
    """Complete star analytics for one repository."""

    owner: str
    repo: str
    total_items: int
    created_at: date
    age_in_days: int
    avg_per_day: float
    daily_history: list[DailyBucket]
    hourly_activity: list[HourlyBucket]
    trends: TrendSummary
    recent_activity: list[DailyBucket]  # last 30 entries of daily_history
    data_completeness: float
    events_observed: int = 0
    from_cache: bool = False
    stopped_early: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON response shape served to the frontend."""
        return {
            "owner": self.owner,
            "repo": self.repo,
            "totalStars": self.total_items,
            "createdAt": self.created_at.isoformat(),
            "ageInDays": self.age_in_days,
            "avgStarsPerDay": round(self.avg_per_day, 2),
            "dailyHistory": [bucket.to_dict() for bucket in self.daily_history],
            "hourlyActivity": [bucket.to_dict() for bucket in self.hourly_activity],
            "trends": self.trends.to_dict(),
            "recentActivity": [bucket.to_dict() for bucket in self.recent_activity],
            "dataCompleteness": round(self.data_completeness, 1),
        }
