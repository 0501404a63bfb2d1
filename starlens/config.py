"""Tuning knobs for star analytics."""

import os
from dataclasses import dataclass, field
from datetime import timedelta

from starlens.exceptions import ConfigurationError


@dataclass(frozen=True)
class AnalyticsConfig:
    """Configuration for sampling, batching, rate budget and caching."""

    page_size: int = 100  # GitHub's per_page ceiling
    batch_size: int = 10
    quota_floor: int = 10  # stop fetching below this many remaining requests
    head_pages: int = 30
    tail_pages: int = 70
    max_sampled_pages: int = 100
    cache_ttl: timedelta = field(default_factory=lambda: timedelta(days=7))
    single_flight: bool = True

    def __post_init__(self) -> None:
        for name in ("page_size", "batch_size", "max_sampled_pages"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1")
        for name in ("quota_floor", "head_pages", "tail_pages"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if self.cache_ttl <= timedelta(0):
            raise ConfigurationError("cache_ttl must be positive")

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        """
        Build configuration from environment variables.

        Environment variables:
            STARLENS_BATCH_SIZE: Pages fetched concurrently per batch (default: 10)
            STARLENS_QUOTA_FLOOR: Remaining-quota floor that stops fetching (default: 10)
            STARLENS_CACHE_TTL_HOURS: Cache lifetime in hours (default: 168)

        Raises:
            ConfigurationError: If a variable is not an integer or out of range
        """
        defaults = cls()
        batch_size = _env_int("STARLENS_BATCH_SIZE", defaults.batch_size)
        quota_floor = _env_int("STARLENS_QUOTA_FLOOR", defaults.quota_floor)
        ttl_hours = _env_int(
            "STARLENS_CACHE_TTL_HOURS", int(defaults.cache_ttl.total_seconds() // 3600)
        )
        return cls(
            batch_size=batch_size,
            quota_floor=quota_floor,
            cache_ttl=timedelta(hours=ttl_hours),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
