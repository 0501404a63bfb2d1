"""
starlens async client.

Provides the async interface for computing star analytics against the
GitHub REST API.
"""

import os
from typing import Any

import httpx

from starlens.analytics import StarAnalyticsService
from starlens.cache import EventCache
from starlens.clients import AsyncRateLimitClient, AsyncStarsClient
from starlens.config import AnalyticsConfig
from starlens.exceptions import ConfigurationError
from starlens.transport import AsyncHTTPTransport, RetryConfig
from starlens.types.series import StarAnalytics
from starlens.types.stars import CollectionKey, CollectionSummary, PageResult


class StarlensClient:
    """
    Async client for GitHub star analytics.

    Aggregates the resource clients, acts as the StarSource for the analytics
    service and owns the HTTP transport.

    Example:
        ```python
        import asyncio
        from starlens import EventCache, StarlensClient

        async def main():
            cache = EventCache()
            async with StarlensClient(token="ghp_...", cache=cache) as client:
                analytics = await client.star_analytics("octo", "reef")
                print(analytics.trends.direction, analytics.data_completeness)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        config: AnalyticsConfig | None = None,
        cache: EventCache | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the async client.

        Args:
            token: GitHub token (optional; anonymous requests have a far smaller quota)
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry behavior for summary and quota calls (optional)
            config: Analytics configuration (optional)
            cache: Event cache shared across clients in the process (optional)
            http_client: Preconfigured httpx client (optional)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.config = config or AnalyticsConfig()

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            client=http_client,
        )

        self.stars = AsyncStarsClient(self._transport)
        self.rate_limit = AsyncRateLimitClient(self._transport)
        self.analytics = StarAnalyticsService(self, cache=cache, config=self.config)

    @classmethod
    def from_env(
        cls,
        retry_config: RetryConfig | None = None,
        cache: EventCache | None = None,
    ) -> "StarlensClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_TOKEN: GitHub token (optional)
            STARLENS_BASE_URL: Base URL for API (optional, default: https://api.github.com)
            STARLENS_TIMEOUT: Request timeout in seconds (optional, default: 30)
            STARLENS_BATCH_SIZE, STARLENS_QUOTA_FLOOR, STARLENS_CACHE_TTL_HOURS:
                see AnalyticsConfig.from_env

        Args:
            retry_config: Configuration for retry behavior (optional)
            cache: Event cache shared across clients in the process (optional)

        Returns:
            Configured StarlensClient instance

        Raises:
            ConfigurationError: If an environment variable is malformed
        """
        token = os.environ.get("GITHUB_TOKEN", "").strip() or None
        base_url = os.environ.get("STARLENS_BASE_URL", cls.DEFAULT_BASE_URL)
        raw_timeout = os.environ.get("STARLENS_TIMEOUT")

        timeout = cls.DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid STARLENS_TIMEOUT: {raw_timeout!r}. Must be a number of seconds"
                ) from None
            if timeout <= 0:
                raise ConfigurationError("STARLENS_TIMEOUT must be positive")

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            config=AnalyticsConfig.from_env(),
            cache=cache,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def star_analytics(
        self,
        owner: str,
        repo: str,
        full_scan: bool = False,
        refresh: bool = False,
    ) -> StarAnalytics:
        """Compute star analytics for ``owner/repo``."""
        return await self.analytics.compute_star_analytics(
            CollectionKey(owner=owner, repo=repo), full_scan=full_scan, refresh=refresh
        )

    async def fetch_collection_summary(self, key: CollectionKey) -> CollectionSummary:
        return await self.stars.get_summary(key)

    async def fetch_page(self, key: CollectionKey, page: int, page_size: int) -> PageResult:
        return await self.stars.fetch_page(key, page, page_size)

    async def fetch_remaining_quota(self) -> int:
        return await self.rate_limit.remaining()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "StarlensClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
