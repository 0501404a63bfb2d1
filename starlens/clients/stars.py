"""Async stargazers resource client."""

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

import httpx

from starlens.exceptions import UpstreamUnavailableError
from starlens.logging import get_logger
from starlens.types.stars import (
    CollectionKey,
    CollectionSummary,
    PageOutcome,
    PageResult,
    StarEvent,
)

if TYPE_CHECKING:
    from starlens.transport import AsyncHTTPTransport

logger = get_logger("fetch")

# Required for starred_at timestamps on stargazer listings
STAR_MEDIA_TYPE = "application/vnd.github.star+json"

RATE_LIMIT_STATUSES = frozenset({403, 429})


def parse_github_datetime(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_stargazers(items: Any) -> tuple[StarEvent, ...]:
    """
    Convert a stargazer listing into star events.

    Items without a usable ``starred_at`` are skipped.
    """
    if not isinstance(items, list):
        return ()

    events: list[StarEvent] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("starred_at"):
            continue
        try:
            timestamp = parse_github_datetime(item["starred_at"])
        except (TypeError, ValueError):
            logger.debug("Skipping stargazer with bad starred_at: %r", item.get("starred_at"))
            continue
        user = item.get("user") or {}
        events.append(StarEvent(timestamp=timestamp, actor=str(user.get("login", ""))))
    return tuple(events)


class AsyncStarsClient:
    """Async client for repository stargazer listings."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async stars client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_summary(self, key: CollectionKey) -> CollectionSummary:
        """
        Get the star count and creation date of a repository.

        Args:
            key: The repository to describe

        Returns:
            CollectionSummary with total_items and created_at

        Raises:
            UpstreamUnavailableError: On transport errors, non-2xx responses
                or a payload without the expected fields
            RateLimitExceededError: If the request itself is rate limited
        """
        data = await self.transport.get_json(f"/repos/{key.owner}/{key.repo}")

        try:
            total = int(data["stargazers_count"])
            created_at = date.fromisoformat(str(data["created_at"])[:10])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamUnavailableError(
                "INVALID_RESPONSE",
                f"Repository payload for {key.slug} is missing star metadata",
            ) from e

        return CollectionSummary(total_items=total, created_at=created_at)

    async def fetch_page(
        self,
        key: CollectionKey,
        page: int,
        page_size: int = 100,
    ) -> PageResult:
        """
        Fetch one page of stargazers with timestamps.

        Never raises for HTTP or transport failures: the outcome is
        classified instead.

        Args:
            key: The repository whose stargazers to list
            page: 1-based page number
            page_size: Items per page (GitHub caps this at 100)

        Returns:
            PageResult classified as OK, RATE_LIMITED or ERROR
        """
        try:
            response = await self.transport.get(
                f"/repos/{key.owner}/{key.repo}/stargazers",
                params={"per_page": page_size, "page": page},
                headers={"Accept": STAR_MEDIA_TYPE},
            )
        except httpx.RequestError as e:
            logger.warning("Page %d of %s failed: %s", page, key.slug, e)
            return PageResult(page=page, outcome=PageOutcome.ERROR)

        status = response.status_code
        if status in RATE_LIMIT_STATUSES:
            logger.warning("Rate limit hit on page %d of %s", page, key.slug)
            return PageResult(page=page, outcome=PageOutcome.RATE_LIMITED, status_code=status)

        if status >= 400:
            logger.warning("Page %d of %s returned HTTP %d", page, key.slug, status)
            return PageResult(page=page, outcome=PageOutcome.ERROR, status_code=status)

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Page %d of %s returned unparseable JSON", page, key.slug)
            return PageResult(page=page, outcome=PageOutcome.ERROR, status_code=status)

        return PageResult(
            page=page,
            outcome=PageOutcome.OK,
            events=parse_stargazers(payload),
            status_code=status,
        )
