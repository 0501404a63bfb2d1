"""Interface to the upstream stargazer collection."""

from typing import Protocol

from starlens.types.stars import CollectionKey, CollectionSummary, PageResult


class StarSource(Protocol):
    """Paginated source of star events plus its rate limit state."""

    async def fetch_collection_summary(self, key: CollectionKey) -> CollectionSummary:
        """Return total count and creation date; raise UpstreamUnavailableError on failure."""
        ...

    async def fetch_page(self, key: CollectionKey, page: int, page_size: int) -> PageResult:
        """Return one classified page; never raise for HTTP failures."""
        ...

    async def fetch_remaining_quota(self) -> int:
        """Return the requests left in the current rate limit window."""
        ...
