"""Decide whether the remaining API quota allows more fetching."""

from starlens.exceptions import StarlensError
from starlens.logging import get_logger
from starlens.source import StarSource

logger = get_logger("fetch")


class RateBudgetGuard:
    """Consults the upstream quota after a batch hits a rate limit."""

    def __init__(self, source: StarSource, floor: int = 10) -> None:
        self.source = source
        self.floor = floor
        self.last_remaining: int | None = None

    async def should_continue(self) -> bool:
        """
        Check remaining quota against the floor.

        A failed quota lookup counts as an exhausted budget.
        """
        try:
            remaining = await self.source.fetch_remaining_quota()
        except StarlensError as e:
            logger.warning("Quota check failed, stopping fetch: %s", e)
            self.last_remaining = None
            return False

        self.last_remaining = remaining
        if remaining < self.floor:
            logger.warning(
                "Rate limit nearly exhausted, stopping (remaining=%d, floor=%d)",
                remaining,
                self.floor,
            )
            return False
        return True
