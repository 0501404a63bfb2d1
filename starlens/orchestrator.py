"""Batched concurrent page fetching under a rate budget."""

import asyncio
from collections.abc import Iterator, Sequence

from starlens.budget import RateBudgetGuard
from starlens.logging import get_logger, log_batch_progress
from starlens.source import StarSource
from starlens.types.stars import CollectionKey, FetchReport, PageOutcome

logger = get_logger("fetch")


def batched(pages: Sequence[int], size: int) -> Iterator[list[int]]:
    """Split ``pages`` into consecutive chunks of at most ``size``."""
    for start in range(0, len(pages), size):
        yield list(pages[start:start + size])


class BatchFetchOrchestrator:
    """
    Drives a page plan through a StarSource in concurrent batches.

    Every page of a batch is requested at once and the whole batch is awaited
    before the next starts. When any page in a batch is rate limited the
    RateBudgetGuard is consulted once; below the floor the run stops and the
    events gathered so far are returned.
    """

    def __init__(
        self,
        source: StarSource,
        guard: RateBudgetGuard,
        batch_size: int = 10,
        page_size: int = 100,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.source = source
        self.guard = guard
        self.batch_size = batch_size
        self.page_size = page_size

    async def fetch(self, key: CollectionKey, pages: Sequence[int]) -> FetchReport:
        """
        Fetch all planned pages, stopping early if the quota runs out.

        Args:
            key: Collection to fetch
            pages: Page numbers from the sampling plan

        Returns:
            FetchReport with the merged events and request accounting
        """
        report = FetchReport(pages_planned=len(pages))
        batches = list(batched(pages, self.batch_size))

        for index, batch in enumerate(batches, start=1):
            results = await asyncio.gather(
                *(self.source.fetch_page(key, page, self.page_size) for page in batch)
            )
            report.pages_requested += len(batch)

            gathered = 0
            hit_limit = False
            for result in results:
                if result.outcome is PageOutcome.OK:
                    report.events.update(result.events)
                    gathered += len(result.events)
                elif result.outcome is PageOutcome.RATE_LIMITED:
                    report.rate_limited_pages.append(result.page)
                    hit_limit = True
                else:
                    report.failed_pages.append(result.page)

            log_batch_progress(key.slug, index, len(batches), batch, gathered)

            if hit_limit:
                report.quota_checks += 1
                if not await self.guard.should_continue():
                    report.stopped_early = index < len(batches)
                    break

        if report.rate_limited_pages or report.failed_pages:
            logger.info(
                "Fetched %s with gaps: %d rate limited, %d failed, %d/%d pages requested",
                key.slug,
                len(report.rate_limited_pages),
                len(report.failed_pages),
                report.pages_requested,
                report.pages_planned,
            )
        return report
