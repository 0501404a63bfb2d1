"""Choose which stargazer pages to fetch."""

import math

DEFAULT_PAGE_SIZE = 100
DEFAULT_HEAD_PAGES = 30
DEFAULT_TAIL_PAGES = 70
DEFAULT_MAX_SAMPLED_PAGES = 100


def total_pages(total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages needed to list ``total_items``."""
    if total_items < 0:
        raise ValueError("total_items must not be negative")
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(total_items / page_size)


def plan_pages(
    total_items: int,
    full_scan: bool,
    page_size: int = DEFAULT_PAGE_SIZE,
    head_pages: int = DEFAULT_HEAD_PAGES,
    tail_pages: int = DEFAULT_TAIL_PAGES,
    max_pages: int = DEFAULT_MAX_SAMPLED_PAGES,
) -> list[int]:
    """
    Return the ascending page numbers to request.

    Small collections, and any collection when ``full_scan`` is set, are read
    in full. Larger ones are sampled: the first ``head_pages`` pages carry the
    early growth shape and the last ``tail_pages`` pages carry current
    velocity, so the request count stays bounded regardless of size.

    Args:
        total_items: Reported size of the collection
        full_scan: Fetch every page regardless of size
        page_size: Items per page
        head_pages: Leading pages kept when sampling
        tail_pages: Trailing pages kept when sampling
        max_pages: Largest page count read in full without ``full_scan``

    Returns:
        Strictly increasing page numbers within ``[1, total_pages]``
    """
    pages = total_pages(total_items, page_size)

    if full_scan or pages <= max_pages:
        return list(range(1, pages + 1))

    head = range(1, min(head_pages, pages) + 1)
    tail = range(max(pages - tail_pages + 1, 1), pages + 1)
    return sorted(set(head) | set(tail))
