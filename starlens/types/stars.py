"""Star-related data models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


@dataclass(frozen=True)
class StarEvent:
    """A single star on a repository."""

    timestamp: datetime  # timezone-aware, UTC
    actor: str


@dataclass(frozen=True)
class CollectionKey:
    """Identifies one stargazer collection."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, slug: str) -> "CollectionKey":
        """Build a key from an "owner/repo" string."""
        owner, sep, repo = slug.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected 'owner/repo', got {slug!r}")
        return cls(owner=owner, repo=repo)


@dataclass(frozen=True)
class CollectionSummary:
    """Total size and creation date of a collection."""

    total_items: int
    created_at: date


class PageOutcome(str, Enum):
    """Classification of a single page fetch."""

    OK = "ok"
    RATE_LIMITED = "rate_limited"
    ERROR = "error"


@dataclass(frozen=True)
class PageResult:
    """Result of fetching one page of stargazers."""

    page: int
    outcome: PageOutcome
    events: tuple[StarEvent, ...] = ()
    status_code: int | None = None


@dataclass(frozen=True)
class CacheEntry:
    """Cached stargazer events for one collection."""

    key: CollectionKey
    fetched_at: datetime
    events: tuple[StarEvent, ...]


@dataclass
class FetchReport:
    """Outcome of a batched fetch run."""

    events: set[StarEvent] = field(default_factory=set)
    pages_planned: int = 0
    pages_requested: int = 0
    rate_limited_pages: list[int] = field(default_factory=list)
    failed_pages: list[int] = field(default_factory=list)
    quota_checks: int = 0
    stopped_early: bool = False

    @property
    def requests_issued(self) -> int:
        return self.pages_requested + self.quota_checks
