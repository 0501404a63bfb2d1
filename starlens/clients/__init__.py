"""starlens async resource clients."""

from starlens.clients.rate_limit import AsyncRateLimitClient
from starlens.clients.stars import AsyncStarsClient

__all__ = [
    "AsyncRateLimitClient",
    "AsyncStarsClient",
]
