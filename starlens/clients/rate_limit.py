"""Async rate limit resource client."""

from typing import TYPE_CHECKING

from starlens.exceptions import UpstreamUnavailableError

if TYPE_CHECKING:
    from starlens.transport import AsyncHTTPTransport


class AsyncRateLimitClient:
    """Async client for the GitHub rate limit status endpoint."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def remaining(self) -> int:
        """
        Get the remaining core API quota.

        Querying /rate_limit does not count against the quota. The call is
        never retried: each quota check is exactly one request, and a failure
        ends the fetch through RateBudgetGuard.

        Returns:
            Requests left in the current core window

        Raises:
            UpstreamUnavailableError: If the endpoint fails or the payload is malformed
        """
        data = await self.transport.get_json("/rate_limit", retry=False)

        try:
            return int(data["resources"]["core"]["remaining"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamUnavailableError(
                "INVALID_RESPONSE", "Rate limit payload missing core.remaining"
            ) from e
