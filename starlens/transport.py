"""
Async HTTP Transport for the GitHub REST API.

Handles async HTTP communication with automatic retry logic, authentication
and error handling using httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from starlens.exceptions import (
    RateLimitExceededError,
    StarlensError,
    UpstreamUnavailableError,
)
from starlens.logging import log_http_request, log_http_response

DEFAULT_ACCEPT = "application/vnd.github+json"
USER_AGENT = "starlens/0.1.0"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [500, 502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for GitHub with retry logic.

    Handles:
    - Token authentication
    - Exponential backoff with jitter for retries
    - Retry-After header respect
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: GitHub token; requests are anonymous when omitted
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            client: Preconfigured httpx client (tests inject a MockTransport here)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        headers = {"Accept": DEFAULT_ACCEPT, "User-Agent": USER_AGENT}
        if token:
            headers["Authorization"] = f"token {token}"
        self.headers = headers

        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Issue a single GET without retries.

        Transport failures propagate as ``httpx.RequestError``; HTTP error
        statuses are returned for the caller to classify.

        Args:
            path: API path (e.g., "/repos/octo/reef/stargazers")
            params: Query parameters
            headers: Extra headers merged over the defaults

        Returns:
            The raw httpx response
        """
        merged = {**self.headers, **(headers or {})}
        url = f"{self.base_url}{path}"
        log_http_request("GET", url, merged, params)

        started = time.perf_counter()
        response = await self._client.get(url, params=params, headers=merged)
        log_http_response(
            response.status_code,
            url,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            rate_remaining=response.headers.get("X-RateLimit-Remaining"),
        )
        return response

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        retry: bool = True,
    ) -> Any:
        """
        GET a JSON document, retrying server errors unless ``retry`` is off.

        Args:
            path: API path
            params: Query parameters
            headers: Extra headers merged over the defaults
            retry: Retry 5xx and connection errors per RetryConfig; when
                False exactly one request is sent

        Returns:
            Parsed JSON response

        Raises:
            RateLimitExceededError: On 403/429 responses
            UpstreamUnavailableError: On other errors or after max retries
        """
        async def make_request() -> httpx.Response:
            return await self.get(path, params=params, headers=headers)

        max_retries = self.retry_config.max_retries if retry else 0
        return await self._execute_with_retry(make_request, max_retries)

    async def _execute_with_retry(
        self,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
        max_retries: int,
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Async function that makes the HTTP request
            max_retries: Retries allowed after the first attempt

        Returns:
            Parsed JSON response

        Raises:
            StarlensError: On non-retryable errors or after max retries
        """
        attempt = 0
        while True:
            try:
                response = await request_fn()
            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= max_retries:
                    raise UpstreamUnavailableError("CONNECTION_ERROR", str(e)) from e
                wait_time = self._get_backoff_time(attempt, None)
            else:
                if response.status_code < 400:
                    return self._decode(response)

                error = self._parse_error_response(response)
                if attempt >= max_retries or not self._should_retry(response.status_code, attempt):
                    raise error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)

            await asyncio.sleep(wait_time)
            attempt += 1

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(
                "INVALID_JSON",
                f"Unparseable response body: {e}",
                status_code=response.status_code,
            ) from e

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> StarlensError:
        """
        Parse a GitHub error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            RateLimitExceededError for 403/429, UpstreamUnavailableError otherwise
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code in (403, 429):
            retry_after_str = response.headers.get("Retry-After")
            try:
                retry_after = int(retry_after_str) if retry_after_str else None
            except ValueError:
                retry_after = None
            return RateLimitExceededError("RATE_LIMITED", message, retry_after, request_id)
        if status_code == 404:
            return UpstreamUnavailableError("NOT_FOUND", message, status_code, request_id)
        if status_code >= 500:
            return UpstreamUnavailableError("SERVER_ERROR", message, status_code, request_id)
        return UpstreamUnavailableError("HTTP_ERROR", message, status_code, request_id)
