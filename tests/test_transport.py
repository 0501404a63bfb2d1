"""
Property-based tests for HTTP Transport retry behavior.

Feature: star-analytics
"""

import asyncio
from unittest.mock import MagicMock

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from starlens.exceptions import RateLimitExceededError, UpstreamUnavailableError
from starlens.transport import AsyncHTTPTransport, RetryConfig

# Test strategies
backoff_factor_strategy = st.floats(min_value=1.1, max_value=5.0)
attempt_strategy = st.integers(min_value=0, max_value=5)
retry_after_strategy = st.integers(min_value=1, max_value=120)


def _transport(config: RetryConfig | None = None) -> AsyncHTTPTransport:
    return AsyncHTTPTransport(base_url="https://api.github.com", retry_config=config)


@given(
    backoff_factor=backoff_factor_strategy,
    attempt=attempt_strategy,
)
@settings(max_examples=100)
def test_exponential_backoff_timing(backoff_factor: float, attempt: int) -> None:
    """
    For any retry configuration with backoff_factor B and attempt number N,
    the wait time before attempt N is approximately B^N seconds (with jitter).
    """
    config = RetryConfig(
        backoff_factor=backoff_factor,
        jitter=0.1,  # ±10% jitter
        max_backoff=1000.0,  # High max to not interfere with test
    )
    transport = _transport(config)

    expected_base = backoff_factor ** attempt
    actual = transport._get_backoff_time(attempt, None)

    min_expected = min(expected_base * 0.9, config.max_backoff)
    max_expected = min(expected_base * 1.1, config.max_backoff)

    assert min_expected <= actual <= max_expected, (
        f"Backoff time {actual} not in expected range [{min_expected}, {max_expected}] "
        f"for attempt {attempt} with factor {backoff_factor}"
    )


@given(retry_after=retry_after_strategy)
@settings(max_examples=100)
def test_retry_after_header_respected(retry_after: int) -> None:
    """A Retry-After header of T seconds yields a wait of exactly T seconds."""
    transport = _transport(RetryConfig(respect_retry_after=True))

    actual = transport._get_backoff_time(0, str(retry_after))

    assert actual == float(retry_after), (
        f"Expected wait time {retry_after}, got {actual}"
    )


@given(
    status_code=st.sampled_from([400, 401, 403, 404, 422, 429]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_no_retry_on_client_errors(status_code: int, attempt: int) -> None:
    """Client errors, rate limits included, are never retried."""
    transport = _transport(RetryConfig(max_retries=3))

    assert not transport._should_retry(status_code, attempt), (
        f"Should not retry on status code {status_code}"
    )


@given(
    status_code=st.sampled_from([500, 502, 503, 504]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_retry_on_server_errors(status_code: int, attempt: int) -> None:
    """Server errors are retried while under max_retries."""
    transport = _transport(RetryConfig(max_retries=3))

    assert transport._should_retry(status_code, attempt), (
        f"Should retry on status code {status_code} at attempt {attempt}"
    )


def test_max_retries_exceeded() -> None:
    """Test that retries stop after max_retries is reached."""
    transport = _transport(RetryConfig(max_retries=2))

    assert not transport._should_retry(500, 2), "Should not retry at max_retries"
    assert not transport._should_retry(500, 3), "Should not retry beyond max_retries"
    assert transport._should_retry(500, 0), "Should retry at attempt 0"
    assert transport._should_retry(500, 1), "Should retry at attempt 1"


def test_backoff_respects_max_backoff() -> None:
    """Test that backoff time is capped at max_backoff."""
    config = RetryConfig(
        backoff_factor=10.0,  # Large factor
        max_backoff=5.0,  # Small max
        jitter=0.0,  # No jitter for predictable test
    )
    transport = _transport(config)

    assert transport._get_backoff_time(3, None) == 5.0


def test_error_response_parsing() -> None:
    """Error responses are parsed into the matching exception types."""
    transport = _transport()

    test_cases = [
        (403, RateLimitExceededError, "RATE_LIMITED"),
        (429, RateLimitExceededError, "RATE_LIMITED"),
        (404, UpstreamUnavailableError, "NOT_FOUND"),
        (500, UpstreamUnavailableError, "SERVER_ERROR"),
        (422, UpstreamUnavailableError, "HTTP_ERROR"),
    ]

    for status_code, expected_type, expected_code in test_cases:
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.json.return_value = {"message": "Test message"}
        mock_response.headers = {"Retry-After": "60", "X-GitHub-Request-Id": "ABCD:1234"}

        error = transport._parse_error_response(mock_response)

        assert type(error) is expected_type, (
            f"Expected {expected_type.__name__} for status {status_code}, got {type(error).__name__}"
        )
        assert error.code == expected_code
        assert error.message == "Test message"
        assert error.request_id == "ABCD:1234"


def test_error_response_without_json_body() -> None:
    transport = _transport()
    mock_response = MagicMock()
    mock_response.status_code = 503
    mock_response.json.side_effect = ValueError("no json")
    mock_response.headers = {}

    error = transport._parse_error_response(mock_response)

    assert isinstance(error, UpstreamUnavailableError)
    assert error.message == "HTTP 503"


def test_get_json_retries_server_errors_then_succeeds() -> None:
    statuses = [502, 503, 200]
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        status = statuses[calls]
        calls += 1
        if status == 200:
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(status)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = AsyncHTTPTransport(
        base_url="https://api.github.com",
        retry_config=RetryConfig(max_retries=3, backoff_factor=0.0, jitter=0.0, max_backoff=0.0),
        client=http_client,
    )

    assert asyncio.run(transport.get_json("/rate_limit")) == {"ok": True}
    assert calls == 3


def test_get_json_gives_up_after_max_retries() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500, json={"message": "Server Error"})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = AsyncHTTPTransport(
        base_url="https://api.github.com",
        retry_config=RetryConfig(max_retries=2, backoff_factor=0.0, jitter=0.0, max_backoff=0.0),
        client=http_client,
    )

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        asyncio.run(transport.get_json("/repos/octo/reef"))

    assert exc_info.value.status_code == 500
    assert calls == 3


def test_token_sets_authorization_header() -> None:
    transport = AsyncHTTPTransport(base_url="https://api.github.com/", token="abc123")

    assert transport.base_url == "https://api.github.com"
    assert transport.headers["Authorization"] == "token abc123"
    assert transport.headers["Accept"] == "application/vnd.github+json"


def test_get_json_without_retry_sends_one_request() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = AsyncHTTPTransport(
        base_url="https://api.github.com",
        retry_config=RetryConfig(max_retries=3, jitter=0.0, max_backoff=0.0),
        client=http_client,
    )

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        asyncio.run(transport.get_json("/rate_limit", retry=False))

    assert exc_info.value.code == "SERVER_ERROR"
    assert calls == 1


def test_connection_errors_retried_then_raised() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = AsyncHTTPTransport(
        base_url="https://api.github.com",
        retry_config=RetryConfig(max_retries=2, jitter=0.0, max_backoff=0.0),
        client=http_client,
    )

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        asyncio.run(transport.get_json("/repos/octo/reef"))

    assert exc_info.value.code == "CONNECTION_ERROR"
    assert calls == 3
