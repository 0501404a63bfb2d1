"""starlens exception classes."""


class StarlensError(Exception):
    """Base exception for all starlens errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(StarlensError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class UpstreamUnavailableError(StarlensError):
    """
    Raised when the upstream API cannot provide a required response.

    Fatal for an analytics request: without the collection summary there is
    nothing to bucket against.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.status_code = status_code


class RateLimitExceededError(StarlensError):
    """Raised when the upstream rate limit leaves no usable result."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after
