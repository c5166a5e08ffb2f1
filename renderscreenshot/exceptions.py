"""
Custom exceptions for the RenderScreenshot client library.
"""

from typing import Any, Mapping, Optional

from .constants import RETRYABLE_ERRORS


class RenderScreenshotError(Exception):
    """Base exception for RenderScreenshot client errors."""
    pass


class ConfigurationError(RenderScreenshotError):
    """Raised when client configuration is invalid."""
    pass


class WebhookParseError(RenderScreenshotError):
    """Raised by strict webhook parsing when the payload is malformed."""
    pass


class APIError(RenderScreenshotError):
    """
    Error returned by the RenderScreenshot API.

    Example:
        try:
            image = client.take(options)
        except APIError as e:
            if e.retryable and e.retry_after:
                time.sleep(e.retry_after)
            else:
                raise
    """

    def __init__(self, http_status: int, code: str, message: str,
                 retry_after: Optional[int] = None):
        """
        Args:
            http_status: HTTP status code from the response
            code: Error code from the API (e.g. "invalid_url", "rate_limited")
            message: Human-readable error message
            retry_after: Seconds to wait before retrying, if the API said so
        """
        super().__init__(message)
        self.http_status = http_status
        self.code = code
        self.message = message
        self.retryable = code in RETRYABLE_ERRORS
        self.retry_after = retry_after

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.retry_after is not None:
            text += f" (retry after {self.retry_after}s)"
        return text

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(http_status={self.http_status!r}, "
                f"code={self.code!r}, message={self.message!r}, "
                f"retry_after={self.retry_after!r})")

    @classmethod
    def from_response(cls, http_status: int, body: Mapping[str, Any],
                      retry_after: Optional[int] = None) -> "APIError":
        """
        Build an error from a parsed API error body.

        Args:
            http_status: HTTP status code from the response
            body: Parsed JSON response body
            retry_after: Value of the Retry-After header, if any

        Returns:
            APIError instance
        """
        code = body.get('code')
        if code is None:
            code = 'internal_error'

        message = body.get('message')
        if message is None:
            message = body.get('error')
        if message is None:
            message = 'An unknown error occurred'

        return cls(http_status, str(code), str(message), retry_after)

    @classmethod
    def invalid_url(cls, url: str) -> "APIError":
        return cls(400, 'invalid_url', f"Invalid URL provided: {url}")

    @classmethod
    def invalid_request(cls, message: str) -> "APIError":
        return cls(400, 'invalid_request', message)

    @classmethod
    def unauthorized(cls) -> "APIError":
        return cls(401, 'unauthorized', 'Invalid or missing API key')

    @classmethod
    def forbidden(cls, message: Optional[str] = None) -> "APIError":
        return cls(403, 'forbidden', message or 'Access denied')

    @classmethod
    def not_found(cls, message: Optional[str] = None) -> "APIError":
        return cls(404, 'not_found', message or 'Resource not found')

    @classmethod
    def rate_limited(cls, retry_after: Optional[int] = None) -> "APIError":
        return cls(
            429,
            'rate_limited',
            'Rate limit exceeded. Please wait before making more requests.',
            retry_after,
        )

    @classmethod
    def timeout(cls) -> "APIError":
        return cls(408, 'timeout', 'Screenshot request timed out')

    @classmethod
    def render_failed(cls, message: Optional[str] = None) -> "APIError":
        return cls(500, 'render_failed', message or 'Browser rendering failed')

    @classmethod
    def internal(cls, message: Optional[str] = None) -> "APIError":
        return cls(500, 'internal_error', message or 'An internal error occurred')
