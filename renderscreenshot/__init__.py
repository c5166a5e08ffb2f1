"""
RenderScreenshot client library

A Python client for the RenderScreenshot API: take screenshots, generate
signed URLs, and verify webhooks.

Example usage:
    from renderscreenshot import Client, TakeOptions

    client = Client("rs_live_xxxxx")
    image = client.take(TakeOptions.url("https://example.com").preset("og_card"))
"""

from .cache import CacheManager
from .client import Client
from .exceptions import (
    RenderScreenshotError,
    APIError,
    ConfigurationError,
    WebhookParseError
)
from .options import TakeOptions
from .signing import canonical_query, generate_signed_url
from .webhook import (
    WebhookEvent,
    compute_signature,
    extract_headers,
    parse as parse_webhook,
    verify as verify_webhook
)
from .constants import (
    HEADER_WEBHOOK_SIGNATURE,
    HEADER_WEBHOOK_TIMESTAMP,
    DEFAULT_CONFIG,
    DEFAULT_WEBHOOK_TOLERANCE,
    RETRYABLE_ERRORS,
    SDK_VERSION
)

__version__ = SDK_VERSION
__all__ = [
    "Client",
    "CacheManager",
    "TakeOptions",
    "RenderScreenshotError",
    "APIError",
    "ConfigurationError",
    "WebhookParseError",
    "WebhookEvent",
    "canonical_query",
    "generate_signed_url",
    "compute_signature",
    "extract_headers",
    "parse_webhook",
    "verify_webhook",
    "HEADER_WEBHOOK_SIGNATURE",
    "HEADER_WEBHOOK_TIMESTAMP",
    "DEFAULT_CONFIG",
    "DEFAULT_WEBHOOK_TOLERANCE",
    "RETRYABLE_ERRORS",
    "SDK_VERSION"
]
