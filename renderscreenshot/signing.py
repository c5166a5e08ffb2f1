"""
Signed URL generation.

A signed URL lets a screenshot be embedded (e.g. in an <img> tag) without
exposing the API key. The server rebuilds the canonical string from the
query and checks it against the signature, so the format here must match
the server byte for byte:

    HMAC-SHA256(secret, "<sorted key=value pairs>&expires=<unix seconds>")
"""

import datetime
import hashlib
import hmac
from typing import Any, Mapping, Union

from .constants import API_VERSION, DEFAULT_BASE_URL, SIGNED_URL_KEYS
from .options import TakeOptions, format_value

Expiry = Union[datetime.datetime, int, float]


def _config_of(options: Union[TakeOptions, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(options, TakeOptions):
        return options.to_config()
    return options


def _expires_timestamp(expires_at: Expiry) -> int:
    if isinstance(expires_at, datetime.datetime):
        return int(expires_at.timestamp())
    return int(expires_at)


def canonical_query(options: Union[TakeOptions, Mapping[str, Any]]) -> str:
    """
    Build the canonical parameter string for a set of options.

    Only signed-URL keys are included, sorted by name. Values are not
    percent-encoded.

    Args:
        options: TakeOptions instance or flat config mapping

    Returns:
        Canonical "key=value&key=value" string (empty if no keys are set)
    """
    config = _config_of(options)
    params = {
        key: format_value(config[key])
        for key in SIGNED_URL_KEYS
        if config.get(key) is not None
    }
    return '&'.join(f"{key}={params[key]}" for key in sorted(params))


def sign(message: str, secret: str) -> str:
    """Return the lowercase hex HMAC-SHA256 of message."""
    return hmac.new(
        secret.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha256
    ).hexdigest()


def generate_signed_url(options: Union[TakeOptions, Mapping[str, Any]],
                        expires_at: Expiry,
                        secret: str,
                        base_url: str = DEFAULT_BASE_URL,
                        api_version: str = API_VERSION) -> str:
    """
    Generate a time-limited signed screenshot URL.

    Args:
        options: TakeOptions instance or flat config mapping
        expires_at: Expiration as a datetime or unix seconds
        secret: Signing secret (the account API key)
        base_url: API base URL
        api_version: API version path segment

    Returns:
        Signed URL string

    Example:
        url = generate_signed_url(
            TakeOptions.url("https://example.com").preset("og_card"),
            datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=24),
            "rs_live_xxxxx",
        )
    """
    canonical = canonical_query(options)
    expires = _expires_timestamp(expires_at)

    # expires is appended after the sorted pairs, never sorted with them
    if canonical:
        message = f"{canonical}&expires={expires}"
    else:
        message = f"expires={expires}"

    signature = sign(message, secret)
    return f"{base_url.rstrip('/')}/{api_version}/screenshot?{message}&signature={signature}"
