"""
Webhook verification and parsing.

Webhooks are signed with HMAC-SHA256 over "{timestamp}.{payload}" and
delivered with two headers:

    X-Webhook-Signature: sha256=<hex>
    X-Webhook-Timestamp: <unix seconds>

Example (Flask):
    signature, timestamp = extract_headers(request.headers)
    payload = request.get_data(as_text=True)

    if not verify(payload, signature, timestamp, WEBHOOK_SECRET):
        abort(401)

    event = parse(payload)
    if event.type == "screenshot.completed":
        print("Screenshot ready:", event.data["response"]["url"])
"""

import datetime
import hashlib
import hmac
import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .constants import (
    DEFAULT_WEBHOOK_TOLERANCE,
    EVENT_BATCH_COMPLETED,
    EVENT_BATCH_FAILED,
    EVENT_SCREENSHOT_COMPLETED,
    EVENT_SCREENSHOT_FAILED,
    HEADER_WEBHOOK_SIGNATURE,
    HEADER_WEBHOOK_TIMESTAMP,
    WEBHOOK_SIGNATURE_PREFIX,
)
from .exceptions import WebhookParseError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r'[0-9]+')

Payload = Union[str, bytes]


@dataclass(frozen=True)
class WebhookEvent:
    """A parsed webhook event."""

    id: str
    type: str
    timestamp: datetime.datetime
    data: Dict[str, Any] = field(default_factory=dict)


def _to_bytes(value: Payload) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode('utf-8', 'surrogatepass')


def compute_signature(payload: Payload, timestamp: Union[str, int], secret: str) -> str:
    """
    Compute the signature header value for a webhook delivery.

    Args:
        payload: Raw request body
        timestamp: Unix timestamp sent in X-Webhook-Timestamp
        secret: Webhook signing secret

    Returns:
        "sha256=<hex>" signature string
    """
    message = f"{timestamp}.".encode('utf-8') + _to_bytes(payload)
    mac = hmac.new(
        secret.encode('utf-8', 'surrogatepass'),
        message,
        hashlib.sha256
    )
    return WEBHOOK_SIGNATURE_PREFIX + mac.hexdigest()


def verify(payload: Payload,
           signature: str,
           timestamp: str,
           secret: str,
           tolerance: int = DEFAULT_WEBHOOK_TOLERANCE,
           now: Optional[float] = None) -> bool:
    """
    Verify a webhook signature.

    Never raises on malformed input; any problem yields False.

    Args:
        payload: Raw request body, exactly as received
        signature: X-Webhook-Signature header value
        timestamp: X-Webhook-Timestamp header value
        secret: Webhook signing secret from the dashboard
        tolerance: Maximum allowed clock drift in seconds, either direction
        now: Current unix time (defaults to time.time())

    Returns:
        True if the signature is valid and the timestamp is within tolerance
    """
    if not payload or not signature or not timestamp or not secret:
        logger.debug("Webhook rejected: missing payload, signature, timestamp or secret")
        return False

    if not isinstance(payload, (str, bytes)) or not isinstance(signature, str) \
            or not isinstance(timestamp, str) or not isinstance(secret, str):
        logger.debug("Webhook rejected: unexpected input types")
        return False

    # Replay protection
    if not _DIGITS.fullmatch(timestamp):
        logger.debug("Webhook rejected: non-numeric timestamp")
        return False

    try:
        sent_at = int(timestamp)
    except ValueError:
        logger.debug("Webhook rejected: timestamp out of range")
        return False

    current = time.time() if now is None else now
    if abs(int(current) - sent_at) > tolerance:
        logger.debug("Webhook rejected: timestamp outside %ss tolerance", tolerance)
        return False

    expected = compute_signature(payload, timestamp, secret)

    # Use constant-time comparison to prevent timing attacks
    valid = hmac.compare_digest(expected.encode('utf-8'), signature.encode('utf-8', 'replace'))
    if not valid:
        logger.debug("Webhook rejected: signature mismatch")
    return valid


def _header_value(headers: Mapping[str, Any], name: str) -> str:
    candidates = (
        name,
        name.lower(),
        'HTTP_' + name.upper().replace('-', '_'),
    )
    for candidate in candidates:
        value = headers.get(candidate)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if isinstance(value, str):
            return value
    return ''


def extract_headers(headers: Mapping[str, Any]) -> Tuple[str, str]:
    """
    Extract the signature and timestamp headers from a request.

    Accepts plain dicts, WSGI environ dicts (HTTP_X_WEBHOOK_SIGNATURE),
    framework header objects and mappings whose values are lists.

    Returns:
        Tuple of (signature, timestamp); missing values are ""
    """
    return (
        _header_value(headers, HEADER_WEBHOOK_SIGNATURE),
        _header_value(headers, HEADER_WEBHOOK_TIMESTAMP),
    )


def _get(mapping: Mapping[str, Any], key: str, default: Any) -> Any:
    value = mapping.get(key)
    return default if value is None else value


def _parse_timestamp(value: Any, strict: bool) -> datetime.datetime:
    try:
        parsed = datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (AttributeError, TypeError, ValueError):
        if strict:
            raise WebhookParseError(f"Invalid event timestamp: {value!r}")
        return datetime.datetime.now(datetime.timezone.utc)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def _decode(payload: Union[Payload, Mapping[str, Any]], strict: bool) -> Mapping[str, Any]:
    if isinstance(payload, (str, bytes)):
        try:
            raw = json.loads(payload)
        except ValueError as e:
            if strict:
                raise WebhookParseError(f"Invalid webhook JSON: {e}") from e
            logger.debug("Webhook payload is not valid JSON, using empty event")
            raw = {}
    else:
        raw = payload

    if not isinstance(raw, Mapping):
        if strict:
            raise WebhookParseError("Webhook payload must be a JSON object")
        raw = {}
    return raw


def _shape_data(event_type: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
    data = raw.get('data')
    if not isinstance(data, Mapping):
        data = {}

    if event_type == EVENT_SCREENSHOT_COMPLETED:
        shaped = {
            'response': {
                'url': _get(data, 'screenshot_url', ''),
                'width': _get(data, 'width', 0),
                'height': _get(data, 'height', 0),
                'format': _get(data, 'format', 'png'),
                'size': _get(data, 'size', 0),
                'cached': _get(data, 'cached', False),
            }
        }
    elif event_type == EVENT_SCREENSHOT_FAILED:
        shaped = {
            'error': {
                'code': 'render_failed',
                'message': _get(data, 'error', 'Unknown error'),
            }
        }
    elif event_type in (EVENT_BATCH_COMPLETED, EVENT_BATCH_FAILED):
        return {'batch_id': _get(raw, 'id', '')}
    else:
        return dict(data)

    if data.get('url') is not None:
        shaped['url'] = data['url']
    return shaped


def parse(payload: Union[Payload, Mapping[str, Any]], strict: bool = False) -> WebhookEvent:
    """
    Parse a webhook payload into a WebhookEvent.

    By default parsing is lenient and never raises: invalid JSON becomes an
    empty event, a missing event type defaults to "screenshot.completed"
    and an unparseable timestamp becomes the current time. With strict=True
    each of those raises WebhookParseError instead.

    Timestamps are ISO 8601 as accepted by datetime.fromisoformat, with a
    trailing "Z" read as UTC. Fractional seconds and "+0000" style offsets
    are accepted.

    Args:
        payload: Raw request body, or an already decoded mapping
        strict: Raise instead of falling back on malformed input

    Returns:
        WebhookEvent instance
    """
    raw = _decode(payload, strict)

    timestamp = _parse_timestamp(raw.get('timestamp', ''), strict)

    event_type = raw.get('event')
    if event_type is None:
        if strict:
            raise WebhookParseError("Webhook payload has no event type")
        event_type = EVENT_SCREENSHOT_COMPLETED

    return WebhookEvent(
        id=_get(raw, 'id', ''),
        type=event_type,
        timestamp=timestamp,
        data=_shape_data(event_type, raw),
    )
