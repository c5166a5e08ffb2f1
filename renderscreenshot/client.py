"""
RenderScreenshot API client.

This module wraps the RenderScreenshot v1 HTTP API on top of requests and
maps every failure into APIError.
"""

import datetime
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from urllib.parse import urljoin

import requests

from .cache import CacheManager
from .constants import DEFAULT_CONFIG, USER_AGENT
from .exceptions import APIError, ConfigurationError
from .options import TakeOptions
from .signing import generate_signed_url
from . import webhook

logger = logging.getLogger(__name__)

Options = Union[TakeOptions, Mapping[str, Any]]


def _to_params(options: Options) -> Dict[str, Any]:
    if not isinstance(options, TakeOptions):
        options = TakeOptions.from_config(options)
    return options.to_params()


class Client:
    """
    Client for the RenderScreenshot API.

    Example:
        with Client("rs_live_xxxxx") as client:
            options = TakeOptions.url("https://example.com").preset("og_card")
            image = client.take(options)
    """

    def __init__(self, api_key: str, session: Optional[requests.Session] = None, **config):
        """
        Initialize the client.

        Args:
            api_key: API key (rs_live_* or rs_test_*)
            session: Optional pre-configured requests.Session
            **config: Configuration options (base_url, api_version, timeout,
                webhook_tolerance)
        """
        self.api_key = api_key

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        # Validate configuration
        self._validate_config()

        self.base_url = self.config['base_url'].rstrip('/')
        self.api_version = self.config['api_version']
        self.timeout = self.config['timeout']

        # Create HTTP session
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Authorization': f"Bearer {self.api_key}",
            'User-Agent': USER_AGENT,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

        self.cache = CacheManager(self)

    def _validate_config(self):
        """Validate client configuration."""
        if not self.api_key:
            raise ConfigurationError("api_key cannot be empty")

        if not self.config['base_url']:
            raise ConfigurationError("base_url cannot be empty")

        if self.config['timeout'] <= 0:
            raise ConfigurationError("timeout must be positive")

        if self.config['webhook_tolerance'] <= 0:
            raise ConfigurationError("webhook_tolerance must be positive")

    def _url(self, path: str) -> str:
        return urljoin(f"{self.base_url}/{self.api_version}/", path.lstrip('/'))

    def _make_request(self, method: str, path: str, json_data=None,
                      response_type: str = 'json') -> Any:
        """
        Make an authenticated request to the API.

        Args:
            method: HTTP method
            path: API path (relative to the versioned base URL)
            json_data: JSON body to send
            response_type: "json" for decoded JSON, "buffer" for raw bytes

        Returns:
            Decoded JSON or response bytes

        Raises:
            APIError: If the request fails or the API returns an error
        """
        url = self._url(path)

        kwargs: Dict[str, Any] = {'timeout': self.timeout}
        if json_data is not None:
            kwargs['json'] = json_data

        # Binary responses accept any content type
        if response_type == 'buffer':
            kwargs['headers'] = {'Accept': '*/*'}

        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, **kwargs)
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.debug("Request to %s failed: %s", url, e)
            raise APIError.timeout() from e
        except requests.RequestException as e:
            raise APIError.internal(f"HTTP request failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_from_response(response)

        if response_type == 'buffer':
            return response.content

        # 204 No Content and other empty bodies
        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIError.internal("Invalid JSON in API response") from e

    def _error_from_response(self, response: requests.Response) -> APIError:
        """Map an error response to APIError."""
        retry_after = None
        header = response.headers.get('Retry-After')
        if header is not None:
            try:
                retry_after = int(header)
            except ValueError:
                retry_after = None

        text = response.text
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {'message': text or 'Unknown error'}

        error = APIError.from_response(response.status_code, body, retry_after)
        logger.debug("API error %s: %s", response.status_code, error)
        return error

    def take(self, options: Options) -> bytes:
        """
        Take a screenshot and return the binary image or PDF.

        Example:
            image = client.take(TakeOptions.url("https://example.com"))
            Path("screenshot.png").write_bytes(image)
        """
        return self._make_request('POST', '/screenshot', _to_params(options), 'buffer')

    def take_json(self, options: Options) -> Dict[str, Any]:
        """Take a screenshot and return JSON metadata (url, width, height, ...)."""
        params = _to_params(options)
        params['response_type'] = 'json'
        return self._make_request('POST', '/screenshot', params)

    def batch(self, urls: Iterable[str], options: Optional[Options] = None) -> Dict[str, Any]:
        """
        Capture several URLs with shared options.

        Args:
            urls: URLs to capture
            options: Options applied to every URL
        """
        body = {
            'urls': list(urls),
            'options': _to_params(options) if options is not None else {},
        }
        return self._make_request('POST', '/batch', body)

    def batch_advanced(self, items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Capture several URLs with per-URL options.

        Args:
            items: Requests of the form {"url": ..., "options": {...}}
        """
        formatted: List[Dict[str, Any]] = []
        for item in items:
            params = _to_params(item.get('options') or {})
            formatted.append({'url': item['url'], **params})
        return self._make_request('POST', '/batch', {'requests': formatted})

    def get_batch(self, batch_id: str) -> Dict[str, Any]:
        """Get the status and results of a batch job."""
        return self._make_request('GET', f"/batch/{batch_id}")

    def presets(self) -> List[Dict[str, Any]]:
        """List available presets."""
        return self._make_request('GET', '/presets')

    def preset(self, preset_id: str) -> Dict[str, Any]:
        """Get a single preset by ID."""
        return self._make_request('GET', f"/presets/{preset_id}")

    def devices(self) -> List[Dict[str, Any]]:
        """List available device presets."""
        return self._make_request('GET', '/devices')

    def generate_url(self, options: Options,
                     expires_at: Union[datetime.datetime, int, float]) -> str:
        """
        Generate a signed URL for embedding screenshots.

        The URL needs no API key but stops working at expires_at.

        Example:
            url = client.generate_url(
                TakeOptions.url("https://example.com").preset("og_card"),
                datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=24),
            )
        """
        return generate_signed_url(
            options,
            expires_at,
            self.api_key,
            base_url=self.base_url,
            api_version=self.api_version,
        )

    def verify_webhook(self, payload: Union[str, bytes],
                       headers: Mapping[str, Any], secret: str) -> bool:
        """Verify a webhook delivery using its request headers."""
        signature, timestamp = webhook.extract_headers(headers)
        return webhook.verify(
            payload,
            signature,
            timestamp,
            secret,
            tolerance=self.config['webhook_tolerance'],
        )

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
