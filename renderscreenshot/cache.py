"""
Cache management for RenderScreenshot.

Accessed through the ``cache`` attribute of a Client:

    image = client.cache.get("cache_xyz789")
    client.cache.purge(["cache_abc", "cache_def"])
"""

import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from .exceptions import APIError

if TYPE_CHECKING:
    from .client import Client


class CacheManager:
    """Retrieve, delete and purge cached screenshots."""

    def __init__(self, client: "Client"):
        self.client = client

    def get(self, key: str) -> Optional[bytes]:
        """
        Get a cached screenshot by its cache key.

        Returns:
            Screenshot bytes, or None if the key does not exist
        """
        try:
            return self.client._make_request('GET', f"/cache/{key}", response_type='buffer')
        except APIError as e:
            if e.http_status == 404:
                return None
            raise

    def delete(self, key: str) -> bool:
        """
        Delete a single cache entry.

        Returns:
            True if deleted, False if not found
        """
        response = self.client._make_request('DELETE', f"/cache/{key}")
        return isinstance(response, dict) and bool(response.get('deleted', False))

    def purge(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Bulk purge cache entries by key."""
        return self.client._make_request('POST', '/cache/purge', {'keys': list(keys)})

    def purge_url(self, pattern: str) -> Dict[str, Any]:
        """Purge entries whose source URL matches a glob pattern."""
        return self.client._make_request('POST', '/cache/purge', {'url': pattern})

    def purge_before(self, date: datetime.datetime) -> Dict[str, Any]:
        """Purge entries created before a date."""
        return self.client._make_request('POST', '/cache/purge', {'before': date.isoformat()})

    def purge_pattern(self, pattern: str) -> Dict[str, Any]:
        """Purge entries whose storage path matches a glob pattern."""
        return self.client._make_request('POST', '/cache/purge', {'pattern': pattern})
