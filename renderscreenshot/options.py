"""
Immutable screenshot options builder.

Every setter returns a new TakeOptions instance; the original is never
modified, so options can be shared and extended freely:

    base = TakeOptions.url("https://example.com").preset("og_card")
    dark = base.dark_mode()
    light = base.dark_mode(False)
"""

import copy
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

from .constants import OPTION_TABLE


def format_value(value: Any) -> str:
    """
    Render a scalar option value the way the API expects it in URLs.

    Booleans become "true"/"false", integral floats drop their ".0"
    (2.0 -> "2"), other numbers use their shortest decimal form.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


class TakeOptions:
    """Screenshot request options with a fluent, copy-on-write API."""

    __slots__ = ('_config',)

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self._config = MappingProxyType(copy.deepcopy(dict(config or {})))

    @classmethod
    def url(cls, url: str) -> "TakeOptions":
        """Create options targeting a URL."""
        return cls({'url': url})

    @classmethod
    def html(cls, html: str) -> "TakeOptions":
        """Create options rendering raw HTML."""
        return cls({'html': html})

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TakeOptions":
        """Create options from a flat config mapping (as returned by to_config)."""
        return cls(config)

    def _copy_with(self, key: str, value: Any) -> "TakeOptions":
        merged = dict(self._config)
        merged[key] = value
        return TakeOptions(merged)

    def set(self, key: str, value: Any) -> "TakeOptions":
        """Set any option by name, including ones this client does not know."""
        return self._copy_with(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._config

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TakeOptions):
            return NotImplemented
        return dict(self._config) == dict(other._config)

    def __repr__(self) -> str:
        return f"TakeOptions({dict(self._config)!r})"

    # --- Viewport ---

    def width(self, value: int) -> "TakeOptions":
        return self._copy_with('width', value)

    def height(self, value: int) -> "TakeOptions":
        return self._copy_with('height', value)

    def scale(self, value: float) -> "TakeOptions":
        """Device scale factor (1-3)."""
        return self._copy_with('scale', value)

    def mobile(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('mobile', value)

    # --- Capture ---

    def full_page(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('full_page', value)

    def element(self, selector: str) -> "TakeOptions":
        """Capture only the element matching a CSS selector."""
        return self._copy_with('element', selector)

    def format(self, value: str) -> "TakeOptions":
        """Output format: png, jpeg, webp or pdf."""
        return self._copy_with('format', value)

    def quality(self, value: int) -> "TakeOptions":
        """JPEG/WebP quality (1-100)."""
        return self._copy_with('quality', value)

    # --- Wait ---

    def wait_for(self, value: str) -> "TakeOptions":
        """Page load event: load, networkidle or domcontentloaded."""
        return self._copy_with('wait_for', value)

    def delay(self, value: int) -> "TakeOptions":
        """Extra delay in milliseconds after the page has loaded."""
        return self._copy_with('delay', value)

    def wait_for_selector(self, selector: str) -> "TakeOptions":
        return self._copy_with('wait_for_selector', selector)

    def wait_for_timeout(self, value: int) -> "TakeOptions":
        return self._copy_with('wait_for_timeout', value)

    # --- Presets ---

    def preset(self, value: str) -> "TakeOptions":
        """Named preset such as "og_card" or "twitter_card"."""
        return self._copy_with('preset', value)

    def device(self, value: str) -> "TakeOptions":
        """Device emulation preset such as "iphone_14_pro"."""
        return self._copy_with('device', value)

    # --- Blocking ---

    def block_ads(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('block_ads', value)

    def block_trackers(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('block_trackers', value)

    def block_cookie_banners(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('block_cookie_banners', value)

    def block_chat_widgets(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('block_chat_widgets', value)

    def block_urls(self, patterns: Iterable[str]) -> "TakeOptions":
        return self._copy_with('block_urls', list(patterns))

    def block_resources(self, types: Iterable[str]) -> "TakeOptions":
        return self._copy_with('block_resources', list(types))

    # --- Page manipulation ---

    def inject_script(self, script: str) -> "TakeOptions":
        return self._copy_with('inject_script', script)

    def inject_style(self, style: str) -> "TakeOptions":
        return self._copy_with('inject_style', style)

    def click(self, selector: str) -> "TakeOptions":
        return self._copy_with('click', selector)

    def hide(self, selectors: Iterable[str]) -> "TakeOptions":
        return self._copy_with('hide', list(selectors))

    def remove(self, selectors: Iterable[str]) -> "TakeOptions":
        return self._copy_with('remove', list(selectors))

    # --- Browser emulation ---

    def dark_mode(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('dark_mode', value)

    def reduced_motion(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('reduced_motion', value)

    def media_type(self, value: str) -> "TakeOptions":
        """CSS media type: screen or print."""
        return self._copy_with('media_type', value)

    def user_agent(self, value: str) -> "TakeOptions":
        return self._copy_with('user_agent', value)

    def timezone(self, value: str) -> "TakeOptions":
        """IANA timezone, e.g. "America/New_York"."""
        return self._copy_with('timezone', value)

    def locale(self, value: str) -> "TakeOptions":
        return self._copy_with('locale', value)

    def geolocation(self, latitude: float, longitude: float,
                    accuracy: Optional[float] = None) -> "TakeOptions":
        geo = {'latitude': latitude, 'longitude': longitude}
        if accuracy is not None:
            geo['accuracy'] = accuracy
        return self._copy_with('geolocation', geo)

    # --- Network ---

    def headers(self, value: Mapping[str, str]) -> "TakeOptions":
        return self._copy_with('headers', dict(value))

    def cookies(self, value: Iterable[Mapping[str, Any]]) -> "TakeOptions":
        return self._copy_with('cookies', [dict(c) for c in value])

    def auth_basic(self, username: str, password: str) -> "TakeOptions":
        return self._copy_with('auth_basic', {'username': username, 'password': password})

    def auth_bearer(self, token: str) -> "TakeOptions":
        return self._copy_with('auth_bearer', token)

    def bypass_csp(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('bypass_csp', value)

    # --- Cache ---

    def cache_ttl(self, value: int) -> "TakeOptions":
        """Cache TTL in seconds (3600-2592000)."""
        return self._copy_with('cache_ttl', value)

    def cache_refresh(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('cache_refresh', value)

    # --- PDF ---

    def pdf_paper_size(self, value: str) -> "TakeOptions":
        """Paper size: a4, letter, legal, etc."""
        return self._copy_with('pdf_paper_size', value)

    def pdf_width(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_width', value)

    def pdf_height(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_height', value)

    def pdf_landscape(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('pdf_landscape', value)

    def pdf_margin(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_margin', value)

    def pdf_margin_top(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_margin_top', value)

    def pdf_margin_right(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_margin_right', value)

    def pdf_margin_bottom(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_margin_bottom', value)

    def pdf_margin_left(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_margin_left', value)

    def pdf_scale(self, value: float) -> "TakeOptions":
        return self._copy_with('pdf_scale', value)

    def pdf_print_background(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('pdf_print_background', value)

    def pdf_page_ranges(self, value: str) -> "TakeOptions":
        """Page ranges, e.g. "1-5"."""
        return self._copy_with('pdf_page_ranges', value)

    def pdf_header(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_header', value)

    def pdf_footer(self, value: str) -> "TakeOptions":
        return self._copy_with('pdf_footer', value)

    def pdf_fit_one_page(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('pdf_fit_one_page', value)

    def pdf_prefer_css_page_size(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('pdf_prefer_css_page_size', value)

    # --- Storage ---

    def storage_enabled(self, value: bool = True) -> "TakeOptions":
        return self._copy_with('storage_enabled', value)

    def storage_path(self, value: str) -> "TakeOptions":
        """Path template, e.g. "{year}/{month}/{hash}.{ext}"."""
        return self._copy_with('storage_path', value)

    def storage_acl(self, value: str) -> "TakeOptions":
        """Storage ACL: public-read or private."""
        return self._copy_with('storage_acl', value)

    # --- Output ---

    def to_config(self) -> Dict[str, Any]:
        """Return a flat copy of the configuration."""
        return copy.deepcopy(dict(self._config))

    def to_params(self) -> Dict[str, Any]:
        """
        Build the nested request body for POST requests.

        Viewport, PDF and storage options are grouped into sub-objects;
        unknown keys are passed through at the top level.
        """
        params: Dict[str, Any] = {}
        for key, spec in OPTION_TABLE.items():
            value = self._config.get(key)
            if value is None:
                continue
            if spec.group is None:
                params[spec.param] = copy.deepcopy(value)
            else:
                params.setdefault(spec.group, {})[spec.param] = copy.deepcopy(value)

        for key, value in self._config.items():
            if key in OPTION_TABLE or value is None:
                continue
            params.setdefault(key, copy.deepcopy(value))
        return params

    def to_query_string(self) -> str:
        """Build a URL-encoded query string for GET requests."""
        query: List[tuple] = []
        for key, spec in OPTION_TABLE.items():
            if not spec.query:
                continue
            value = self._config.get(key)
            if value is None:
                continue
            query.append((key, format_value(value)))
        return urlencode(query)
