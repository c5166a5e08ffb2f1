"""
Constants for the RenderScreenshot client library.
Compatible with the RenderScreenshot v1 HTTP API.
"""

from collections import namedtuple

SDK_VERSION = "1.0.0"

DEFAULT_BASE_URL = "https://api.renderscreenshot.com"
API_VERSION = "v1"
USER_AGENT = f"renderscreenshot-python/{SDK_VERSION}"

# Webhook headers (sent by the API on every delivery)
HEADER_WEBHOOK_SIGNATURE = "X-Webhook-Signature"
HEADER_WEBHOOK_TIMESTAMP = "X-Webhook-Timestamp"
WEBHOOK_SIGNATURE_PREFIX = "sha256="

DEFAULT_TIMEOUT = 30.0               # seconds
DEFAULT_WEBHOOK_TOLERANCE = 5 * 60   # 5 minutes in seconds

# Default configuration values
DEFAULT_CONFIG = {
    'base_url': DEFAULT_BASE_URL,
    'api_version': API_VERSION,
    'timeout': DEFAULT_TIMEOUT,
    'webhook_tolerance': DEFAULT_WEBHOOK_TOLERANCE,
}

# Error codes the caller may retry after backoff
RETRYABLE_ERRORS = frozenset({
    'rate_limited',
    'timeout',
    'render_failed',
    'internal_error',
})

# Webhook event types
EVENT_SCREENSHOT_COMPLETED = "screenshot.completed"
EVENT_SCREENSHOT_FAILED = "screenshot.failed"
EVENT_BATCH_COMPLETED = "batch.completed"
EVENT_BATCH_FAILED = "batch.failed"

# Keys eligible for signed URLs. The server rebuilds the canonical string
# from exactly this set, so it must not change without a server release.
SIGNED_URL_KEYS = (
    'url',
    'width',
    'height',
    'scale',
    'mobile',
    'full_page',
    'element',
    'format',
    'quality',
    'preset',
    'device',
    'wait_for',
    'delay',
    'block_ads',
    'block_trackers',
    'block_cookie_banners',
    'block_chat_widgets',
    'dark_mode',
    'cache_ttl',
)

# group: nested object in the API body (None = top level)
# param: key inside that object
# query: included in the GET query string
OptionSpec = namedtuple('OptionSpec', ['group', 'param', 'query'])

OPTION_TABLE = {
    # Target
    'url': OptionSpec(None, 'url', True),
    'html': OptionSpec(None, 'html', False),
    # Viewport
    'width': OptionSpec('viewport', 'width', True),
    'height': OptionSpec('viewport', 'height', True),
    'scale': OptionSpec('viewport', 'scale', True),
    'mobile': OptionSpec('viewport', 'mobile', True),
    # Capture
    'full_page': OptionSpec(None, 'full_page', True),
    'element': OptionSpec(None, 'element', True),
    'format': OptionSpec(None, 'format', True),
    'quality': OptionSpec(None, 'quality', True),
    # Wait
    'wait_for': OptionSpec(None, 'wait_for', True),
    'delay': OptionSpec(None, 'delay', True),
    'wait_for_selector': OptionSpec(None, 'wait_for_selector', True),
    'wait_for_timeout': OptionSpec(None, 'wait_for_timeout', True),
    # Presets
    'preset': OptionSpec(None, 'preset', True),
    'device': OptionSpec(None, 'device', True),
    # Blocking
    'block_ads': OptionSpec(None, 'block_ads', True),
    'block_trackers': OptionSpec(None, 'block_trackers', True),
    'block_cookie_banners': OptionSpec(None, 'block_cookie_banners', True),
    'block_chat_widgets': OptionSpec(None, 'block_chat_widgets', True),
    'block_urls': OptionSpec(None, 'block_urls', False),
    'block_resources': OptionSpec(None, 'block_resources', False),
    # Page manipulation
    'inject_script': OptionSpec(None, 'inject_script', False),
    'inject_style': OptionSpec(None, 'inject_style', False),
    'click': OptionSpec(None, 'click', False),
    'hide': OptionSpec(None, 'hide', False),
    'remove': OptionSpec(None, 'remove', False),
    # Browser emulation
    'dark_mode': OptionSpec(None, 'dark_mode', True),
    'reduced_motion': OptionSpec(None, 'reduced_motion', True),
    'media_type': OptionSpec(None, 'media_type', True),
    'user_agent': OptionSpec(None, 'user_agent', True),
    'timezone': OptionSpec(None, 'timezone', True),
    'locale': OptionSpec(None, 'locale', True),
    'geolocation': OptionSpec(None, 'geolocation', False),
    # Network
    'headers': OptionSpec(None, 'headers', False),
    'cookies': OptionSpec(None, 'cookies', False),
    'auth_basic': OptionSpec(None, 'auth_basic', False),
    'auth_bearer': OptionSpec(None, 'auth_bearer', False),
    'bypass_csp': OptionSpec(None, 'bypass_csp', False),
    # Cache
    'cache_ttl': OptionSpec(None, 'cache_ttl', True),
    'cache_refresh': OptionSpec(None, 'cache_refresh', True),
    # PDF
    'pdf_paper_size': OptionSpec('pdf', 'paper_size', False),
    'pdf_width': OptionSpec('pdf', 'width', False),
    'pdf_height': OptionSpec('pdf', 'height', False),
    'pdf_landscape': OptionSpec('pdf', 'landscape', False),
    'pdf_margin': OptionSpec('pdf', 'margin', False),
    'pdf_margin_top': OptionSpec('pdf', 'margin_top', False),
    'pdf_margin_right': OptionSpec('pdf', 'margin_right', False),
    'pdf_margin_bottom': OptionSpec('pdf', 'margin_bottom', False),
    'pdf_margin_left': OptionSpec('pdf', 'margin_left', False),
    'pdf_scale': OptionSpec('pdf', 'scale', False),
    'pdf_print_background': OptionSpec('pdf', 'print_background', False),
    'pdf_page_ranges': OptionSpec('pdf', 'page_ranges', False),
    'pdf_header': OptionSpec('pdf', 'header', False),
    'pdf_footer': OptionSpec('pdf', 'footer', False),
    'pdf_fit_one_page': OptionSpec('pdf', 'fit_one_page', False),
    'pdf_prefer_css_page_size': OptionSpec('pdf', 'prefer_css_page_size', False),
    # Storage (bring your own storage)
    'storage_enabled': OptionSpec('storage', 'enabled', False),
    'storage_path': OptionSpec('storage', 'path', False),
    'storage_acl': OptionSpec('storage', 'acl', False),
}
