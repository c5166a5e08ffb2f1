#!/usr/bin/env python3
"""
Basic usage examples for the RenderScreenshot Python client.

Signed URLs and webhook verification run offline. Set RENDERSCREENSHOT_API_KEY
to also take a real screenshot.
"""

import datetime
import json
import os
import sys
import time

from renderscreenshot import (
    APIError,
    Client,
    RenderScreenshotError,
    TakeOptions,
    compute_signature,
    extract_headers,
    parse_webhook,
    verify_webhook
)


def demonstrate_options():
    """Show how options are built and serialized."""

    print("=== Options ===\n")

    base = TakeOptions.url("https://example.com").preset("og_card")
    dark = base.dark_mode().block_ads()

    print(f"   Base config:  {base.to_config()}")
    print(f"   Dark config:  {dark.to_config()}")
    print(f"   API params:   {dark.width(1200).height(630).to_params()}")
    print(f"   Query string: {dark.to_query_string()}")
    print()


def demonstrate_signed_url(client):
    """Generate a signed URL usable in an <img> tag."""

    print("=== Signed URL ===\n")

    options = TakeOptions.url("https://example.com").preset("og_card").block_ads()
    expires_at = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=24)

    url = client.generate_url(options, expires_at)
    print(f"   Expires: {expires_at.isoformat()}")
    print(f"   URL:     {url}")
    print(f'   HTML:    <img src="{url}" />')
    print()


def demonstrate_webhook(webhook_secret):
    """Simulate a webhook delivery and handle it the way a server would."""

    print("=== Webhook ===\n")

    payload = json.dumps({
        "id": "evt_123",
        "event": "screenshot.completed",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": {
            "url": "https://example.com",
            "screenshot_url": "https://cdn.renderscreenshot.com/evt_123.png",
            "width": 1200,
            "height": 630,
            "format": "png",
            "size": 48213,
            "cached": False,
        },
    })
    timestamp = str(int(time.time()))

    # What arrives in a WSGI environ
    environ = {
        "HTTP_X_WEBHOOK_SIGNATURE": compute_signature(payload, timestamp, webhook_secret),
        "HTTP_X_WEBHOOK_TIMESTAMP": timestamp,
    }

    signature, sent_at = extract_headers(environ)
    if not verify_webhook(payload, signature, sent_at, webhook_secret):
        print("   ✗ Invalid signature, responding 401")
        return

    event = parse_webhook(payload)
    print(f"   ✓ Verified event {event.id} ({event.type})")
    if event.type == "screenshot.completed":
        response = event.data["response"]
        print(f"   Screenshot ready: {response['url']} ({response['width']}x{response['height']})")

    tampered = payload.replace("1200", "9999")
    print(f"   Tampered payload accepted: {verify_webhook(tampered, signature, sent_at, webhook_secret)}")
    print()


def demonstrate_take(client):
    """Take a real screenshot (requires an API key)."""

    print("=== Take screenshot ===\n")

    options = TakeOptions.url("https://example.com").preset("og_card")
    try:
        image = client.take(options)
        with open("screenshot.png", "wb") as f:
            f.write(image)
        print(f"   ✓ Saved screenshot.png ({len(image)} bytes)")
    except APIError as e:
        print(f"   ✗ {e}")
        if e.retryable:
            print(f"   Retryable, wait {e.retry_after or 1}s and try again")
    print()


def main():
    """Run the examples."""

    api_key = os.environ.get("RENDERSCREENSHOT_API_KEY", "rs_test_example_key")
    webhook_secret = os.environ.get("RENDERSCREENSHOT_WEBHOOK_SECRET", "whsec_example")

    print("=== RenderScreenshot Python Client Examples ===\n")

    try:
        with Client(api_key, timeout=60) as client:
            demonstrate_options()
            demonstrate_signed_url(client)
            demonstrate_webhook(webhook_secret)

            if "RENDERSCREENSHOT_API_KEY" in os.environ:
                demonstrate_take(client)
            else:
                print("Set RENDERSCREENSHOT_API_KEY to take a real screenshot.")
    except RenderScreenshotError as e:
        print(f"RenderScreenshot Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
