# app/scripts/send_test_webhook.py
"""
Local debugging only: deliver a synthetic checkout.session.completed event
to a running API, signed with the locally configured webhook secret.

It goes through the normal signature check and is not mounted on the API.
Refuses to run against live Stripe keys.
"""
import argparse
import hashlib
import hmac
import json
import sys
import time

import httpx

from app.core.config import settings
from app.core.stripe_config import get_stripe_config


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Build a stripe-signature header value for a payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def build_event(user_id: str, environment: str, session_id: str | None = None) -> dict:
    now = int(time.time())
    return {
        "id": f"evt_test_{now}",
        "object": "event",
        "created": now,
        "type": "checkout.session.completed",
        "livemode": False,
        "data": {
            "object": {
                "id": session_id or f"cs_test_{now}",
                "object": "checkout.session",
                "amount_total": settings.PRICE_CENTS,
                "currency": settings.PRICE_CURRENCY,
                "metadata": {"userId": user_id, "environment": environment},
                "payment_status": "paid",
                "status": "complete",
            }
        },
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a signed test webhook to a local API")
    parser.add_argument("user_id")
    parser.add_argument("--session-id", default=None)
    parser.add_argument("--api-url", default="http://localhost:8000")
    args = parser.parse_args()

    config = get_stripe_config(require_base_url=False, require_webhook_secret=True)
    if not config.is_test_mode:
        print("❌ Refusing to send a synthetic webhook with live Stripe keys")
        return 1

    payload = json.dumps(build_event(args.user_id, config.environment, args.session_id)).encode()
    headers = {
        "Content-Type": "application/json",
        "stripe-signature": sign_payload(payload, config.webhook_secret),
    }

    url = f"{args.api_url.rstrip('/')}/api/v1/stripe/webhook"
    resp = httpx.post(url, content=payload, headers=headers, timeout=10.0)
    print(f"→ POST {url}")
    print(f"← {resp.status_code} {resp.text}")
    return 0 if resp.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
