from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from urllib.parse import urlencode

from app.core.config import Settings, settings
from app.core.errors import ConfigurationError


@dataclass(frozen=True)
class StripeConfig:
    secret_key: str
    webhook_secret: str
    base_url: str
    webhook_tolerance: int = 300

    @property
    def is_test_mode(self) -> bool:
        return self.secret_key.startswith(("sk_test_", "rk_test_"))

    @property
    def environment(self) -> Literal["test", "live"]:
        return "test" if self.is_test_mode else "live"

    @property
    def key_prefix(self) -> str:
        # safe to log
        return self.secret_key[:8] + "..."

    def success_url(self, user_id: str) -> str:
        query = urlencode({"success": "true", "userId": user_id})
        return f"{self.base_url}/success?{query}"

    def cancel_url(self) -> str:
        return f"{self.base_url}/checkout?canceled=true"


def get_stripe_config(
    s: Settings = settings,
    *,
    require_secret_key: bool = True,
    require_base_url: bool = True,
    require_webhook_secret: bool = False,
) -> StripeConfig:
    """
    Resolve Stripe settings for the current request.

    Raises ConfigurationError listing every missing key, before any call
    to Stripe is made.
    """
    missing = []
    if require_secret_key and not s.STRIPE_SECRET_KEY:
        missing.append("STRIPE_SECRET_KEY")
    if require_base_url and not s.APP_BASE_URL:
        missing.append("APP_BASE_URL")
    if require_webhook_secret and not s.STRIPE_WEBHOOK_SECRET:
        missing.append("STRIPE_WEBHOOK_SECRET")

    if missing:
        raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")

    return StripeConfig(
        secret_key=s.STRIPE_SECRET_KEY,
        webhook_secret=s.STRIPE_WEBHOOK_SECRET,
        base_url=s.APP_BASE_URL.rstrip("/"),
        webhook_tolerance=s.STRIPE_WEBHOOK_TOLERANCE,
    )
