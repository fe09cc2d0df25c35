from __future__ import annotations

from dataclasses import dataclass

import stripe

from app.core.catalog import PRODUCT_DESCRIPTION, PRODUCT_NAME
from app.core.config import settings
from app.core.errors import UpstreamError
from app.core.logging import get_logger
from app.core.stripe_config import StripeConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    session_id: str
    redirect_url: str
    environment: str
    success_url: str
    cancel_url: str


def create_checkout_session(user_id: str, config: StripeConfig) -> CheckoutResult:
    """
    Ask Stripe for a one-time payment Checkout Session tagged with the user id.

    The caller is responsible for checking that the user exists and has not
    paid yet. Stripe failures surface as UpstreamError and are not retried.
    """
    if not user_id or not user_id.strip():
        raise ValueError("userId is required")

    success_url = config.success_url(user_id)
    cancel_url = config.cancel_url()

    try:
        session = stripe.checkout.Session.create(
            api_key=config.secret_key,
            mode="payment",
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": settings.PRICE_CURRENCY,
                        "product_data": {
                            "name": PRODUCT_NAME,
                            "description": PRODUCT_DESCRIPTION,
                        },
                        "unit_amount": settings.PRICE_CENTS,
                    },
                    "quantity": 1,
                }
            ],
            success_url=success_url,
            cancel_url=cancel_url,
            # The webhook maps the completed session back to the account with this
            metadata={"userId": user_id, "environment": config.environment},
        )
    except stripe.StripeError as e:
        logger.error("Stripe checkout creation failed for %s: %s", user_id, e)
        raise UpstreamError(getattr(e, "user_message", None) or str(e)) from e

    logger.info(
        "Created checkout session %s for %s (%s)",
        session.id,
        user_id,
        config.environment,
    )

    return CheckoutResult(
        session_id=session.id,
        redirect_url=session.url,
        environment=config.environment,
        success_url=success_url,
        cancel_url=cancel_url,
    )
