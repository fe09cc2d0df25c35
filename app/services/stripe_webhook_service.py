from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import stripe
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SignatureError
from app.core.logging import get_logger
from app.core.stripe_config import StripeConfig
from app.services.account_service import mark_paid

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass
class WebhookResult:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def verify_event(raw_body: bytes, signature_header: str | None, config: StripeConfig):
    """
    Verify the stripe-signature header against the raw request bytes.

    The body must not be parsed and re-serialized before this point or the
    signature will no longer match.
    """
    if not signature_header:
        raise SignatureError("No signature provided")

    try:
        return stripe.Webhook.construct_event(
            payload=raw_body,
            sig_header=signature_header,
            secret=config.webhook_secret,
            tolerance=config.webhook_tolerance,
        )
    except (ValueError, stripe.SignatureVerificationError) as e:
        raise SignatureError(str(e)) from e


def _user_id_from(event) -> str | None:
    # StripeObject is not a dict on current stripe-python; read by attribute
    session = event.data.object
    metadata = getattr(session, "metadata", None)
    user_id = getattr(metadata, "userId", None)
    if isinstance(user_id, str) and user_id.strip():
        return user_id.strip()
    return None


async def handle_webhook(
    db: AsyncSession,
    raw_body: bytes,
    signature_header: str | None,
    config: StripeConfig,
) -> WebhookResult:
    """
    Unverified -> verified -> relevant -> applied.

    Every rejection maps to a distinct status so Stripe's retry and alerting
    behave correctly: 400 is final, 500 makes Stripe redeliver later.
    """
    try:
        event = verify_event(raw_body, signature_header, config)
    except SignatureError as e:
        logger.warning("Rejected webhook: %s", e)
        return WebhookResult(400, {"error": "Invalid signature"})

    event_id = getattr(event, "id", None)
    event_type = event.type
    if event_type != CHECKOUT_COMPLETED:
        logger.debug("Ignoring webhook event %s (%s)", event_id, event_type)
        return WebhookResult(200, {"received": True, "ignored": True})

    user_id = _user_id_from(event)
    if not user_id:
        # A checkout session was created without the userId tag
        logger.error("Event %s has no userId in session metadata", event_id)
        return WebhookResult(400, {"error": "No userId found"})

    try:
        updated = await mark_paid(db, user_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to mark %s paid for event %s", user_id, event_id)
        return WebhookResult(500, {"error": f"Failed to update user status: {e.__class__.__name__}"})

    if not updated:
        logger.error("Event %s references unknown user %s", event_id, user_id)
        return WebhookResult(404, {"error": "User not found"})

    logger.info("User %s payment completed (event %s)", user_id, event_id)
    return WebhookResult(200, {"received": True})
