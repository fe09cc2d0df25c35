from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ConfigurationError, UpstreamError
from app.core.logging import get_logger
from app.core.stripe_config import get_stripe_config
from app.db.session import get_db
from app.schemas.payments import (
    CheckoutPageResponse,
    CheckoutRequest,
    CheckoutResponse,
    PaymentStatusResponse,
)
from app.security.access_gate import AccessRedirect
from app.security.context import RequestContext
from app.security.dependencies import get_optional_context, get_request_context
from app.services.account_service import get_payment_status
from app.services.stripe_service import create_checkout_session

router = APIRouter()
logger = get_logger(__name__)


@router.post("/stripe/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout(
    body: CheckoutRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    user_id = (body.user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")

    if user_id != ctx.account_id:
        raise HTTPException(status_code=403, detail="Cannot start checkout for another user")

    try:
        config = get_stripe_config()
    except ConfigurationError as e:
        logger.error("Checkout unavailable: %s", e)
        raise HTTPException(status_code=500, detail="Server configuration error - missing environment variables")

    try:
        # stripe-python is synchronous
        result = await run_in_threadpool(create_checkout_session, user_id, config)
    except UpstreamError as e:
        raise HTTPException(status_code=500, detail=f"Failed to create checkout session: {e}")

    return CheckoutResponse(
        redirect_url=result.redirect_url,
        environment=result.environment,
        session_id=result.session_id,
    )


@router.get("/checkout", response_model=CheckoutPageResponse)
async def checkout_page(
    canceled: bool = Query(False),
    ctx: RequestContext | None = Depends(get_optional_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Entry check for the checkout page: signed-out users go to login and
    members who already paid go straight to the dashboard.
    """
    if ctx is None:
        raise AccessRedirect(settings.LOGIN_PATH)

    status = await get_payment_status(db, ctx.account_id)
    if status is None:
        raise AccessRedirect(settings.LOGIN_PATH)
    if status.paid:
        raise AccessRedirect(settings.DASHBOARD_PATH)

    try:
        config = get_stripe_config()
    except ConfigurationError as e:
        logger.error("Checkout unavailable: %s", e)
        raise HTTPException(status_code=500, detail="Server configuration error")

    return CheckoutPageResponse(
        user_id=ctx.account_id,
        amount_cents=settings.PRICE_CENTS,
        currency=settings.PRICE_CURRENCY,
        environment=config.environment,
        canceled=canceled,
    )


@router.get("/payments/status", response_model=PaymentStatusResponse)
async def payment_status(
    user_id: str | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    """
    Status read used by the confirmation page poller. Keyed by the userId
    carried in the confirmation URL rather than a session cookie.
    """
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=400, detail="User ID is required")

    status = await get_payment_status(db, user_id.strip())
    if status is None:
        raise HTTPException(status_code=404, detail="User not found")

    return PaymentStatusResponse(
        user_id=status.user_id,
        paid=status.paid,
        created_at=status.created_at,
        updated_at=status.updated_at,
    )
