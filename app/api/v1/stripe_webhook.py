# app/api/v1/stripe_webhook.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConfigurationError
from app.core.logging import get_logger
from app.core.stripe_config import get_stripe_config
from app.db.session import get_db
from app.models.common import ErrorResponse
from app.services.stripe_webhook_service import handle_webhook

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/stripe/webhook",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    # Raw bytes: the signature covers the exact payload Stripe sent
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")

    try:
        config = get_stripe_config(
            require_secret_key=False,
            require_base_url=False,
            require_webhook_secret=True,
        )
    except ConfigurationError as e:
        logger.error("Webhook received but %s", e)
        return JSONResponse(status_code=500, content={"error": "Server configuration error"})

    result = await handle_webhook(db, payload, sig_header, config)
    return JSONResponse(status_code=result.status_code, content=result.body)
