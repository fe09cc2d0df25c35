from __future__ import annotations

from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from app.api.v1.router import router as api_router
from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.core.stripe_config import get_stripe_config
from app.core.errors import ConfigurationError
from app.db.session import engine
from app.security.access_gate import AccessRedirect

logger = get_logger(__name__)


def _log_stripe_environment() -> None:
    try:
        config = get_stripe_config(require_webhook_secret=True)
    except ConfigurationError as e:
        # Requests that need Stripe will fail individually with a 500
        logger.warning("Stripe not fully configured: %s", e)
        return

    logger.info("Stripe environment: %s (key %s)", config.environment, config.key_prefix)
    if not settings.DEBUG and config.is_test_mode:
        logger.warning("Using Stripe test keys with DEBUG off")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    _log_stripe_environment()

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(title="Visa Circle API", lifespan=lifespan)


@app.exception_handler(AccessRedirect)
async def access_redirect_handler(request: Request, exc: AccessRedirect):
    return RedirectResponse(url=exc.path, status_code=303)


app.include_router(api_router, prefix="/api/v1")
