from fastapi import APIRouter
from app.api.v1 import board, feedback, health, payments, profile, stripe_webhook

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(payments.router, tags=["payments"])
router.include_router(stripe_webhook.router, tags=["payments"])
router.include_router(board.router, tags=["board"])
router.include_router(profile.router, tags=["profile"])
router.include_router(feedback.router, tags=["feedback"])
