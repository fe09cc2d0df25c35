"""
Access gate for paid-only areas.

Every protected router depends on `require_paid_access`. The decision is
computed fresh for each request from the session and the account's paid
flag; nothing is cached between requests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import get_db
from app.security.dependencies import session_token
from app.security.session_token import resolve_session
from app.services.account_service import get_payment_status

logger = get_logger(__name__)


@dataclass(frozen=True)
class Allow:
    account_id: str


@dataclass(frozen=True)
class RedirectTo:
    path: str


AccessDecision = Union[Allow, RedirectTo]


class AccessRedirect(Exception):
    """Raised by the gate dependency; turned into a 303 by the app."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


def decide(account_id: str | None, paid: bool) -> AccessDecision:
    """
    Pure gate table: allow only a valid session on a paid account.
    """
    if account_id is None:
        return RedirectTo(settings.LOGIN_PATH)
    if not paid:
        return RedirectTo(settings.CHECKOUT_PATH)
    return Allow(account_id=account_id)


async def authorize(db: AsyncSession, raw_token: str | None) -> AccessDecision:
    record = await resolve_session(db, raw_token)
    if record is None:
        return RedirectTo(settings.LOGIN_PATH)

    status = await get_payment_status(db, record.account_id)
    if status is None:
        # Session points at an account that no longer exists
        logger.warning("Session %s has no account row", record.id)
        return RedirectTo(settings.LOGIN_PATH)

    return decide(record.account_id, status.paid)


async def require_paid_access(
    token: str | None = Depends(session_token),
    db: AsyncSession = Depends(get_db),
) -> str:
    """
    FastAPI dependency guarding paid-only routes. Returns the account id.
    """
    decision = await authorize(db, token)
    if isinstance(decision, RedirectTo):
        raise AccessRedirect(decision.path)
    return decision.account_id
