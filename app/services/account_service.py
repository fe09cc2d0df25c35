from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from app.core.logging import get_logger
from app.models.account import Account
from app.models.auth_session import AuthSession
from app.security.session_token import hash_token

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentStatus:
    user_id: str
    paid: bool
    created_at: datetime | None
    updated_at: datetime | None


async def get_payment_status(db: AsyncSession, user_id: str) -> PaymentStatus | None:
    """
    The one place that answers "has this user paid?".

    Returns None when no account exists for user_id.
    """
    row = (
        await db.execute(
            select(Account.id, Account.paid, Account.created_at, Account.updated_at)
            .where(Account.id == user_id)
        )
    ).one_or_none()

    if row is None:
        return None

    return PaymentStatus(
        user_id=row.id,
        paid=bool(row.paid),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


async def mark_paid(db: AsyncSession, user_id: str) -> bool:
    """
    Set paid=true for one account in a single atomic UPDATE.

    Unconditional, so duplicate or concurrent deliveries are harmless.
    Returns False when no row matched.
    """
    result = await db.execute(
        update(Account)
        .where(Account.id == user_id)
        .values(paid=True, updated_at=func.now())
    )
    await db.commit()
    return result.rowcount > 0


async def provision_account(db: AsyncSession, user_id: str, email: str) -> Account:
    """
    Create the account row on first sign-in. An existing row is returned
    as-is; its paid flag is never touched here.
    """
    account = (
        await db.execute(select(Account).where(Account.id == user_id))
    ).scalar_one_or_none()

    if account is not None:
        return account

    account = Account(id=user_id, email=email, paid=False)
    db.add(account)
    await db.commit()
    await db.refresh(account)
    logger.info("Provisioned account %s", user_id)
    return account


async def issue_session(
    db: AsyncSession,
    account_id: str,
    ttl: timedelta | None = None,
) -> str:
    """
    Create a session for an account and return the raw bearer token.
    Only its hash is persisted.
    """
    raw_token = secrets.token_urlsafe(32)
    expires_at = datetime.now(timezone.utc) + ttl if ttl else None

    db.add(
        AuthSession(
            token_hash=hash_token(raw_token),
            account_id=account_id,
            expires_at=expires_at,
            is_active=True,
        )
    )
    await db.commit()
    return raw_token
