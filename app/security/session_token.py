import hashlib
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.auth_session import AuthSession


def hash_token(raw_token: str) -> str:
    """Hashes a session token for storage / comparison."""
    return hashlib.sha256(raw_token.encode()).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(record: AuthSession, now: datetime | None = None) -> bool:
    if record.expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return _as_utc(record.expires_at) <= now


async def resolve_session(db: AsyncSession, raw_token: str | None) -> AuthSession | None:
    """
    Return the active, unexpired session for a bearer token, or None.
    """
    if not raw_token:
        return None

    result = await db.execute(
        select(AuthSession).where(
            AuthSession.token_hash == hash_token(raw_token),
            AuthSession.is_active.is_(True),
        )
    )
    record = result.scalar_one_or_none()
    if record is None or is_expired(record):
        return None
    return record
