from fastapi import Cookie, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.security.context import RequestContext
from app.security.session_token import resolve_session

SESSION_COOKIE = "session_token"


def session_token(
    x_session_token: str | None = Header(default=None, description="Session token"),
    session_cookie: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> str | None:
    """Header wins over cookie so API clients can override a stale browser cookie."""
    return x_session_token or session_cookie


async def get_optional_context(
    token: str | None = Depends(session_token),
    db: AsyncSession = Depends(get_db),
) -> RequestContext | None:
    record = await resolve_session(db, token)
    if record is None:
        return None
    return RequestContext(account_id=record.account_id, session_id=record.id)


async def get_request_context(
    ctx: RequestContext | None = Depends(get_optional_context),
) -> RequestContext:
    """
    FastAPI dependency that requires a valid session.
    Raises 401 when the token is missing, unknown, inactive or expired.
    """
    if ctx is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return ctx
