from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.session import get_db
from app.schemas.profile import UpdateDraft
from app.schemas.visa_update import ReactionToggleResponse, VisaUpdateCreate, VisaUpdateRead
from app.security.access_gate import require_paid_access
from app.services.profile_service import draft_for
from app.services.visa_update_service import create_update, list_feed, toggle_like

# Everything here is paid-only
router = APIRouter(dependencies=[Depends(require_paid_access)])


@router.get("/dashboard", response_model=list[VisaUpdateRead])
async def dashboard_feed(
    limit: int = Query(50, ge=1, le=100),
    country: str | None = Query(None),
    visa_type: str | None = Query(None),
    milestone: str | None = Query(None, max_length=100),
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    return await list_feed(
        db,
        account_id=account_id,
        limit=limit,
        country=country,
        visa_type=visa_type,
        milestone=milestone,
    )


@router.get("/updates/draft", response_model=UpdateDraft)
async def new_update_draft(
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    """Prefill for the new-update form from the member's profile."""
    return await draft_for(db, account_id)


@router.post("/updates", response_model=VisaUpdateRead, status_code=201)
async def post_update(
    payload: VisaUpdateCreate,
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    update = await create_update(db, account_id=account_id, data=payload)
    return VisaUpdateRead.model_validate(update)


@router.post("/updates/{update_id}/reactions", response_model=ReactionToggleResponse)
async def react_to_update(
    update_id: str,
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    try:
        reacted, likes = await toggle_like(db, account_id=account_id, update_id=update_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Update not found")

    return ReactionToggleResponse(update_id=update_id, reacted=reacted, likes=likes)
