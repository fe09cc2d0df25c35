from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.security.access_gate import require_paid_access
from app.services.profile_service import get_profile, upsert_profile

router = APIRouter(dependencies=[Depends(require_paid_access)])


@router.get("/profile", response_model=ProfileRead)
async def read_profile(
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    profile = await get_profile(db, account_id)
    if profile is None:
        # Not filled in yet; the client opens the editor
        return ProfileRead(account_id=account_id)
    return ProfileRead.model_validate(profile)


@router.put("/profile", response_model=ProfileRead)
async def save_profile(
    payload: ProfileUpdate,
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    profile = await upsert_profile(db, account_id, payload)
    return ProfileRead.model_validate(profile)
