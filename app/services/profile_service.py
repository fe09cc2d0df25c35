from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.user_profile import UserProfile
from app.schemas.profile import ProfileUpdate, UpdateDraft

logger = get_logger(__name__)


async def get_profile(db: AsyncSession, account_id: str) -> UserProfile | None:
    return (
        await db.execute(select(UserProfile).where(UserProfile.account_id == account_id))
    ).scalar_one_or_none()


async def upsert_profile(db: AsyncSession, account_id: str, data: ProfileUpdate) -> UserProfile:
    """
    Insert the member's profile, or overwrite every field of the existing one.
    """
    profile = await get_profile(db, account_id)
    if profile is None:
        profile = UserProfile(account_id=account_id, **data.model_dump())
        db.add(profile)
        logger.info("Created profile for %s", account_id)
    else:
        for field, value in data.model_dump().items():
            setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile


async def draft_for(db: AsyncSession, account_id: str) -> UpdateDraft:
    profile = await get_profile(db, account_id)
    if profile is None:
        return UpdateDraft()
    return UpdateDraft(country=profile.country, visa_type=profile.visa_type)
