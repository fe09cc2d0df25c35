# app/services/visa_update_service.py

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.catalog import REACTION_LIKE
from app.core.errors import NotFoundError
from app.models.visa_update import UpdateReaction, VisaUpdate
from app.schemas.visa_update import ReactionSummary, VisaUpdateCreate, VisaUpdateRead


async def create_update(db: AsyncSession, *, account_id: str, data: VisaUpdateCreate) -> VisaUpdate:
    update = VisaUpdate(account_id=account_id, **data.model_dump())
    db.add(update)
    await db.commit()
    await db.refresh(update)
    return update


async def list_feed(
    db: AsyncSession,
    *,
    account_id: str,
    limit: int = 50,
    country: str | None = None,
    visa_type: str | None = None,
    milestone: str | None = None,
) -> list[VisaUpdateRead]:
    """
    Newest updates first, each with its like count and whether the caller
    liked it. Reactions are fetched in one query for the whole page.
    """
    stmt = select(VisaUpdate).order_by(VisaUpdate.created_at.desc(), VisaUpdate.id.desc()).limit(limit)
    if country:
        stmt = stmt.where(VisaUpdate.country == country)
    if visa_type:
        stmt = stmt.where(VisaUpdate.visa_type == visa_type)
    if milestone:
        # Case-insensitive substring, so "interview" matches "Interview Scheduled"
        stmt = stmt.where(VisaUpdate.milestone.icontains(milestone, autoescape=True))

    updates = (await db.execute(stmt)).scalars().all()
    if not updates:
        return []

    ids = [u.id for u in updates]
    counts = dict(
        (
            await db.execute(
                select(UpdateReaction.update_id, func.count(UpdateReaction.id))
                .where(UpdateReaction.update_id.in_(ids))
                .group_by(UpdateReaction.update_id)
            )
        ).all()
    )
    mine = dict(
        (
            await db.execute(
                select(UpdateReaction.update_id, UpdateReaction.reaction).where(
                    UpdateReaction.update_id.in_(ids),
                    UpdateReaction.account_id == account_id,
                )
            )
        ).all()
    )

    feed = []
    for u in updates:
        item = VisaUpdateRead.model_validate(u)
        item.reactions = ReactionSummary(likes=counts.get(u.id, 0), user_reaction=mine.get(u.id))
        feed.append(item)
    return feed


async def toggle_like(db: AsyncSession, *, account_id: str, update_id: str) -> tuple[bool, int]:
    """
    Like an update, or remove the like if it is already there.
    Returns (reacted, like_count).
    """
    exists = (
        await db.execute(select(VisaUpdate.id).where(VisaUpdate.id == update_id))
    ).scalar_one_or_none()
    if exists is None:
        raise NotFoundError(f"Update {update_id} not found")

    existing = (
        await db.execute(
            select(UpdateReaction).where(
                UpdateReaction.update_id == update_id,
                UpdateReaction.account_id == account_id,
            )
        )
    ).scalar_one_or_none()

    if existing is not None:
        await db.execute(delete(UpdateReaction).where(UpdateReaction.id == existing.id))
        reacted = False
    else:
        db.add(UpdateReaction(update_id=update_id, account_id=account_id, reaction=REACTION_LIKE))
        reacted = True
    await db.commit()

    likes = (
        await db.execute(
            select(func.count(UpdateReaction.id)).where(UpdateReaction.update_id == update_id)
        )
    ).scalar_one()
    return reacted, likes
