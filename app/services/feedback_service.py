# app/services/feedback_service.py

from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.catalog import REACTION_DISLIKE, REACTION_LIKE
from app.core.errors import NotFoundError
from app.models.feedback import FeedbackPost, FeedbackReaction
from app.schemas.feedback import FeedbackPostCreate, FeedbackPostRead, FeedbackReactionSummary


async def create_post(db: AsyncSession, *, account_id: str, data: FeedbackPostCreate) -> FeedbackPost:
    post = FeedbackPost(account_id=account_id, **data.model_dump())
    db.add(post)
    await db.commit()
    await db.refresh(post)
    return post


async def _counts(db: AsyncSession, post_ids: list[str]) -> dict[tuple[str, str], int]:
    rows = (
        await db.execute(
            select(FeedbackReaction.post_id, FeedbackReaction.reaction, func.count(FeedbackReaction.id))
            .where(FeedbackReaction.post_id.in_(post_ids))
            .group_by(FeedbackReaction.post_id, FeedbackReaction.reaction)
        )
    ).all()
    return {(post_id, reaction): n for post_id, reaction, n in rows}


async def list_posts(db: AsyncSession, *, account_id: str, limit: int = 50) -> list[FeedbackPostRead]:
    """
    The newest posts, ranked by net score (likes minus dislikes).
    Posts with equal scores keep newest-first order.
    """
    posts = (
        await db.execute(
            select(FeedbackPost)
            .order_by(FeedbackPost.created_at.desc(), FeedbackPost.id.desc())
            .limit(limit)
        )
    ).scalars().all()
    if not posts:
        return []

    ids = [p.id for p in posts]
    counts = await _counts(db, ids)
    mine = dict(
        (
            await db.execute(
                select(FeedbackReaction.post_id, FeedbackReaction.reaction).where(
                    FeedbackReaction.post_id.in_(ids),
                    FeedbackReaction.account_id == account_id,
                )
            )
        ).all()
    )

    board = []
    for p in posts:
        item = FeedbackPostRead.model_validate(p)
        item.reactions = FeedbackReactionSummary(
            likes=counts.get((p.id, REACTION_LIKE), 0),
            dislikes=counts.get((p.id, REACTION_DISLIKE), 0),
            user_reaction=mine.get(p.id),
        )
        board.append(item)

    # sorted() is stable, so ties stay newest first
    return sorted(board, key=lambda item: item.reactions.score, reverse=True)


async def react(
    db: AsyncSession,
    *,
    account_id: str,
    post_id: str,
    reaction: str,
) -> FeedbackReactionSummary:
    """
    Apply a like or dislike. Repeating the member's current reaction removes
    it; choosing the other one switches it.
    """
    exists = (
        await db.execute(select(FeedbackPost.id).where(FeedbackPost.id == post_id))
    ).scalar_one_or_none()
    if exists is None:
        raise NotFoundError(f"Feedback post {post_id} not found")

    existing = (
        await db.execute(
            select(FeedbackReaction).where(
                FeedbackReaction.post_id == post_id,
                FeedbackReaction.account_id == account_id,
            )
        )
    ).scalar_one_or_none()

    if existing is None:
        db.add(FeedbackReaction(post_id=post_id, account_id=account_id, reaction=reaction))
        current = reaction
    elif existing.reaction == reaction:
        await db.execute(delete(FeedbackReaction).where(FeedbackReaction.id == existing.id))
        current = None
    else:
        await db.execute(
            update(FeedbackReaction).where(FeedbackReaction.id == existing.id).values(reaction=reaction)
        )
        current = reaction
    await db.commit()

    counts = await _counts(db, [post_id])
    return FeedbackReactionSummary(
        likes=counts.get((post_id, REACTION_LIKE), 0),
        dislikes=counts.get((post_id, REACTION_DISLIKE), 0),
        user_reaction=current,
    )
