from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.session import get_db
from app.schemas.feedback import (
    FeedbackPostCreate,
    FeedbackPostRead,
    FeedbackReactionRequest,
    FeedbackReactionResponse,
)
from app.security.access_gate import require_paid_access
from app.services.feedback_service import create_post, list_posts, react

router = APIRouter(prefix="/feedback", dependencies=[Depends(require_paid_access)])


@router.get("", response_model=list[FeedbackPostRead])
async def feedback_board(
    limit: int = Query(50, ge=1, le=100),
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    return await list_posts(db, account_id=account_id, limit=limit)


@router.post("", response_model=FeedbackPostRead, status_code=201)
async def post_feedback(
    payload: FeedbackPostCreate,
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    post = await create_post(db, account_id=account_id, data=payload)
    return FeedbackPostRead.model_validate(post)


@router.post("/{post_id}/reactions", response_model=FeedbackReactionResponse)
async def react_to_feedback(
    post_id: str,
    payload: FeedbackReactionRequest,
    account_id: str = Depends(require_paid_access),
    db: AsyncSession = Depends(get_db),
):
    try:
        summary = await react(db, account_id=account_id, post_id=post_id, reaction=payload.reaction)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Feedback post not found")

    return FeedbackReactionResponse(
        post_id=post_id,
        user_reaction=summary.user_reaction,
        likes=summary.likes,
        dislikes=summary.dislikes,
    )
