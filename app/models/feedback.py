import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class FeedbackPost(Base):
    """
    A short experience report on the feedback board, e.g.
    "India → US / Interview Scheduled".
    """
    __tablename__ = "feedback_posts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    account_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    country: Mapped[str] = mapped_column(String(100), nullable=False)
    milestone: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_event: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


class FeedbackReaction(Base):
    __tablename__ = "feedback_reactions"
    __table_args__ = (
        UniqueConstraint("post_id", "account_id", name="uq_feedback_reactions_post_account"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("feedback_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    # "like" or "dislike"
    reaction: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
