import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class VisaUpdate(Base):
    """
    A milestone posted by a paid member, e.g. "K1 / Interview Scheduled".
    """
    __tablename__ = "visa_updates"

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

    country: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    visa_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    service_center: Mapped[str | None] = mapped_column(String(100), nullable=True)
    milestone: Mapped[str] = mapped_column(String(100), nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


class UpdateReaction(Base):
    __tablename__ = "update_reactions"
    __table_args__ = (
        UniqueConstraint("update_id", "account_id", name="uq_update_reactions_update_account"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    update_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("visa_updates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    reaction: Mapped[str] = mapped_column(String(20), nullable=False, default="like")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
