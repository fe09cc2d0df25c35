from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression, func

from app.db.base import Base


class Account(Base):
    """
    A member of the board.

    `id` is the identity provider's user id. `paid` only ever moves from
    False to True, and only the Stripe webhook writes it.
    """
    __tablename__ = "accounts"

    id = Column(String(64), primary_key=True)

    email = Column(String(320), nullable=False, index=True)

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email} paid={self.paid}>"
