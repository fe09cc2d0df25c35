from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    user_id: str | None = Field(None, alias="userId", max_length=64)

    model_config = ConfigDict(populate_by_name=True)


class CheckoutResponse(BaseModel):
    redirect_url: str = Field(..., serialization_alias="redirectUrl")
    environment: Literal["test", "live"]
    session_id: str = Field(..., serialization_alias="sessionId")


class CheckoutPageResponse(BaseModel):
    user_id: str = Field(..., serialization_alias="userId")
    amount_cents: int = Field(..., serialization_alias="amountCents")
    currency: str
    environment: Literal["test", "live"]
    canceled: bool = False


class PaymentStatusResponse(BaseModel):
    user_id: str = Field(..., serialization_alias="userId")
    paid: bool
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(None, serialization_alias="updatedAt")
