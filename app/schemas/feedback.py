from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.catalog import FEEDBACK_MILESTONES, FEEDBACK_ROUTES


class FeedbackPostCreate(BaseModel):
    country: str
    milestone: str
    date_of_event: date
    note: str | None = Field(None, max_length=2000)

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        if v not in FEEDBACK_ROUTES:
            raise ValueError(f"country must be one of {', '.join(FEEDBACK_ROUTES)}")
        return v

    @field_validator("milestone")
    @classmethod
    def validate_milestone(cls, v: str) -> str:
        if v not in FEEDBACK_MILESTONES:
            raise ValueError(f"milestone must be one of {', '.join(FEEDBACK_MILESTONES)}")
        return v

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class FeedbackReactionSummary(BaseModel):
    likes: int = 0
    dislikes: int = 0
    user_reaction: str | None = None

    @property
    def score(self) -> int:
        return self.likes - self.dislikes


class FeedbackPostRead(BaseModel):
    id: str
    account_id: str
    country: str
    milestone: str
    date_of_event: date
    note: str | None
    created_at: datetime
    reactions: FeedbackReactionSummary = Field(default_factory=FeedbackReactionSummary)

    model_config = ConfigDict(from_attributes=True)


class FeedbackReactionRequest(BaseModel):
    reaction: Literal["like", "dislike"]


class FeedbackReactionResponse(BaseModel):
    post_id: str
    user_reaction: str | None
    likes: int
    dislikes: int
