from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.catalog import MILESTONES, SERVICE_CENTERS, VISA_TYPES


class VisaUpdateCreate(BaseModel):
    """
    A new milestone post. Vocabulary fields must match the fixed lists
    so the dashboard filters stay meaningful.
    """
    country: str = Field(..., min_length=1, max_length=100)
    visa_type: str
    service_center: str | None = None
    milestone: str
    event_date: date
    note: str | None = Field(None, max_length=2000)

    @field_validator("visa_type")
    @classmethod
    def validate_visa_type(cls, v: str) -> str:
        if v not in VISA_TYPES:
            raise ValueError(f"visa_type must be one of {', '.join(VISA_TYPES)}")
        return v

    @field_validator("milestone")
    @classmethod
    def validate_milestone(cls, v: str) -> str:
        if v not in MILESTONES:
            raise ValueError(f"milestone must be one of {', '.join(MILESTONES)}")
        return v

    @field_validator("service_center")
    @classmethod
    def validate_service_center(cls, v: str | None) -> str | None:
        if v is not None and v not in SERVICE_CENTERS:
            raise ValueError(f"service_center must be one of {', '.join(SERVICE_CENTERS)}")
        return v

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ReactionSummary(BaseModel):
    likes: int = 0
    user_reaction: str | None = None


class VisaUpdateRead(BaseModel):
    id: str
    account_id: str
    country: str
    visa_type: str
    service_center: str | None
    milestone: str
    event_date: date
    note: str | None
    created_at: datetime
    reactions: ReactionSummary = Field(default_factory=ReactionSummary)

    model_config = ConfigDict(from_attributes=True)


class ReactionToggleResponse(BaseModel):
    update_id: str
    reacted: bool
    likes: int
