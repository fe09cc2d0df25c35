from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from app.core.catalog import COUNTRIES, EMBASSIES_BY_COUNTRY, SERVICE_CENTERS, VISA_TYPES


class ProfileUpdate(BaseModel):
    """
    Full replacement of a member's profile. Omitted or blank fields are
    stored as empty.
    """
    visa_type: str | None = None
    service_center: str | None = None
    country: str | None = None
    embassy: str | None = None

    @field_validator("visa_type", "service_center", "country", "embassy", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("visa_type")
    @classmethod
    def validate_visa_type(cls, v: str | None) -> str | None:
        if v is not None and v not in VISA_TYPES:
            raise ValueError(f"visa_type must be one of {', '.join(VISA_TYPES)}")
        return v

    @field_validator("service_center")
    @classmethod
    def validate_service_center(cls, v: str | None) -> str | None:
        if v is not None and v not in SERVICE_CENTERS:
            raise ValueError(f"service_center must be one of {', '.join(SERVICE_CENTERS)}")
        return v

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str | None) -> str | None:
        if v is not None and v not in COUNTRIES:
            raise ValueError(f"country must be one of {', '.join(COUNTRIES)}")
        return v

    @model_validator(mode="after")
    def embassy_belongs_to_country(self):
        if self.embassy is None:
            return self
        if self.country is None:
            raise ValueError("embassy requires a country")
        if self.embassy not in EMBASSIES_BY_COUNTRY.get(self.country, ()):
            raise ValueError(f"{self.embassy} is not an embassy in {self.country}")
        return self


class ProfileRead(BaseModel):
    account_id: str
    visa_type: str | None = None
    service_center: str | None = None
    country: str | None = None
    embassy: str | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UpdateDraft(BaseModel):
    """Defaults for the new-update form, taken from the member's profile."""
    country: str | None = None
    visa_type: str | None = None
