from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from clinic_scheduling.services.timezone import parse_instant


class EnqueueConfirmationsRequest(BaseModel):
    clinic_id: str = Field(min_length=1)
    appointment_id: str = Field(min_length=1)
    starts_at: datetime

    @field_validator("starts_at", mode="before")
    @classmethod
    def _to_utc(cls, v: object) -> datetime:
        return parse_instant(v)
