from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.replace(tzinfo=None)


@dataclass(frozen=True)
class ConfirmationStage:
    label: str
    hours_before: int


# Fixed order; since all stages share one start instant this is also chronological
CONFIRMATION_STAGES = (
    ConfirmationStage(label="48h", hours_before=48),
    ConfirmationStage(label="24h", hours_before=24),
    ConfirmationStage(label="2h", hours_before=2),
)


class ConfirmationStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    sent = "sent"
    failed = "failed"


class ConfirmationEntry(SQLModel):
    """A reminder to send before an appointment, as produced at booking time."""

    clinic_id: str
    appointment_id: str
    stage: str
    status: ConfirmationStatus = ConfirmationStatus.pending
    scheduled_at: datetime
    attempts: int = 0


class ConfirmationQueueEntry(SQLModel, table=True):
    __tablename__ = "confirmation_queue"
    __table_args__ = (UniqueConstraint("appointment_id", "stage", name="uq_confirmation_queue_appointment_stage"),)

    id: int | None = Field(default=None, primary_key=True)
    clinic_id: str = Field(index=True)
    appointment_id: str = Field(index=True)
    stage: str
    status: str = Field(default=ConfirmationStatus.pending.value, index=True)
    scheduled_at: datetime = Field(index=True)
    attempts: int = 0
    sent_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utc_naive_now)

    @classmethod
    def from_entry(cls, entry: ConfirmationEntry) -> "ConfirmationQueueEntry":
        return cls(
            clinic_id=entry.clinic_id,
            appointment_id=entry.appointment_id,
            stage=entry.stage,
            status=entry.status.value,
            scheduled_at=_naive_utc(entry.scheduled_at),
            attempts=entry.attempts,
        )


class ConfirmationQueueEntryPublic(SQLModel):
    id: int
    clinic_id: str
    appointment_id: str
    stage: str
    status: str
    scheduled_at: datetime
    attempts: int
    created_at: datetime
