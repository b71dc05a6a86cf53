import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduling.api.deps import get_now, get_session
from clinic_scheduling.api.schemas.confirmation import EnqueueConfirmationsRequest
from clinic_scheduling.models.confirmation import (
    ConfirmationEntry,
    ConfirmationQueueEntry,
    ConfirmationQueueEntryPublic,
)
from clinic_scheduling.services.confirmation_service import (
    build_confirmation_entries,
    enqueue_confirmations,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/confirmations", tags=["confirmations"])


def _as_utc(dt: datetime) -> datetime:
    """Queue columns hold naive UTC; hand them back as aware instants."""
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def _to_public(row: ConfirmationQueueEntry) -> ConfirmationQueueEntryPublic:
    return ConfirmationQueueEntryPublic(
        id=row.id,
        clinic_id=row.clinic_id,
        appointment_id=row.appointment_id,
        stage=row.stage,
        status=row.status,
        scheduled_at=_as_utc(row.scheduled_at),
        attempts=row.attempts,
        created_at=_as_utc(row.created_at),
    )


@router.post("/preview", response_model=list[ConfirmationEntry])
async def preview_confirmations(
    body: EnqueueConfirmationsRequest,
    now: datetime = Depends(get_now),
) -> list[ConfirmationEntry]:
    """Reminder entries that would be queued for this appointment; nothing is stored."""
    return build_confirmation_entries(body.clinic_id, body.appointment_id, body.starts_at, now=now)


@router.post(
    "",
    response_model=list[ConfirmationQueueEntryPublic],
    status_code=status.HTTP_201_CREATED,
)
async def create_confirmations(
    body: EnqueueConfirmationsRequest,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> list[ConfirmationQueueEntryPublic]:
    try:
        rows = await enqueue_confirmations(
            session, body.clinic_id, body.appointment_id, body.starts_at, now=now
        )
    except IntegrityError as e:
        logger.warning("Confirmations already queued for appointment %s: %s", body.appointment_id, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Confirmations already queued for this appointment.",
        ) from e
    return [_to_public(r) for r in rows]
