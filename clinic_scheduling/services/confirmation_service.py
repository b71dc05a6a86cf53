import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduling.models.confirmation import (
    CONFIRMATION_STAGES,
    ConfirmationEntry,
    ConfirmationQueueEntry,
)
from clinic_scheduling.services.timezone import parse_instant, utc_now

logger = logging.getLogger(__name__)


def build_confirmation_entries(
    clinic_id: str,
    appointment_id: str,
    starts_at: datetime | str,
    *,
    now: datetime | None = None,
) -> list[ConfirmationEntry]:
    """Reminder entries for an appointment, keeping only stages strictly after `now`."""
    start = parse_instant(starts_at)
    current_time = parse_instant(now) if now is not None else utc_now()

    entries: list[ConfirmationEntry] = []
    for stage in CONFIRMATION_STAGES:
        scheduled_at = start - timedelta(hours=stage.hours_before)
        if scheduled_at > current_time:
            entries.append(
                ConfirmationEntry(
                    clinic_id=clinic_id,
                    appointment_id=appointment_id,
                    stage=stage.label,
                    scheduled_at=scheduled_at,
                )
            )
    return entries


async def enqueue_confirmations(
    session: AsyncSession,
    clinic_id: str,
    appointment_id: str,
    starts_at: datetime | str,
    *,
    now: datetime | None = None,
) -> list[ConfirmationQueueEntry]:
    """Build and insert reminder rows. Nothing is inserted when no stage qualifies."""
    entries = build_confirmation_entries(clinic_id, appointment_id, starts_at, now=now)
    if not entries:
        logger.debug("No confirmation stages left for appointment %s", appointment_id)
        return []

    rows = [ConfirmationQueueEntry.from_entry(e) for e in entries]
    session.add_all(rows)
    await session.flush()
    logger.info(
        "Enqueued %d confirmation(s) for appointment %s: %s",
        len(rows),
        appointment_id,
        ", ".join(r.stage for r in rows),
    )
    return rows
