from datetime import datetime

from fastapi import APIRouter, Depends

from clinic_scheduling.api.deps import get_now
from clinic_scheduling.api.schemas.slots import (
    AvailableSlotsRequest,
    AvailableSlotsResponse,
    ConflictCheckRequest,
    ConflictCheckResponse,
    SlotDigestRequest,
    SlotDigestResponse,
)
from clinic_scheduling.services.overlap import find_overlapping
from clinic_scheduling.services.slot_service import (
    format_slot_options,
    format_slots_for_llm,
    get_available_slots,
)

router = APIRouter(prefix="/slots", tags=["slots"])


@router.post("/available", response_model=AvailableSlotsResponse)
async def available_slots(
    body: AvailableSlotsRequest,
    now: datetime = Depends(get_now),
) -> AvailableSlotsResponse:
    """Open slots for the given date in the clinic's timezone, as UTC instants plus a digest."""
    slots = get_available_slots(
        body.date,
        body.schedule_grid,
        body.duration_minutes,
        body.existing_appointments,
        body.timezone,
        body.busy_blocks,
        now=now,
    )
    return AvailableSlotsResponse(
        date=body.date.isoformat(),
        timezone=body.timezone,
        duration_minutes=body.duration_minutes,
        slots=slots,
        digest=format_slots_for_llm(slots, body.timezone, body.locale),
    )


@router.post("/digest", response_model=SlotDigestResponse)
async def slot_digest(body: SlotDigestRequest) -> SlotDigestResponse:
    return SlotDigestResponse(
        digest=format_slots_for_llm(body.slots, body.timezone, body.locale),
        options=format_slot_options(body.slots, body.timezone, body.locale),
    )


@router.post("/conflicts", response_model=ConflictCheckResponse)
async def slot_conflicts(body: ConflictCheckRequest) -> ConflictCheckResponse:
    """Re-check a slot against freshly loaded busy time right before booking it."""
    conflicts = find_overlapping(body.start, body.end, body.busy)
    return ConflictCheckResponse(has_conflict=bool(conflicts), conflicts=conflicts)
