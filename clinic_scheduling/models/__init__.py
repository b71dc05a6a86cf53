from clinic_scheduling.models.confirmation import (
    CONFIRMATION_STAGES,
    ConfirmationEntry,
    ConfirmationQueueEntry,
    ConfirmationQueueEntryPublic,
    ConfirmationStage,
    ConfirmationStatus,
)
from clinic_scheduling.models.schedule import (
    AvailableSlot,
    BusyInterval,
    ExistingAppointment,
    ScheduleGrid,
    TimeBlock,
)

__all__ = [
    "CONFIRMATION_STAGES",
    "ConfirmationEntry",
    "ConfirmationQueueEntry",
    "ConfirmationQueueEntryPublic",
    "ConfirmationStage",
    "ConfirmationStatus",
    "AvailableSlot",
    "BusyInterval",
    "ExistingAppointment",
    "ScheduleGrid",
    "TimeBlock",
]
