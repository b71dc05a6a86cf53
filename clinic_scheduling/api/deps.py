from datetime import datetime

from clinic_scheduling.core.db import get_session
from clinic_scheduling.services.timezone import utc_now

__all__ = ["get_now", "get_session"]


def get_now() -> datetime:
    """Clock reading for one request; overridden in tests to pin time."""
    return utc_now()
