"""Pytest configuration and fixtures."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from clinic_scheduling.api.deps import get_now, get_session
from clinic_scheduling.main import app
from clinic_scheduling.models.schedule import ScheduleGrid, TimeBlock

TIMEZONE = "America/Sao_Paulo"  # UTC-3, no DST in 2026

# 2026-02-13 08:00 UTC = 05:00 in São Paulo, a Friday
FAKE_NOW = datetime(2026, 2, 13, 8, 0, tzinfo=UTC)


class FakeSession:
    """Stands in for AsyncSession: records inserts, assigns ids on flush."""

    def __init__(self, flush_error: Exception | None = None):
        self.added: list = []
        self.flush_count = 0
        self.flush_error = flush_error

    def add_all(self, rows) -> None:
        self.added.extend(rows)

    async def flush(self) -> None:
        self.flush_count += 1
        if self.flush_error is not None:
            raise self.flush_error
        for i, row in enumerate(self.added, start=1):
            if row.id is None:
                row.id = i


@pytest.fixture
def now() -> datetime:
    return FAKE_NOW


@pytest.fixture
def full_week_grid() -> ScheduleGrid:
    return ScheduleGrid(
        monday=[TimeBlock(start="09:00", end="12:00"), TimeBlock(start="14:00", end="18:00")],
        tuesday=[TimeBlock(start="09:00", end="18:00")],
        wednesday=[TimeBlock(start="09:00", end="12:00")],
        thursday=[TimeBlock(start="09:00", end="18:00")],
        friday=[TimeBlock(start="09:00", end="17:00")],
        saturday=[TimeBlock(start="09:00", end="13:00")],
        sunday=[],
    )


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(fake_session: FakeSession):
    async def _session_override():
        yield fake_session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_now] = lambda: FAKE_NOW
    yield TestClient(app)
    app.dependency_overrides.clear()
