"""
Tests for the human-readable slot digest in services/slot_service.py
"""

from datetime import UTC, datetime, time, timedelta

import pytest
import pytz
from babel import UnknownLocaleError
from babel.dates import parse_time

from clinic_scheduling.models.schedule import AvailableSlot
from clinic_scheduling.services.slot_service import (
    date_label_pattern,
    format_slot_options,
    format_slots_for_llm,
    no_slots_message,
    parse_locale,
)

from tests.conftest import TIMEZONE


def slot(*args, minutes: int = 30) -> AvailableSlot:
    start = datetime(*args, tzinfo=UTC)
    return AvailableSlot(start=start, end=start + timedelta(minutes=minutes))


@pytest.fixture
def two_days() -> list[AvailableSlot]:
    return [
        slot(2026, 2, 18, 12, 0),
        slot(2026, 2, 18, 12, 30),
        slot(2026, 2, 18, 13, 0),
        slot(2026, 2, 19, 17, 0),
        slot(2026, 2, 19, 17, 30),
    ]


class TestNoSlots:
    @pytest.mark.parametrize(
        "locale,message",
        [
            ("en", "No available slots."),
            ("en-US", "No available slots."),
            ("pt-BR", "Nenhum horário disponível."),
            ("pt_BR", "Nenhum horário disponível."),
            ("es", "No hay horarios disponibles."),
        ],
    )
    def test_localized_message(self, locale, message):
        assert format_slots_for_llm([], TIMEZONE, locale) == message

    def test_unlisted_language_falls_back_to_english(self):
        assert no_slots_message("fr-FR") == "No available slots."

    def test_options_empty(self):
        assert format_slot_options([], TIMEZONE, "pt-BR") == "Nenhum horário disponível."

    def test_unknown_locale_raises(self):
        with pytest.raises(UnknownLocaleError):
            no_slots_message("xx-YY")


class TestDigest:
    def test_one_line_per_date(self, two_days):
        lines = format_slots_for_llm(two_days, TIMEZONE, "pt-BR").split("\n")

        assert len(lines) == 2
        assert lines[0].endswith(": 09:00, 09:30, 10:00")
        assert lines[1].endswith(": 14:00, 14:30")

    def test_portuguese_date_label(self, two_days):
        first = format_slots_for_llm(two_days, TIMEZONE, "pt-BR").split("\n")[0]
        assert "quarta-feira" in first
        assert "fevereiro" in first

    def test_english_date_label(self, two_days):
        first = format_slots_for_llm(two_days, TIMEZONE, "en-US").split("\n")[0]
        assert "Wednesday" in first
        assert "February" in first

    def test_label_leaves_out_year(self, two_days):
        for locale in ("pt-BR", "en-US", "es"):
            first = format_slots_for_llm(two_days, TIMEZONE, locale).split("\n")[0]
            assert "2026" not in first

    def test_portuguese_label_reads_weekday_day_month(self, two_days):
        first = format_slots_for_llm(two_days, TIMEZONE, "pt-BR").split("\n")[0]
        label, _ = first.split(": ", 1)
        assert label.startswith("quarta-feira")
        assert label.endswith("18 de fevereiro")

    def test_label_pattern_uses_full_weekday(self):
        pattern = date_label_pattern(parse_locale("pt-BR"))
        assert "EEEE" in pattern
        assert "y" not in pattern

    def test_first_seen_order(self, two_days):
        reordered = two_days[3:] + two_days[:3]
        lines = format_slots_for_llm(reordered, TIMEZONE, "pt-BR").split("\n")
        assert lines[0].endswith(": 14:00, 14:30")
        assert lines[1].endswith(": 09:00, 09:30, 10:00")

    def test_grouped_by_local_date(self):
        """02:00Z on the 19th is still the evening of the 18th in São Paulo."""
        slots = [slot(2026, 2, 18, 12, 0), slot(2026, 2, 19, 2, 0)]
        digest = format_slots_for_llm(slots, TIMEZONE, "pt-BR")

        assert "\n" not in digest
        assert digest.endswith(": 09:00, 23:00")

    def test_times_parse_back_to_slot_starts(self, two_days):
        tz = pytz.timezone(TIMEZONE)
        digest = format_slots_for_llm(two_days, TIMEZONE, "pt-BR")

        parsed: list[time] = []
        for line in digest.split("\n"):
            _, times = line.rsplit(": ", 1)
            parsed.extend(parse_time(t, locale="pt_BR", format="short") for t in times.split(", "))

        assert parsed == [s.start.astimezone(tz).time() for s in two_days]


class TestSlotOptions:
    def test_numbered_lines_with_exact_instants(self, two_days):
        lines = format_slot_options(two_days[:2], TIMEZONE, "pt-BR").split("\n")
        assert lines == [
            "1. 09:00 - starts_at: 2026-02-18T12:00:00Z, ends_at: 2026-02-18T12:30:00Z",
            "2. 09:30 - starts_at: 2026-02-18T12:30:00Z, ends_at: 2026-02-18T13:00:00Z",
        ]
