"""Tests for the slot catalog and schedule models."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from schedule_engine.data.catalog import (
    DAY_NAMES,
    TIME_SLOTS,
    EntryType,
    all_days,
    all_slots,
    all_types,
    is_valid_day,
    is_valid_slot,
    is_valid_type,
    slot_index,
)
from schedule_engine.data.models import (
    ScheduleEntry,
    WeekKey,
    WeeklySchedule,
    diff_schedules,
    monday_of,
)


@pytest.fixture
def sample_schedule() -> WeeklySchedule:
    return WeeklySchedule.from_dict({
        "Monday": [
            {"timeSlot": "11:00-12:00", "type": "class", "subject": "Physics", "room": "Lab1"},
            {"timeSlot": "09:00-10:00", "type": "class", "subject": "Mathematics", "room": "A101"},
        ],
        "Wednesday": [
            {"timeSlot": "12:00-13:00", "type": "lunch"},
        ],
    })


# =============================================================================
# Catalog
# =============================================================================

class TestCatalog:
    """Tests for the fixed day, slot and type vocabulary."""

    def test_days_start_on_monday(self):
        assert all_days() == DAY_NAMES
        assert len(DAY_NAMES) == 7
        assert DAY_NAMES[0] == "Monday"
        assert DAY_NAMES[-1] == "Sunday"

    def test_slots_are_contiguous_hours(self):
        slots = all_slots()
        assert slots == TIME_SLOTS
        assert len(slots) == 10
        assert slots[0] == "08:00-09:00"
        assert slots[-1] == "17:00-18:00"
        for earlier, later in zip(slots, slots[1:]):
            assert earlier.split("-")[1] == later.split("-")[0]

    def test_types(self):
        assert all_types() == ("class", "break", "lunch")

    def test_membership_is_exact(self):
        assert is_valid_day("Friday")
        assert not is_valid_day("friday")
        assert not is_valid_day(None)
        assert is_valid_slot("09:00-10:00")
        assert not is_valid_slot("9:00-10:00")
        assert not is_valid_slot("18:00-19:00")
        assert is_valid_type("break")
        assert is_valid_type(EntryType.LUNCH)
        assert not is_valid_type("meeting")

    def test_unknown_slot_sorts_last(self):
        assert slot_index("08:00-09:00") == 0
        assert slot_index("bogus") == len(TIME_SLOTS)


# =============================================================================
# WeekKey
# =============================================================================

class TestWeekKey:
    """Tests for week identification."""

    def test_normalizes_to_monday(self):
        key = WeekKey.for_date("cls-1", "2026-10-15")
        assert key.week_start == date(2026, 10, 12)

    def test_dates_in_same_week_are_equal(self):
        a = WeekKey.for_date("cls-1", "2026-10-12")
        b = WeekKey.for_date("cls-1", date(2026, 10, 18))
        c = WeekKey.for_date("cls-1", datetime(2026, 10, 14, 15, 30))
        assert a == b == c
        assert len({a, b, c}) == 1

    def test_accepts_iso_timestamps(self):
        key = WeekKey.for_date("cls-1", "2026-10-14T09:30:00Z")
        assert key.week_start == date(2026, 10, 12)

    def test_different_classrooms_differ(self):
        assert WeekKey.for_date("cls-1", "2026-10-12") != WeekKey.for_date("cls-2", "2026-10-12")

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            WeekKey.for_date("cls-1", "next tuesday")

    def test_navigation(self):
        key = WeekKey.for_date("cls-1", "2026-10-14")
        assert key.next().week_start == date(2026, 10, 19)
        assert key.previous().week_start == date(2026, 10, 5)
        assert key.week_end == date(2026, 10, 18)

    def test_current_uses_today(self):
        key = WeekKey.current("cls-1", today=date(2026, 10, 18))
        assert key.week_start == date(2026, 10, 12)

    def test_label(self):
        assert WeekKey.for_date("cls-1", "2026-10-12").label() == "Oct 12 - Oct 18, 2026"
        assert WeekKey.for_date("cls-1", "2026-12-30").label() == "Dec 28 - Jan 3, 2027"

    def test_str(self):
        assert str(WeekKey.for_date("cls-1", "2026-10-13")) == "cls-1@2026-10-12"

    def test_monday_of(self):
        assert monday_of(date(2026, 10, 12)) == date(2026, 10, 12)
        assert monday_of(datetime(2026, 10, 18, 23, 59)) == date(2026, 10, 12)


# =============================================================================
# ScheduleEntry
# =============================================================================

class TestScheduleEntry:
    """Tests for a single schedule entry."""

    def test_accepts_wire_and_python_names(self):
        a = ScheduleEntry(timeSlot="09:00-10:00", subject="Maths")
        b = ScheduleEntry(time_slot="09:00-10:00", subject="Maths")
        assert a == b

    def test_defaults(self):
        entry = ScheduleEntry(time_slot="09:00-10:00")
        assert entry.type == "class"
        assert entry.subject == ""
        assert entry.room == ""
        assert entry.notes == ""

    def test_enum_type_is_unwrapped(self):
        entry = ScheduleEntry(time_slot="12:00-13:00", type=EntryType.LUNCH)
        assert entry.type == "lunch"
        assert not entry.is_class

    def test_to_dict_omits_day(self):
        entry = ScheduleEntry(day="Monday", time_slot="09:00-10:00", subject="Maths", room="A101")
        assert entry.to_dict() == {
            "timeSlot": "09:00-10:00",
            "type": "class",
            "subject": "Maths",
            "room": "A101",
            "notes": "",
        }


# =============================================================================
# WeeklySchedule
# =============================================================================

class TestWeeklySchedule:
    """Tests for the weekly schedule model."""

    def test_empty_has_seven_days(self):
        schedule = WeeklySchedule.empty()
        assert list(schedule.days) == list(DAY_NAMES)
        assert schedule.is_empty
        assert schedule.is_complete

    def test_from_dict_fills_missing_days(self, sample_schedule):
        assert sample_schedule.is_complete
        assert sample_schedule.entries("Tuesday") == []
        assert sample_schedule.entry_count == 3

    def test_from_dict_without_filling(self):
        schedule = WeeklySchedule.from_dict({"Monday": []}, fill_missing=False)
        assert not schedule.is_complete

    def test_entries_know_their_day(self, sample_schedule):
        assert all(entry.day == day for day, entry in sample_schedule.iter_entries())

    def test_sorted_entries_follow_catalog(self, sample_schedule):
        slots = [e.time_slot for e in sample_schedule.sorted_entries("Monday")]
        assert slots == ["09:00-10:00", "11:00-12:00"]

    def test_entry_at(self, sample_schedule):
        assert sample_schedule.entry_at("Monday", "09:00-10:00").subject == "Mathematics"
        assert sample_schedule.entry_at("Monday", "10:00-11:00") is None
        assert sample_schedule.entry_at("Funday", "10:00-11:00") is None

    def test_to_dict_calendar_order(self, sample_schedule):
        assert list(sample_schedule.to_dict()) == list(DAY_NAMES)

    def test_equivalent_ignores_storage_order(self, sample_schedule):
        reordered = sample_schedule.model_copy(deep=True)
        reordered.days["Monday"].reverse()
        assert reordered != sample_schedule
        assert reordered.equivalent(sample_schedule)

    def test_summary(self, sample_schedule):
        summary = sample_schedule.summary()
        assert summary["Monday"] == 2
        assert summary["Wednesday"] == 1
        assert summary["Sunday"] == 0

    def test_normalized_is_independent_copy(self, sample_schedule):
        copy = sample_schedule.normalized()
        copy.days["Monday"].clear()
        assert sample_schedule.entry_count == 3


class TestDiffSchedules:
    """Tests for slot-level schedule differences."""

    def test_detects_added_removed_changed(self, sample_schedule):
        after = sample_schedule.model_copy(deep=True)
        after.days["Monday"] = [
            ScheduleEntry(time_slot="09:00-10:00", subject="Mathematics", room="B202"),
        ]
        after.days["Friday"] = [ScheduleEntry(time_slot="10:00-11:00", subject="Physics")]

        diff = diff_schedules(sample_schedule, after)

        assert diff.added == [("Friday", "10:00-11:00")]
        assert diff.removed == [("Monday", "11:00-12:00")]
        assert diff.changed == [("Monday", "09:00-10:00")]
        assert diff.touched_days == {"Monday", "Friday"}

    def test_identical_schedules(self, sample_schedule):
        assert diff_schedules(sample_schedule, sample_schedule.normalized()).is_empty
