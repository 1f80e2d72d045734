"""Tests for entry editing and week operations."""

from __future__ import annotations

from datetime import date

import pytest

from schedule_engine.data.models import ScheduleEntry, WeekKey, WeeklySchedule
from schedule_engine.editing import EntryEditor, WeekOperator, place_entry, remove_slot
from schedule_engine.results import OperationStatus
from schedule_engine.store import ScheduleStore
from schedule_engine.validation import ViolationKind


@pytest.fixture
def store() -> ScheduleStore:
    return ScheduleStore()


@pytest.fixture
def editor(store) -> EntryEditor:
    return EntryEditor(store)


@pytest.fixture
def weeks(store) -> WeekOperator:
    return WeekOperator(store)


@pytest.fixture
def key() -> WeekKey:
    return WeekKey.for_date("cls-1", "2026-10-12")


def maths(day: str = "Monday", slot: str = "09:00-10:00", **fields) -> ScheduleEntry:
    fields.setdefault("subject", "Mathematics")
    return ScheduleEntry(day=day, time_slot=slot, **fields)


# =============================================================================
# Pure Helpers
# =============================================================================

class TestPlaceEntry:
    """Tests for placing an entry into a schedule copy."""

    def test_appends_to_free_slot(self):
        schedule = place_entry(WeeklySchedule.empty(), "Monday", maths())
        assert schedule.entry_at("Monday", "09:00-10:00").subject == "Mathematics"

    def test_replaces_occupant_in_place(self):
        schedule = WeeklySchedule.empty()
        schedule = place_entry(schedule, "Monday", maths(slot="08:00-09:00"))
        schedule = place_entry(schedule, "Monday", maths())
        schedule = place_entry(schedule, "Monday", maths(subject="Physics"))

        assert [e.subject for e in schedule.entries("Monday")] == ["Mathematics", "Physics"]

    def test_does_not_mutate_input(self):
        original = WeeklySchedule.empty()
        place_entry(original, "Monday", maths())
        assert original.is_empty

    def test_remove_slot(self):
        schedule = place_entry(WeeklySchedule.empty(), "Monday", maths())
        assert remove_slot(schedule, "Monday", "09:00-10:00").is_empty
        assert schedule.entry_count == 1


# =============================================================================
# Entry Editor
# =============================================================================

class TestAddOrUpdate:
    """Tests for add-or-replace at a slot."""

    def test_adds_entry(self, editor, store, key):
        result = editor.add_or_update(key, maths(room="A101"))

        assert result.status == OperationStatus.APPLIED
        entry = store.get(key).entry_at("Monday", "09:00-10:00")
        assert entry.subject == "Mathematics"
        assert entry.room == "A101"

    def test_second_write_replaces_first(self, editor, store, key):
        editor.add_or_update(key, maths())
        editor.add_or_update(key, maths(subject="Physics"))

        entries = store.get(key).entries("Monday")
        assert len(entries) == 1
        assert entries[0].subject == "Physics"

    def test_day_override(self, editor, store, key):
        entry = ScheduleEntry(time_slot="10:00-11:00", subject="Art")
        result = editor.add_or_update(key, entry, day="Friday")

        assert result.ok
        assert store.get(key).entry_at("Friday", "10:00-11:00").subject == "Art"

    def test_missing_day_rejected(self, editor, store, key):
        result = editor.add_or_update(key, ScheduleEntry(time_slot="10:00-11:00", subject="Art"))

        assert result.status == OperationStatus.REJECTED
        assert result.violations[0].kind == ViolationKind.UNKNOWN_DAY
        assert not store.exists(key)

    def test_unknown_slot_rejected(self, editor, store, key):
        result = editor.add_or_update(key, maths(slot="07:00-08:00"))

        assert result.status == OperationStatus.REJECTED
        assert result.violations[0].kind == ViolationKind.UNKNOWN_SLOT
        assert store.get(key).is_empty

    def test_class_without_subject_rejected(self, editor, store, key):
        result = editor.add_or_update(key, maths(subject=""))

        assert result.status == OperationStatus.REJECTED
        assert result.violations[0].kind == ViolationKind.MISSING_SUBJECT

    def test_break_without_subject(self, editor, store, key):
        result = editor.add_or_update(
            key,
            ScheduleEntry(day="Monday", time_slot="10:00-11:00", type="break"),
        )
        assert result.ok

    def test_other_days_untouched(self, editor, store, key):
        editor.add_or_update(key, maths(day="Tuesday"))
        editor.add_or_update(key, maths(day="Monday", subject="Physics"))

        schedule = store.get(key)
        assert schedule.entry_at("Tuesday", "09:00-10:00").subject == "Mathematics"
        assert schedule.entry_at("Monday", "09:00-10:00").subject == "Physics"


class TestEdit:
    """Tests for editing the entry at a slot."""

    def test_edit_fields(self, editor, store, key):
        editor.add_or_update(key, maths())
        result = editor.edit(key, "Monday", "09:00-10:00", maths(room="B202", notes="Bring calculators"))

        assert result.ok
        entry = store.get(key).entry_at("Monday", "09:00-10:00")
        assert entry.room == "B202"
        assert entry.notes == "Bring calculators"

    def test_move_to_other_slot(self, editor, store, key):
        editor.add_or_update(key, maths())
        editor.edit(key, "Monday", "09:00-10:00", ScheduleEntry(time_slot="11:00-12:00", subject="Mathematics"))

        schedule = store.get(key)
        assert schedule.entry_at("Monday", "09:00-10:00") is None
        assert schedule.entry_at("Monday", "11:00-12:00").subject == "Mathematics"

    def test_move_to_other_day(self, editor, store, key):
        editor.add_or_update(key, maths())
        editor.edit(key, "Monday", "09:00-10:00", maths(day="Thursday"))

        schedule = store.get(key)
        assert schedule.entries("Monday") == []
        assert schedule.entry_at("Thursday", "09:00-10:00") is not None

    def test_edit_empty_slot_not_found(self, editor, store, key):
        result = editor.edit(key, "Monday", "09:00-10:00", maths())
        assert result.status == OperationStatus.NOT_FOUND
        assert not store.exists(key)


class TestRemove:
    """Tests for removing the entry at a slot."""

    def test_remove_entry(self, editor, store, key):
        editor.add_or_update(key, maths())
        result = editor.remove(key, "Monday", "09:00-10:00")

        assert result.status == OperationStatus.APPLIED
        assert store.get(key).is_empty

    def test_remove_free_slot_is_noop(self, editor, store, key):
        editor.add_or_update(key, maths())
        revision = store.revision(key)

        result = editor.remove(key, "Monday", "10:00-11:00")

        assert result.status == OperationStatus.UNCHANGED
        assert result.ok
        assert store.revision(key) == revision
        assert store.get(key).entry_count == 1

    def test_remove_from_unwritten_week(self, editor, store, key):
        result = editor.remove(key, "Monday", "09:00-10:00")
        assert result.status == OperationStatus.UNCHANGED
        assert not store.exists(key)

    def test_unknown_day(self, editor, key):
        result = editor.remove(key, "Someday", "09:00-10:00")
        assert result.status == OperationStatus.REJECTED


# =============================================================================
# Week Operations
# =============================================================================

class TestCopyWeek:
    """Tests for copying one week over another."""

    def test_copy_overwrites_target(self, editor, weeks, store, key):
        target = key.next()
        editor.add_or_update(key, maths())
        editor.add_or_update(key, maths(day="Friday", subject="Physics"))
        editor.add_or_update(target, maths(day="Wednesday", subject="History"))

        result = weeks.copy_week("cls-1", key.week_start, target.week_start)

        assert result.status == OperationStatus.APPLIED
        assert store.get(target).to_dict() == store.get(key).to_dict()
        assert store.get(target).entries("Wednesday") == []

    def test_source_unchanged(self, editor, weeks, store, key):
        editor.add_or_update(key, maths())
        before = store.get(key).to_dict()

        weeks.copy_week("cls-1", "2026-10-12", "2026-10-19")
        editor.add_or_update(key.next(), maths(subject="Physics"))

        assert store.get(key).to_dict() == before

    def test_any_date_in_week(self, editor, weeks, store, key):
        editor.add_or_update(key, maths())
        weeks.copy_week("cls-1", date(2026, 10, 16), "2026-10-21")
        assert store.get(key.next()).entry_count == 1

    def test_same_week_unchanged(self, editor, weeks, store, key):
        editor.add_or_update(key, maths())
        result = weeks.copy_week("cls-1", "2026-10-12", "2026-10-15")

        assert result.status == OperationStatus.UNCHANGED
        assert store.revision(key) == 1

    def test_missing_source_copies_empty_week(self, editor, weeks, store, key):
        editor.add_or_update(key.next(), maths())
        result = weeks.copy_week("cls-1", key.week_start, key.next().week_start)

        assert result.status == OperationStatus.APPLIED
        assert store.get(key.next()).is_empty

    def test_require_source(self, editor, weeks, store, key):
        editor.add_or_update(key.next(), maths())
        result = weeks.copy_week("cls-1", key.week_start, key.next().week_start, require_source=True)

        assert result.status == OperationStatus.NOT_FOUND
        assert store.get(key.next()).entry_count == 1

    def test_copy_is_classroom_scoped(self, editor, weeks, store, key):
        other = WeekKey(classroom_id="cls-2", week_start=key.week_start)
        editor.add_or_update(other, maths())

        weeks.copy_week("cls-1", key.week_start, key.next().week_start)

        assert store.get(key.next()).is_empty


class TestClearWeek:
    """Tests for clearing a week."""

    def test_clear(self, editor, weeks, store, key):
        editor.add_or_update(key, maths())
        result = weeks.clear_week(key)

        assert result.status == OperationStatus.APPLIED
        assert result.schedule == WeeklySchedule.empty()
        assert store.get(key).is_empty

    def test_clear_twice(self, weeks, store, key):
        weeks.clear_week(key)
        result = weeks.clear_week(key)
        assert result.ok
        assert store.get(key) == WeeklySchedule.empty()
        assert result.revision == 2
