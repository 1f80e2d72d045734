"""
Fine-grained edits: place, edit or remove a single entry.

Each operation reads the store's current snapshot, builds a candidate and
submits it through `ScheduleStore.replace`. Concurrent editors of the same
week are not coordinated here; the last write to land wins.
"""

from __future__ import annotations

from typing import Optional

from schedule_engine.data.catalog import is_valid_day
from schedule_engine.data.models import ScheduleEntry, WeekKey, WeeklySchedule
from schedule_engine.logging import get_logger
from schedule_engine.results import OperationResult, OperationStatus
from schedule_engine.store import ScheduleStore
from schedule_engine.validation import Violation, ViolationKind

logger = get_logger(__name__)


def place_entry(schedule: WeeklySchedule, day: str, entry: ScheduleEntry) -> WeeklySchedule:
    """
    Copy of schedule with entry at (day, entry.time_slot).

    An entry already occupying that slot is replaced in position; otherwise
    the new entry is appended to the day.
    """
    candidate = schedule.normalized()
    placed = entry.model_copy(update={"day": day})
    entries = candidate.days.setdefault(day, [])

    kept: list[ScheduleEntry] = []
    replaced = False
    for existing in entries:
        if existing.time_slot == placed.time_slot:
            if not replaced:
                kept.append(placed)
                replaced = True
            continue
        kept.append(existing)
    if not replaced:
        kept.append(placed)

    candidate.days[day] = kept
    return candidate


def remove_slot(schedule: WeeklySchedule, day: str, time_slot: str) -> WeeklySchedule:
    """Copy of schedule without any entry at (day, time_slot)."""
    candidate = schedule.normalized()
    candidate.days[day] = [e for e in candidate.entries(day) if e.time_slot != time_slot]
    return candidate


def _unknown_day(store: ScheduleStore, key: WeekKey, day: Optional[str]) -> OperationResult:
    return OperationResult(
        status=OperationStatus.REJECTED,
        schedule=store.get(key),
        violations=[Violation(ViolationKind.UNKNOWN_DAY, f"Unknown day {day!r}", day=day)],
        error="Unknown day",
    )


class EntryEditor:
    """
    Single-entry operations on top of the schedule store.

    Usage:
        editor = EntryEditor(store)
        editor.add_or_update(key, ScheduleEntry(day="Monday", time_slot="09:00-10:00",
                                                subject="Mathematics"))
        editor.remove(key, "Monday", "09:00-10:00")
    """

    def __init__(self, store: ScheduleStore):
        self.store = store

    def add_or_update(
        self,
        key: WeekKey,
        entry: ScheduleEntry,
        day: Optional[str] = None,
    ) -> OperationResult:
        """
        Put an entry in its (day, slot), replacing any current occupant.

        Args:
            key: Week to edit
            entry: Entry to place; its `day` is used unless `day` is given
            day: Weekday override

        Returns:
            Result of the store write (REJECTED if the entry is invalid)
        """
        day = day or entry.day
        if not is_valid_day(day):
            return _unknown_day(self.store, key, day)

        candidate = place_entry(self.store.get(key), day, entry)
        result = self.store.replace(key, candidate)
        logger.debug(
            "entry_placed",
            week=str(key),
            day=day,
            time_slot=entry.time_slot,
            status=result.status.value,
        )
        return result

    def edit(
        self,
        key: WeekKey,
        day: str,
        time_slot: str,
        entry: ScheduleEntry,
    ) -> OperationResult:
        """
        Replace the entry at (day, time_slot) with `entry`.

        The new entry may name a different day or slot, in which case the old
        slot is vacated and the target slot's occupant is replaced.

        Returns:
            NOT_FOUND if nothing occupies (day, time_slot); otherwise the
            result of the store write
        """
        if not is_valid_day(day):
            return _unknown_day(self.store, key, day)

        current = self.store.get(key)
        if current.entry_at(day, time_slot) is None:
            return OperationResult(
                status=OperationStatus.NOT_FOUND,
                schedule=current,
                error=f"No entry at {day} {time_slot}",
            )

        target_day = entry.day or day
        if not is_valid_day(target_day):
            return _unknown_day(self.store, key, target_day)

        candidate = place_entry(remove_slot(current, day, time_slot), target_day, entry)
        return self.store.replace(key, candidate)

    def remove(self, key: WeekKey, day: str, time_slot: str) -> OperationResult:
        """
        Remove the entry at (day, time_slot).

        Removing from an empty slot is not an error: the result is UNCHANGED
        and nothing is written.
        """
        if not is_valid_day(day):
            return _unknown_day(self.store, key, day)

        current = self.store.get(key)
        if current.entry_at(day, time_slot) is None:
            return OperationResult(status=OperationStatus.UNCHANGED, schedule=current)

        return self.store.replace(key, remove_slot(current, day, time_slot))
