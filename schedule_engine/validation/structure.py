"""
Structural checks: the day-key set, the shape of day lists and entries.

Every other rule runs on the output of `iter_day_entries`, which skips
anything these checks have already reported as malformed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

from schedule_engine.data.catalog import DAY_NAMES, is_valid_day
from schedule_engine.data.models import ScheduleEntry, WeeklySchedule

from .violations import Violation, ViolationKind


# Wire key -> attribute name
_ENTRY_FIELDS = {
    "timeSlot": "time_slot",
    "type": "type",
    "subject": "subject",
    "room": "room",
    "notes": "notes",
    "day": "day",
}


@dataclass(frozen=True)
class EntryView:
    """Read-only field access over a ScheduleEntry or a raw entry dict."""
    day: str
    time_slot: Any
    type: Any
    subject: Any
    declared_day: Any

    def describe(self) -> str:
        if isinstance(self.subject, str) and self.subject.strip():
            return f"'{self.subject.strip()}'"
        return f"{self.type!r} entry"


def as_day_map(schedule: Any) -> Optional[Mapping[Any, Any]]:
    """The day mapping of a schedule, or None if it is not a mapping."""
    if isinstance(schedule, WeeklySchedule):
        return schedule.days
    if isinstance(schedule, Mapping):
        return schedule
    return None


def read_entry(day: str, entry: Any) -> Optional[EntryView]:
    """View an entry's fields; None if the entry is not an object."""
    if isinstance(entry, ScheduleEntry):
        return EntryView(
            day=day,
            time_slot=entry.time_slot,
            type=entry.type,
            subject=entry.subject,
            declared_day=entry.day,
        )
    if isinstance(entry, Mapping):
        values = {}
        for wire_key, attr in _ENTRY_FIELDS.items():
            values[attr] = entry.get(wire_key, entry.get(attr))
        return EntryView(
            day=day,
            time_slot=values["time_slot"],
            type=values["type"],
            subject=values["subject"],
            declared_day=values["day"],
        )
    return None


def check_schedule_shape(schedule: Any) -> list[Violation]:
    """The schedule itself must be a day mapping."""
    if as_day_map(schedule) is None:
        return [Violation(
            ViolationKind.MALFORMED_SCHEDULE,
            f"Schedule must map weekday names to entry lists, got {type(schedule).__name__}",
        )]
    return []


def check_day_keys(days: Mapping[Any, Any]) -> list[Violation]:
    """
    Every weekday must be present and no other key may appear.

    Filling in missing days is the store's job; the validator only reports.
    """
    violations: list[Violation] = []

    for key in days:
        if not is_valid_day(key):
            violations.append(Violation(
                ViolationKind.UNKNOWN_DAY,
                f"Unknown day key {key!r}",
                day=key if isinstance(key, str) else None,
            ))

    for day in DAY_NAMES:
        if day not in days:
            violations.append(Violation(
                ViolationKind.MISSING_DAY,
                f"Missing day key '{day}'",
                day=day,
            ))

    return violations


def check_day_lists(days: Mapping[Any, Any]) -> list[Violation]:
    """Day values must be lists of entry objects."""
    violations: list[Violation] = []

    for day in DAY_NAMES:
        if day not in days:
            continue
        entries = days[day]
        if not isinstance(entries, (list, tuple)):
            violations.append(Violation(
                ViolationKind.MALFORMED_DAY,
                f"Expected a list of entries, got {type(entries).__name__}",
                day=day,
            ))
            continue
        for entry in entries:
            if read_entry(day, entry) is None:
                violations.append(Violation(
                    ViolationKind.MALFORMED_ENTRY,
                    f"Entry must be an object, got {type(entry).__name__}",
                    day=day,
                ))

    return violations


def check_declared_days(days: Mapping[Any, Any]) -> list[Violation]:
    """An entry that names its own day must be listed under that day."""
    violations: list[Violation] = []

    for view in iter_day_entries(days):
        declared = view.declared_day
        if declared is not None and declared != view.day:
            slot = view.time_slot if isinstance(view.time_slot, str) else None
            violations.append(Violation(
                ViolationKind.DAY_MISMATCH,
                f"Entry {view.describe()} declares day {declared!r} but is listed under {view.day}",
                day=view.day,
                time_slot=slot,
            ))

    return violations


def iter_day_entries(days: Mapping[Any, Any]) -> Iterator[EntryView]:
    """Entries listed under recognized weekdays, skipping malformed ones."""
    for day in DAY_NAMES:
        entries = days.get(day)
        if not isinstance(entries, (list, tuple)):
            continue
        for entry in entries:
            view = read_entry(day, entry)
            if view is not None:
                yield view
