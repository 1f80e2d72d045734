"""
Pydantic models for the weekly classroom schedule.

Wire conventions (shared with the web client and the generation service):
- A schedule document maps each weekday name to a list of entries.
- Entry keys are camelCase ('timeSlot'); Python attributes are snake_case.
- Week start dates are ISO 'YYYY-MM-DD' strings, always a Monday.

Example document:
    {
      "Monday": [
        {"timeSlot": "09:00-10:00", "type": "class", "subject": "Mathematics",
         "room": "A101", "notes": "Chapter 5"}
      ],
      "Tuesday": [], ..., "Sunday": []
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from .catalog import DAY_NAMES, EntryType, slot_index


# =============================================================================
# Helper Functions
# =============================================================================

def monday_of(value: Union[date, datetime]) -> date:
    """Return the Monday of the week containing value."""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def parse_week_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a date-like value into a date.

    Accepts date and datetime objects and ISO strings; a time component in
    the string is ignored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            raise ValueError(f"Invalid week date '{value}', expected YYYY-MM-DD")
    raise ValueError(f"Invalid week date {value!r}")


# =============================================================================
# Keys and Context
# =============================================================================

class WeekKey(BaseModel):
    """
    Identifies one classroom's schedule for one week.

    week_start is normalized to the Monday of its week, so any date inside
    the week produces an equal (and equally hashed) key.
    """
    model_config = ConfigDict(frozen=True)

    classroom_id: str = Field(min_length=1, description="Classroom identifier")
    week_start: date = Field(description="Monday of the week")

    @field_validator("week_start", mode="before")
    @classmethod
    def parse_week_start(cls, value: Any) -> date:
        return monday_of(parse_week_date(value))

    @classmethod
    def for_date(cls, classroom_id: str, value: Union[str, date, datetime]) -> "WeekKey":
        """Key for the week containing value."""
        return cls(classroom_id=classroom_id, week_start=value)

    @classmethod
    def current(cls, classroom_id: str, today: Optional[date] = None) -> "WeekKey":
        """Key for the current week (or the week of `today`)."""
        return cls(classroom_id=classroom_id, week_start=today or date.today())

    def next(self) -> "WeekKey":
        return WeekKey(classroom_id=self.classroom_id, week_start=self.week_start + timedelta(days=7))

    def previous(self) -> "WeekKey":
        return WeekKey(classroom_id=self.classroom_id, week_start=self.week_start - timedelta(days=7))

    @property
    def week_end(self) -> date:
        """Sunday of the week."""
        return self.week_start + timedelta(days=6)

    def label(self) -> str:
        """Display range, e.g. 'Oct 12 - Oct 18, 2026'."""
        start, end = self.week_start, self.week_end
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"

    def __str__(self) -> str:
        return f"{self.classroom_id}@{self.week_start.isoformat()}"


class ClassroomContext(BaseModel):
    """Static classroom details supplied by the classroom directory."""
    model_config = ConfigDict(extra="ignore")

    classroom_id: str = Field(min_length=1, description="Classroom identifier")
    title: str = Field(default="", description="Class title")
    subject: str = Field(default="", description="Main subject taught")
    teacher_id: Optional[str] = Field(default=None, description="Owning teacher")


# =============================================================================
# Schedule Models
# =============================================================================

class ScheduleEntry(BaseModel):
    """
    One activity occupying a (day, time slot) pair.

    Field values are not checked against the slot catalog here; the
    validator owns every schedule invariant so that candidates coming from
    untrusted sources can be represented and reported on.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    time_slot: str = Field(alias="timeSlot", description="Catalog slot, e.g. '09:00-10:00'")
    type: str = Field(default=EntryType.CLASS.value, description="class, break or lunch")
    subject: str = Field(default="", description="Required for class entries")
    room: str = Field(default="", description="Free-text room")
    notes: str = Field(default="", description="Free-text notes")

    # Implied by the containing day list; not part of the wire format.
    day: Optional[str] = Field(default=None, exclude=True, description="Weekday name")

    @field_validator("type", mode="before")
    @classmethod
    def unwrap_enum(cls, value: Any) -> Any:
        if isinstance(value, EntryType):
            return value.value
        return value

    @property
    def is_class(self) -> bool:
        return self.type == EntryType.CLASS.value

    def to_dict(self) -> dict[str, str]:
        """Wire representation (camelCase, without the day)."""
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        label = self.subject if self.is_class else self.type
        where = f" @ {self.room}" if self.room else ""
        return f"{self.day or '?'} {self.time_slot}: {label}{where}"


class WeeklySchedule(BaseModel):
    """
    Mapping of weekday name to the entries scheduled that day.

    A schedule built through `empty()` or `from_dict()` always carries all
    seven day keys. Constructing one directly keeps whatever keys are given,
    so partial structures can still be handed to the validator.
    """
    model_config = ConfigDict(extra="forbid")

    days: dict[str, list[ScheduleEntry]] = Field(
        default_factory=lambda: {day: [] for day in DAY_NAMES},
        description="Entries per weekday",
    )

    @model_validator(mode="after")
    def stamp_entry_days(self) -> "WeeklySchedule":
        """Entries without an explicit day take the day they are listed under."""
        for day, entries in self.days.items():
            for entry in entries:
                if entry.day is None:
                    entry.day = day
        return self

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls) -> "WeeklySchedule":
        """The canonical all-empty schedule."""
        return cls(days={day: [] for day in DAY_NAMES})

    @classmethod
    def from_dict(cls, data: dict[str, Any], fill_missing: bool = True) -> "WeeklySchedule":
        """
        Build from a wire document ({"Monday": [...], ...}).

        Args:
            data: Day name to list of entry dicts
            fill_missing: Add empty lists for absent weekdays

        Raises:
            pydantic.ValidationError: If an entry is structurally malformed
        """
        days: dict[str, list[Any]] = {}
        for day, entries in data.items():
            days[day] = list(entries or [])
        if fill_missing:
            for day in DAY_NAMES:
                days.setdefault(day, [])
        return cls.model_validate({"days": days})

    def normalized(self) -> "WeeklySchedule":
        """Deep copy with every weekday key present."""
        copy = self.model_copy(deep=True)
        for day in DAY_NAMES:
            copy.days.setdefault(day, [])
        return copy

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Wire representation, weekdays in calendar order."""
        ordered = [d for d in DAY_NAMES if d in self.days]
        ordered += [d for d in self.days if d not in DAY_NAMES]
        return {day: [e.to_dict() for e in self.days[day]] for day in ordered}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def entries(self, day: str) -> list[ScheduleEntry]:
        """Entries for a day (empty if the day is absent)."""
        return self.days.get(day, [])

    def sorted_entries(self, day: str) -> list[ScheduleEntry]:
        """Entries for a day in catalog slot order."""
        return sorted(self.entries(day), key=lambda e: slot_index(e.time_slot))

    def entry_at(self, day: str, time_slot: str) -> Optional[ScheduleEntry]:
        """First entry occupying (day, time_slot), if any."""
        for entry in self.entries(day):
            if entry.time_slot == time_slot:
                return entry
        return None

    def iter_entries(self) -> Iterator[tuple[str, ScheduleEntry]]:
        """Yield (day, entry) pairs in calendar order."""
        for day in DAY_NAMES:
            for entry in self.entries(day):
                yield day, entry
        for day, entries in self.days.items():
            if day not in DAY_NAMES:
                for entry in entries:
                    yield day, entry

    @property
    def entry_count(self) -> int:
        return sum(len(entries) for entries in self.days.values())

    @property
    def is_empty(self) -> bool:
        return self.entry_count == 0

    @property
    def is_complete(self) -> bool:
        """All seven weekday keys are present."""
        return all(day in self.days for day in DAY_NAMES)

    def canonical(self) -> "WeeklySchedule":
        """Copy with entries sorted by slot, for order-independent comparison."""
        return WeeklySchedule(days={
            day: [e.model_copy() for e in self.sorted_entries(day)]
            for day in self.days
        })

    def equivalent(self, other: "WeeklySchedule") -> bool:
        """Same entries per day, ignoring storage order."""
        return self.canonical() == other.canonical()

    def summary(self) -> dict[str, int]:
        """Entry count per day."""
        return {day: len(self.entries(day)) for day in DAY_NAMES}


# =============================================================================
# Schedule Differences
# =============================================================================

@dataclass
class ScheduleDiff:
    """Slot-level differences between two schedules."""
    added: list[tuple[str, str]] = field(default_factory=list)
    removed: list[tuple[str, str]] = field(default_factory=list)
    changed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)

    @property
    def touched_days(self) -> set[str]:
        return {day for day, _ in self.added + self.removed + self.changed}

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "added": [f"{d} {s}" for d, s in self.added],
            "removed": [f"{d} {s}" for d, s in self.removed],
            "changed": [f"{d} {s}" for d, s in self.changed],
        }


def diff_schedules(before: WeeklySchedule, after: WeeklySchedule) -> ScheduleDiff:
    """
    Compare two schedules slot by slot.

    Both schedules are expected to satisfy slot uniqueness; if a slot is
    occupied twice, the first entry wins for comparison.
    """
    diff = ScheduleDiff()
    days = list(DAY_NAMES) + [d for d in {*before.days, *after.days} if d not in DAY_NAMES]

    for day in days:
        old = {}
        for entry in before.entries(day):
            old.setdefault(entry.time_slot, entry)
        new = {}
        for entry in after.entries(day):
            new.setdefault(entry.time_slot, entry)

        for slot in sorted(set(old) | set(new), key=slot_index):
            if slot not in old:
                diff.added.append((day, slot))
            elif slot not in new:
                diff.removed.append((day, slot))
            elif old[slot].to_dict() != new[slot].to_dict():
                diff.changed.append((day, slot))

    return diff
