"""
Slot catalog: the fixed vocabulary of weekdays, time slots and entry types.

Time slots are contiguous one-hour ranges written as 'HH:MM-HH:MM'. The
catalog order is the display order; storage order is never meaningful.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Constants and Enums
# =============================================================================

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DAY_ABBREV = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

FIRST_SLOT_HOUR = 8
LAST_SLOT_HOUR = 18  # exclusive end of the last slot


class EntryType(str, Enum):
    """Kind of activity occupying a slot."""
    CLASS = "class"
    BREAK = "break"
    LUNCH = "lunch"


def _build_slots(first_hour: int, last_hour: int) -> tuple[str, ...]:
    return tuple(
        f"{h:02d}:00-{h + 1:02d}:00"
        for h in range(first_hour, last_hour)
    )


TIME_SLOTS = _build_slots(FIRST_SLOT_HOUR, LAST_SLOT_HOUR)
ENTRY_TYPES = tuple(t.value for t in EntryType)

_DAY_SET = frozenset(DAY_NAMES)
_SLOT_INDEX = {slot: i for i, slot in enumerate(TIME_SLOTS)}
_TYPE_SET = frozenset(ENTRY_TYPES)


# =============================================================================
# Membership Checks
# =============================================================================

def is_valid_day(value: Any) -> bool:
    """True if value is one of the seven canonical weekday names."""
    return isinstance(value, str) and value in _DAY_SET


def is_valid_slot(value: Any) -> bool:
    """True if value is a canonical time slot string."""
    return isinstance(value, str) and value in _SLOT_INDEX


def is_valid_type(value: Any) -> bool:
    """True if value is a recognized entry type."""
    if isinstance(value, EntryType):
        return True
    return isinstance(value, str) and value in _TYPE_SET


def all_days() -> tuple[str, ...]:
    """Weekday names, Monday first."""
    return DAY_NAMES


def all_slots() -> tuple[str, ...]:
    """Canonical slot strings in display order."""
    return TIME_SLOTS


def all_types() -> tuple[str, ...]:
    return ENTRY_TYPES


def slot_index(slot: str) -> int:
    """
    Position of a slot in display order.

    Unknown slots sort after every catalog slot.
    """
    return _SLOT_INDEX.get(slot, len(TIME_SLOTS))


def day_index(day: str) -> int:
    """Position of a day in the week (Monday=0); unknown days sort last."""
    try:
        return DAY_NAMES.index(day)
    except ValueError:
        return len(DAY_NAMES)
