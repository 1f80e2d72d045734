"""Schedule data model and slot catalog."""

from .catalog import (
    DAY_NAMES,
    TIME_SLOTS,
    ENTRY_TYPES,
    EntryType,
    is_valid_day,
    is_valid_slot,
    is_valid_type,
    all_days,
    all_slots,
    all_types,
    slot_index,
)
from .models import (
    WeekKey,
    ClassroomContext,
    ScheduleEntry,
    WeeklySchedule,
    ScheduleDiff,
    diff_schedules,
    monday_of,
)

__all__ = [
    # Catalog
    "DAY_NAMES",
    "TIME_SLOTS",
    "ENTRY_TYPES",
    "EntryType",
    "is_valid_day",
    "is_valid_slot",
    "is_valid_type",
    "all_days",
    "all_slots",
    "all_types",
    "slot_index",
    # Models
    "WeekKey",
    "ClassroomContext",
    "ScheduleEntry",
    "WeeklySchedule",
    "ScheduleDiff",
    "diff_schedules",
    "monday_of",
]
