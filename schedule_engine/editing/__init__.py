"""Interactive and bulk schedule editing."""

from .entry_editor import EntryEditor, place_entry, remove_slot
from .week_operations import WeekOperator

__all__ = [
    "EntryEditor",
    "place_entry",
    "remove_slot",
    "WeekOperator",
]
