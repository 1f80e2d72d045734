"""Per-entry checks against the slot catalog."""

from __future__ import annotations

from typing import Any, Mapping

from schedule_engine.data.catalog import EntryType, is_valid_slot, is_valid_type

from .structure import iter_day_entries
from .violations import Violation, ViolationKind


def check_time_slots(days: Mapping[Any, Any]) -> list[Violation]:
    """Every entry's slot must be a catalog slot."""
    violations: list[Violation] = []

    for view in iter_day_entries(days):
        if not is_valid_slot(view.time_slot):
            violations.append(Violation(
                ViolationKind.UNKNOWN_SLOT,
                f"Entry {view.describe()} has unknown time slot {view.time_slot!r}",
                day=view.day,
            ))

    return violations


def check_entry_types(days: Mapping[Any, Any]) -> list[Violation]:
    """Every entry's type must be class, break or lunch."""
    violations: list[Violation] = []

    for view in iter_day_entries(days):
        if not is_valid_type(view.type):
            slot = view.time_slot if is_valid_slot(view.time_slot) else None
            violations.append(Violation(
                ViolationKind.UNKNOWN_TYPE,
                f"Unknown entry type {view.type!r}",
                day=view.day,
                time_slot=slot,
            ))

    return violations


def check_class_subjects(days: Mapping[Any, Any]) -> list[Violation]:
    """Class entries need a non-blank subject; other types may leave it empty."""
    violations: list[Violation] = []

    for view in iter_day_entries(days):
        if view.type != EntryType.CLASS.value:
            continue
        subject = view.subject
        if not isinstance(subject, str) or not subject.strip():
            slot = view.time_slot if is_valid_slot(view.time_slot) else None
            violations.append(Violation(
                ViolationKind.MISSING_SUBJECT,
                "Class entry requires a subject",
                day=view.day,
                time_slot=slot,
            ))

    return violations
