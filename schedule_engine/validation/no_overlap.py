"""
Slot uniqueness: a (day, time slot) pair holds at most one entry.

Only catalog slots are considered; entries with unknown slots are already
reported by the entry checks.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Mapping

from schedule_engine.data.catalog import is_valid_slot

from .structure import EntryView, iter_day_entries
from .violations import Violation, ViolationKind


def find_slot_occupants(days: Mapping[Any, Any]) -> dict[tuple[str, str], list[EntryView]]:
    """Group entries by (day, slot)."""
    occupants: dict[tuple[str, str], list[EntryView]] = defaultdict(list)
    for view in iter_day_entries(days):
        if is_valid_slot(view.time_slot):
            occupants[(view.day, view.time_slot)].append(view)
    return occupants


def check_slot_uniqueness(days: Mapping[Any, Any]) -> list[Violation]:
    """One violation per over-occupied slot."""
    violations: list[Violation] = []

    for (day, slot), views in find_slot_occupants(days).items():
        if len(views) <= 1:
            continue
        described = sorted(v.describe() for v in views)
        violations.append(Violation(
            ViolationKind.DUPLICATE_SLOT,
            f"{len(views)} entries share this slot: {', '.join(described)}",
            day=day,
            time_slot=slot,
        ))

    return violations
