"""Violation records produced by the schedule validator."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from schedule_engine.data.catalog import day_index, slot_index


class ViolationKind(str, Enum):
    """Rule broken by a schedule."""
    MALFORMED_SCHEDULE = "malformed_schedule"
    UNKNOWN_DAY = "unknown_day"
    MISSING_DAY = "missing_day"
    MALFORMED_DAY = "malformed_day"
    MALFORMED_ENTRY = "malformed_entry"
    DAY_MISMATCH = "day_mismatch"
    UNKNOWN_SLOT = "unknown_slot"
    DUPLICATE_SLOT = "duplicate_slot"
    UNKNOWN_TYPE = "unknown_type"
    MISSING_SUBJECT = "missing_subject"


@dataclass(frozen=True)
class Violation:
    """A single broken invariant, located by day and slot where possible."""
    kind: ViolationKind
    message: str
    day: Optional[str] = None
    time_slot: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "day": self.day,
            "timeSlot": self.time_slot,
            "message": self.message,
        }

    def __str__(self) -> str:
        where = " ".join(p for p in (self.day, self.time_slot) if p)
        return f"{where}: {self.message}" if where else self.message


def _sort_key(v: Violation) -> tuple:
    return (
        day_index(v.day) if v.day else -1,
        v.day or "",
        slot_index(v.time_slot) if v.time_slot else -1,
        v.time_slot or "",
        v.kind.value,
        v.message,
    )


@dataclass
class ValidationResult:
    """
    Outcome of validating a schedule.

    Valid when there are no violations. Violations are kept in a canonical
    order so that entry-level permutations of a schedule compare equal.
    """
    violations: list[Violation] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.violations = sorted(self.violations, key=_sort_key)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def of_kind(self, kind: ViolationKind) -> list[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def has(self, kind: ViolationKind) -> bool:
        return any(v.kind == kind for v in self.violations)

    def summary(self) -> dict[str, int]:
        """Violation count per kind."""
        return dict(Counter(v.kind.value for v in self.violations))

    def messages(self) -> list[str]:
        return [str(v) for v in self.violations]
