"""
Operation results shared by every schedule mutation path.

Mutations never signal expected failures with exceptions; they return an
OperationResult carrying the status, the resulting (or fallback) schedule
and whatever diagnostics explain the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from schedule_engine.data.models import ScheduleDiff, WeeklySchedule
from schedule_engine.validation import Violation


class OperationStatus(str, Enum):
    """Outcome of a schedule operation."""
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    GENERATION_FAILED = "generation_failed"


@dataclass(frozen=True)
class DroppedEntry:
    """An entry from a generated schedule that failed per-entry checks."""
    day: str
    raw: Any
    reason: str

    def __str__(self) -> str:
        return f"{self.day}: {self.reason} ({self.raw!r})"


@dataclass
class OperationResult:
    """Result of a schedule operation."""
    status: OperationStatus
    schedule: WeeklySchedule
    violations: list[Violation] = field(default_factory=list)
    error: Optional[str] = None
    dropped: list[DroppedEntry] = field(default_factory=list)
    diff: Optional[ScheduleDiff] = None
    revision: Optional[int] = None

    @property
    def ok(self) -> bool:
        """The store now holds `schedule` (or already did)."""
        return self.status in (OperationStatus.APPLIED, OperationStatus.UNCHANGED)

    @property
    def is_validation_failure(self) -> bool:
        return self.status == OperationStatus.REJECTED

    @property
    def is_generation_failure(self) -> bool:
        return self.status == OperationStatus.GENERATION_FAILED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "schedule": self.schedule.to_dict(),
        }
        if self.violations:
            data["violations"] = [v.to_dict() for v in self.violations]
        if self.error:
            data["error"] = self.error
        if self.dropped:
            data["dropped"] = [
                {"day": d.day, "reason": d.reason, "entry": d.raw}
                for d in self.dropped
            ]
        if self.diff is not None:
            data["changes"] = self.diff.to_dict()
        if self.revision is not None:
            data["revision"] = self.revision
        return data
