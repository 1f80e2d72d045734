"""
The schedule store: the single validated write path for weekly schedules.

Every mutation in the engine ends in `ScheduleStore.replace`, which
validates the candidate and swaps it in atomically. Readers get deep copies
of immutable snapshots and never take the write lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from schedule_engine.data.catalog import DAY_NAMES
from schedule_engine.data.models import WeekKey, WeeklySchedule
from schedule_engine.logging import get_logger
from schedule_engine.results import OperationResult, OperationStatus
from schedule_engine.validation import (
    ScheduleValidator,
    Violation,
    ViolationKind,
)

from .repository import InMemoryScheduleRepository, ScheduleRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """Stored schedule plus the store's revision counter for it."""
    schedule: Optional[WeeklySchedule]
    revision: int


class ScheduleStore:
    """
    Owns the canonical WeeklySchedule for each WeekKey.

    Revisions count successful writes made through this store instance and
    serve as optimistic-concurrency tokens: a caller that read revision N
    may pass `expected_revision=N` to `replace` and gets CONFLICT if another
    write landed in between. Without a token the last write wins.

    Usage:
        store = ScheduleStore(JsonFileScheduleRepository("data/schedules"))
        key = WeekKey.for_date("cls-1", "2026-10-14")
        schedule = store.get(key)
        result = store.replace(key, candidate)
    """

    def __init__(
        self,
        repository: ScheduleRepository | None = None,
        validator: ScheduleValidator | None = None,
    ):
        """
        Initialize the store.

        Args:
            repository: Persistence backend (in-memory if None)
            validator: Validator run before every write (default rules if None)
        """
        self.repository = repository if repository is not None else InMemoryScheduleRepository()
        self.validator = validator or ScheduleValidator()
        self._write_lock = threading.RLock()
        self._snapshots: dict[WeekKey, _Snapshot] = {}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _snapshot(self, key: WeekKey) -> _Snapshot:
        snapshot = self._snapshots.get(key)
        if snapshot is None:
            loaded = self.repository.load_schedule(key)
            if loaded is not None:
                loaded = loaded.normalized()
            # A concurrent writer may have populated the entry meanwhile; keep theirs.
            snapshot = self._snapshots.setdefault(key, _Snapshot(loaded, 0))
        return snapshot

    def get(self, key: WeekKey) -> WeeklySchedule:
        """
        Current schedule for a week.

        Returns the canonical all-empty schedule if the week has never been
        written; never returns None.
        """
        snapshot = self._snapshot(key)
        if snapshot.schedule is None:
            return WeeklySchedule.empty()
        return snapshot.schedule.model_copy(deep=True)

    def exists(self, key: WeekKey) -> bool:
        """Whether the week has been written (a cleared week still exists)."""
        return self._snapshot(key).schedule is not None

    def revision(self, key: WeekKey) -> int:
        """Number of writes to this key through this store (0 = none yet)."""
        return self._snapshot(key).revision

    def refresh(self, key: WeekKey) -> WeeklySchedule:
        """Drop the cached snapshot and re-read the week from the repository."""
        with self._write_lock:
            previous = self._snapshots.pop(key, None)
            loaded = self.repository.load_schedule(key)
            if loaded is not None:
                loaded = loaded.normalized()
            revision = previous.revision if previous else 0
            self._snapshots[key] = _Snapshot(loaded, revision)
        return self.get(key)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def replace(
        self,
        key: WeekKey,
        candidate: Union[WeeklySchedule, Mapping[str, Any]],
        expected_revision: Optional[int] = None,
    ) -> OperationResult:
        """
        Validate a candidate and, if valid, make it the week's schedule.

        Missing weekday keys are filled with empty lists before validation.
        On rejection the stored schedule is untouched and the result carries
        the current schedule plus the violations.

        Args:
            key: Week to write
            candidate: WeeklySchedule or wire document
            expected_revision: Optimistic-concurrency token from `revision()`

        Returns:
            OperationResult with status APPLIED, REJECTED or CONFLICT
        """
        prepared, violations = self._prepare(candidate)

        with self._write_lock:
            current = self._snapshot(key)

            if expected_revision is not None and expected_revision != current.revision:
                logger.warning(
                    "schedule_write_conflict",
                    week=str(key),
                    expected_revision=expected_revision,
                    current_revision=current.revision,
                )
                return OperationResult(
                    status=OperationStatus.CONFLICT,
                    schedule=self.get(key),
                    error=(
                        f"Schedule changed since revision {expected_revision} "
                        f"(now {current.revision})"
                    ),
                    revision=current.revision,
                )

            if prepared is not None and not violations:
                violations = self.validator.validate(prepared).violations

            if violations:
                logger.info(
                    "schedule_rejected",
                    week=str(key),
                    violations=len(violations),
                    first=str(violations[0]),
                )
                return OperationResult(
                    status=OperationStatus.REJECTED,
                    schedule=self.get(key),
                    violations=violations,
                    error="Schedule violates one or more invariants",
                    revision=current.revision,
                )

            self.repository.save_schedule(key, prepared)
            revision = current.revision + 1
            self._snapshots[key] = _Snapshot(prepared, revision)

        logger.info(
            "schedule_replaced",
            week=str(key),
            entries=prepared.entry_count,
            revision=revision,
        )
        return OperationResult(
            status=OperationStatus.APPLIED,
            schedule=prepared.model_copy(deep=True),
            revision=revision,
        )

    def clear(self, key: WeekKey) -> WeeklySchedule:
        """Empty all seven days. The empty schedule is always valid."""
        result = self.replace(key, WeeklySchedule.empty())
        return result.schedule

    def _prepare(
        self, candidate: Union[WeeklySchedule, Mapping[str, Any]]
    ) -> tuple[Optional[WeeklySchedule], list[Violation]]:
        """Private, day-complete copy of a candidate, or the reasons it can't be built."""
        if isinstance(candidate, WeeklySchedule):
            return candidate.normalized(), []

        if not isinstance(candidate, Mapping):
            return None, self.validator.validate(candidate).violations

        document = dict(candidate)
        for day in DAY_NAMES:
            document.setdefault(day, [])

        violations = self.validator.validate(document).violations
        if violations:
            return None, violations

        try:
            return WeeklySchedule.from_dict(document), []
        except ValidationError as e:
            return None, [
                Violation(ViolationKind.MALFORMED_ENTRY, f"{'.'.join(map(str, err['loc']))}: {err['msg']}")
                for err in e.errors()
            ]
