"""Bulk week operations: copy one week over another, clear a week."""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

from schedule_engine.data.models import WeekKey
from schedule_engine.logging import get_logger
from schedule_engine.results import OperationResult, OperationStatus
from schedule_engine.store import ScheduleStore

logger = get_logger(__name__)

WeekDate = Union[str, date, datetime]


class WeekOperator:
    """
    Copy and clear whole weeks of one classroom.

    Copies are classroom-scoped by construction: both weeks are keyed by the
    same classroom id.
    """

    def __init__(self, store: ScheduleStore):
        self.store = store

    def copy_week(
        self,
        classroom_id: str,
        source_week: WeekDate,
        target_week: WeekDate,
        require_source: bool = False,
    ) -> OperationResult:
        """
        Overwrite the target week with the source week's entries.

        The target's previous entries are discarded, not merged. Any date
        inside a week identifies that week.

        Args:
            classroom_id: Classroom whose weeks are copied
            source_week: Date within the week to copy from
            target_week: Date within the week to copy to
            require_source: Return NOT_FOUND if the source week was never created

        Returns:
            UNCHANGED when source and target are the same week; NOT_FOUND per
            `require_source`; otherwise the result of the store write
        """
        source = WeekKey.for_date(classroom_id, source_week)
        target = WeekKey.for_date(classroom_id, target_week)

        if source == target:
            return OperationResult(
                status=OperationStatus.UNCHANGED,
                schedule=self.store.get(target),
                revision=self.store.revision(target),
            )

        if require_source and not self.store.exists(source):
            return OperationResult(
                status=OperationStatus.NOT_FOUND,
                schedule=self.store.get(target),
                error=f"No schedule for week of {source.week_start.isoformat()}",
            )

        result = self.store.replace(target, self.store.get(source))
        logger.info(
            "week_copied",
            classroom_id=classroom_id,
            source=source.week_start.isoformat(),
            target=target.week_start.isoformat(),
            status=result.status.value,
        )
        return result

    def clear_week(self, key: WeekKey) -> OperationResult:
        """Empty every day of a week. Always succeeds."""
        schedule = self.store.clear(key)
        logger.info("week_cleared", week=str(key))
        return OperationResult(
            status=OperationStatus.APPLIED,
            schedule=schedule,
            revision=self.store.revision(key),
        )
