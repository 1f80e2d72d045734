"""
Persistence backends for weekly schedules.

The store talks to persistence only through the ScheduleRepository
protocol: `load_schedule` returns None for a week that was never written,
which is how "not created yet" stays distinguishable from "cleared".
"""

from __future__ import annotations

import json
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol, Union

from schedule_engine.data.loader import schedule_from_document
from schedule_engine.data.models import WeekKey, WeeklySchedule
from schedule_engine.errors import RepositoryError, ScheduleValidationError
from schedule_engine.logging import get_logger

logger = get_logger(__name__)


class ScheduleRepository(Protocol):
    """Narrow persistence interface used by the schedule store."""

    def load_schedule(self, key: WeekKey) -> Optional[WeeklySchedule]:
        ...

    def save_schedule(self, key: WeekKey, schedule: WeeklySchedule) -> None:
        ...

    def exists(self, key: WeekKey) -> bool:
        ...


# =============================================================================
# In-Memory Backend
# =============================================================================

class InMemoryScheduleRepository:
    """Keeps schedule documents in a dict; used for tests and embedding."""

    def __init__(self):
        self._documents: dict[WeekKey, dict] = {}
        self._lock = threading.Lock()

    def load_schedule(self, key: WeekKey) -> Optional[WeeklySchedule]:
        with self._lock:
            document = self._documents.get(key)
        if document is None:
            return None
        return WeeklySchedule.from_dict(document)

    def save_schedule(self, key: WeekKey, schedule: WeeklySchedule) -> None:
        document = schedule.to_dict()
        with self._lock:
            self._documents[key] = document

    def exists(self, key: WeekKey) -> bool:
        with self._lock:
            return key in self._documents

    def keys(self) -> list[WeekKey]:
        with self._lock:
            return list(self._documents)


# =============================================================================
# JSON File Backend
# =============================================================================

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileScheduleRepository:
    """
    One JSON document per classroom and week.

    Layout: <root>/<classroom_id>/<YYYY-MM-DD>.json, where the date is the
    week's Monday. Documents are written to a temp file and renamed into
    place, so readers never see a partial write.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, key: WeekKey) -> Path:
        classroom_dir = _UNSAFE_CHARS.sub("_", key.classroom_id)
        if classroom_dir in (".", ".."):
            classroom_dir = classroom_dir.replace(".", "_")
        return self.root / classroom_dir / f"{key.week_start.isoformat()}.json"

    def exists(self, key: WeekKey) -> bool:
        return self.path_for(key).is_file()

    def load_schedule(self, key: WeekKey) -> Optional[WeeklySchedule]:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path) as f:
                document = json.load(f)
            return schedule_from_document(document, strict=False)
        except (OSError, json.JSONDecodeError, ScheduleValidationError) as e:
            logger.error("schedule_load_failed", path=str(path), error=str(e))
            raise RepositoryError(f"Cannot read schedule for {key}: {e}") from e

    def save_schedule(self, key: WeekKey, schedule: WeeklySchedule) -> None:
        path = self.path_for(key)
        document = {
            "classroomId": key.classroom_id,
            "weekStartDate": key.week_start.isoformat(),
            "weeklyData": schedule.to_dict(),
        }

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(document, f, indent=2)
                    f.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("schedule_save_failed", path=str(path), error=str(e))
            raise RepositoryError(f"Cannot write schedule for {key}: {e}") from e

        logger.debug("schedule_saved", path=str(path), entries=schedule.entry_count)

    def weeks(self, classroom_id: str) -> list[WeekKey]:
        """Stored weeks for a classroom, oldest first."""
        classroom_dir = self.path_for(WeekKey(classroom_id=classroom_id, week_start="2000-01-03")).parent
        if not classroom_dir.is_dir():
            return []
        keys = []
        for path in sorted(classroom_dir.glob("*.json")):
            try:
                keys.append(WeekKey(classroom_id=classroom_id, week_start=path.stem))
            except ValueError:
                continue
        return keys
