"""Schedule storage: the validated write gate and its persistence backends."""

from .repository import (
    ScheduleRepository,
    InMemoryScheduleRepository,
    JsonFileScheduleRepository,
)
from .schedule_store import ScheduleStore

__all__ = [
    "ScheduleRepository",
    "InMemoryScheduleRepository",
    "JsonFileScheduleRepository",
    "ScheduleStore",
]
