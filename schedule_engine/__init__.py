"""Weekly classroom schedule engine with validated, instruction-driven edits."""

from .data.catalog import EntryType, all_days, all_slots, all_types
from .data.models import ClassroomContext, ScheduleEntry, WeekKey, WeeklySchedule
from .validation import ScheduleValidator, ValidationResult, Violation, ViolationKind, validate
from .results import DroppedEntry, OperationResult, OperationStatus
from .store import InMemoryScheduleRepository, JsonFileScheduleRepository, ScheduleStore
from .editing import EntryEditor, WeekOperator
from .ai import AIMergeAdapter, GenerationService, MergeOutcome, MergeStatus
from .service import ClassroomDirectory, ScheduleService, StaticClassroomDirectory

__all__ = [
    # Catalog and models
    "EntryType",
    "all_days",
    "all_slots",
    "all_types",
    "ClassroomContext",
    "ScheduleEntry",
    "WeekKey",
    "WeeklySchedule",
    # Validation
    "ScheduleValidator",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "validate",
    # Results
    "DroppedEntry",
    "OperationResult",
    "OperationStatus",
    # Store
    "InMemoryScheduleRepository",
    "JsonFileScheduleRepository",
    "ScheduleStore",
    # Editing
    "EntryEditor",
    "WeekOperator",
    # AI merge
    "AIMergeAdapter",
    "GenerationService",
    "MergeOutcome",
    "MergeStatus",
    # Service
    "ClassroomDirectory",
    "ScheduleService",
    "StaticClassroomDirectory",
]
