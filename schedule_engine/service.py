"""
ScheduleService: the mutation API consumed by the web layer.

Composes the store, the entry editor, the week operator and the merge
adapter. Acting identity (classroom, teacher) is always passed in; nothing
is read from ambient state.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Union

from schedule_engine.ai import AIMergeAdapter, GenerationService, MergeStatus, VertexGenerationService
from schedule_engine.config import EngineSettings, get_settings
from schedule_engine.data.models import ClassroomContext, ScheduleEntry, WeekKey, WeeklySchedule
from schedule_engine.editing import EntryEditor, WeekOperator
from schedule_engine.editing.week_operations import WeekDate
from schedule_engine.errors import ClassroomNotFoundError
from schedule_engine.logging import get_logger
from schedule_engine.results import OperationResult, OperationStatus
from schedule_engine.store import ScheduleStore

logger = get_logger(__name__)


# =============================================================================
# Classroom Directory
# =============================================================================

class ClassroomDirectory(Protocol):
    """Lookup of classroom details owned by the wider portal."""

    def lookup_classroom(self, classroom_id: str) -> Optional[ClassroomContext]:
        ...

    def is_enrolled(self, classroom_id: str, student_id: str) -> bool:
        ...


class StaticClassroomDirectory:
    """Directory backed by a fixed list of classrooms."""

    def __init__(
        self,
        classrooms: list[ClassroomContext] | None = None,
        enrollments: dict[str, set[str]] | None = None,
    ):
        self._classrooms = {c.classroom_id: c for c in classrooms or []}
        self._enrollments = {cid: set(students) for cid, students in (enrollments or {}).items()}

    def add(self, classroom: ClassroomContext) -> None:
        self._classrooms[classroom.classroom_id] = classroom

    def enroll(self, classroom_id: str, student_id: str) -> None:
        self._enrollments.setdefault(classroom_id, set()).add(student_id)

    def lookup_classroom(self, classroom_id: str) -> Optional[ClassroomContext]:
        return self._classrooms.get(classroom_id)

    def is_enrolled(self, classroom_id: str, student_id: str) -> bool:
        return student_id in self._enrollments.get(classroom_id, ())


# =============================================================================
# Service
# =============================================================================

class ScheduleService:
    """
    Entry point for every schedule read and mutation.

    When a directory is configured and a teacher id is passed, mutations
    first check that the teacher owns the classroom.
    """

    def __init__(
        self,
        store: ScheduleStore,
        generator: GenerationService | None = None,
        directory: ClassroomDirectory | None = None,
        settings: EngineSettings | None = None,
    ):
        """
        Initialize the service.

        Args:
            store: Schedule store (the only write path)
            generator: Generation service (Vertex AI from settings if None)
            directory: Classroom directory for context and ownership checks
            settings: Engine settings (process settings if None)
        """
        self.settings = settings or get_settings()
        self.store = store
        self.directory = directory
        self.editor = EntryEditor(store)
        self.weeks = WeekOperator(store)
        self.adapter = AIMergeAdapter(
            generator or VertexGenerationService.from_settings(self.settings),
            validator=store.validator,
            timeout_seconds=self.settings.generation_timeout_seconds,
            failure_fallback=self.settings.generation_failure_fallback,
        )

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def lookup_classroom(self, classroom_id: str) -> Optional[ClassroomContext]:
        if self.directory is None:
            return None
        return self.directory.lookup_classroom(classroom_id)

    def authorize(self, classroom_id: str, teacher_id: Optional[str]) -> None:
        """
        Check that teacher_id owns the classroom.

        Skipped when no directory is configured or no teacher id is given.

        Raises:
            ClassroomNotFoundError: Unknown classroom or not owned by teacher_id
        """
        if self.directory is None or teacher_id is None:
            return
        classroom = self.directory.lookup_classroom(classroom_id)
        if classroom is None or (classroom.teacher_id and classroom.teacher_id != teacher_id):
            logger.warning("classroom_access_denied", classroom_id=classroom_id, teacher_id=teacher_id)
            raise ClassroomNotFoundError(f"Classroom {classroom_id!r} not found or unauthorized")

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def authorize_reader(self, classroom_id: str, student_id: Optional[str]) -> None:
        """
        Check that student_id is enrolled in the classroom.

        Skipped when no directory is configured or no student id is given.

        Raises:
            ClassroomNotFoundError: Unknown classroom or student not enrolled
        """
        if self.directory is None or student_id is None:
            return
        if (
            self.directory.lookup_classroom(classroom_id) is None
            or not self.directory.is_enrolled(classroom_id, student_id)
        ):
            logger.warning("classroom_read_denied", classroom_id=classroom_id, student_id=student_id)
            raise ClassroomNotFoundError(f"Classroom {classroom_id!r} not found or not enrolled")

    def get(self, key: WeekKey, student_id: Optional[str] = None) -> WeeklySchedule:
        """Schedule for a week; students must be enrolled in the classroom."""
        self.authorize_reader(key.classroom_id, student_id)
        return self.store.get(key)

    def refresh(self, key: WeekKey) -> WeeklySchedule:
        return self.store.refresh(key)

    def exists(self, key: WeekKey) -> bool:
        return self.store.exists(key)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def replace(
        self,
        key: WeekKey,
        candidate: Union[WeeklySchedule, Mapping[str, Any]],
        teacher_id: Optional[str] = None,
        expected_revision: Optional[int] = None,
    ) -> OperationResult:
        self.authorize(key.classroom_id, teacher_id)
        return self.store.replace(key, candidate, expected_revision=expected_revision)

    def clear(self, key: WeekKey, teacher_id: Optional[str] = None) -> OperationResult:
        self.authorize(key.classroom_id, teacher_id)
        return self.weeks.clear_week(key)

    def add_or_update(
        self,
        key: WeekKey,
        entry: ScheduleEntry,
        teacher_id: Optional[str] = None,
    ) -> OperationResult:
        self.authorize(key.classroom_id, teacher_id)
        return self.editor.add_or_update(key, entry)

    def edit(
        self,
        key: WeekKey,
        day: str,
        time_slot: str,
        entry: ScheduleEntry,
        teacher_id: Optional[str] = None,
    ) -> OperationResult:
        self.authorize(key.classroom_id, teacher_id)
        return self.editor.edit(key, day, time_slot, entry)

    def remove(
        self,
        key: WeekKey,
        day: str,
        time_slot: str,
        teacher_id: Optional[str] = None,
    ) -> OperationResult:
        self.authorize(key.classroom_id, teacher_id)
        return self.editor.remove(key, day, time_slot)

    def copy_week(
        self,
        classroom_id: str,
        from_week: WeekDate,
        to_week: WeekDate,
        teacher_id: Optional[str] = None,
        require_source: bool = False,
    ) -> OperationResult:
        self.authorize(classroom_id, teacher_id)
        return self.weeks.copy_week(classroom_id, from_week, to_week, require_source=require_source)

    async def generate_and_merge(
        self,
        key: WeekKey,
        instruction: str,
        classroom_context: ClassroomContext | None = None,
        teacher_id: Optional[str] = None,
        timeout: float | None = None,
    ) -> OperationResult:
        """
        Apply a natural-language instruction to a week.

        The candidate is written with the revision read before the
        generation call, so an edit that lands while the service is working
        turns this write into CONFLICT instead of being overwritten.

        Returns:
            APPLIED, REJECTED (invariants failed, store untouched),
            GENERATION_FAILED (no usable response, store untouched) or CONFLICT
        """
        self.authorize(key.classroom_id, teacher_id)

        context = (
            classroom_context
            or self.lookup_classroom(key.classroom_id)
            or ClassroomContext(classroom_id=key.classroom_id)
        )
        revision = self.store.revision(key)
        current = self.store.get(key)

        outcome = await self.adapter.propose(current, instruction, context, timeout=timeout)

        if not outcome.accepted:
            status = (
                OperationStatus.REJECTED
                if outcome.status == MergeStatus.REJECTED
                else OperationStatus.GENERATION_FAILED
            )
            return OperationResult(
                status=status,
                schedule=outcome.schedule,
                violations=outcome.violations,
                error=outcome.error,
                dropped=outcome.dropped,
                revision=revision,
            )

        result = self.store.replace(key, outcome.schedule, expected_revision=revision)
        result.dropped = outcome.dropped
        result.diff = outcome.diff
        logger.info(
            "instruction_merged",
            week=str(key),
            status=result.status.value,
            dropped=len(outcome.dropped),
        )
        return result
