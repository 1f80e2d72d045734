"""
Instruction-driven schedule merge.

The adapter turns (current schedule, free-text instruction) into a
validated candidate by way of the external generation service:

1. Render the prompt (current schedule, instruction, slot catalog).
2. Call the service under a timeout.
3. Extract one JSON object from the response text.
4. Coerce each weekday, dropping entries with unknown slots or types.
5. Validate the seven-day candidate; reject it whole if any invariant fails.

The adapter never writes to the store. Failures hand back a fallback
schedule that is safe to show but must not be mistaken for a result.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from schedule_engine.config import FailureFallback
from schedule_engine.data.models import (
    ClassroomContext,
    ScheduleDiff,
    WeeklySchedule,
    diff_schedules,
)
from schedule_engine.errors import GenerationError, ResponseParseError
from schedule_engine.logging import get_logger
from schedule_engine.results import DroppedEntry
from schedule_engine.validation import ScheduleValidator, Violation

from .client import GenerationService
from .decode import coerce_schedule, extract_json_object
from .prompts import build_schedule_prompt

logger = get_logger(__name__)


class MergeStatus(str, Enum):
    """Outcome of one merge attempt."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    GENERATION_FAILED = "generation_failed"
    PARSE_FAILED = "parse_failed"


@dataclass
class MergeOutcome:
    """
    Result of proposing an instruction-driven edit.

    `schedule` is the validated candidate when ACCEPTED, the unchanged
    current schedule when REJECTED, and the configured fallback otherwise.
    """
    status: MergeStatus
    schedule: WeeklySchedule
    violations: list[Violation] = field(default_factory=list)
    dropped: list[DroppedEntry] = field(default_factory=list)
    preserved_days: list[str] = field(default_factory=list)
    diff: Optional[ScheduleDiff] = None
    error: Optional[str] = None
    raw_text: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status == MergeStatus.ACCEPTED

    @property
    def is_generation_failure(self) -> bool:
        return self.status in (MergeStatus.GENERATION_FAILED, MergeStatus.PARSE_FAILED)


class AIMergeAdapter:
    """
    Proposes schedule edits from natural-language instructions.

    Usage:
        adapter = AIMergeAdapter(VertexGenerationService("gemini-2.0-flash"))
        outcome = await adapter.propose(current, "add Physics Friday 10:00-11:00")
        if outcome.accepted:
            store.replace(key, outcome.schedule)
    """

    def __init__(
        self,
        service: GenerationService,
        validator: ScheduleValidator | None = None,
        timeout_seconds: float = 30.0,
        failure_fallback: FailureFallback = FailureFallback.CURRENT,
    ):
        """
        Initialize the adapter.

        Args:
            service: Generation service client
            validator: Validator for candidates (default rules if None)
            timeout_seconds: Default per-call timeout
            failure_fallback: Schedule handed back on generation/parse failure
        """
        self.service = service
        self.validator = validator or ScheduleValidator()
        self.timeout_seconds = timeout_seconds
        self.failure_fallback = FailureFallback(failure_fallback)

    def _fallback(self, current: WeeklySchedule) -> WeeklySchedule:
        if self.failure_fallback == FailureFallback.EMPTY:
            return WeeklySchedule.empty()
        return current.model_copy(deep=True)

    async def _generate(self, prompt: str, timeout: float) -> str:
        try:
            text = await asyncio.wait_for(self.service.generate(prompt), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Generation timed out after {timeout:g}s") from e
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Generation service call failed: {e!r}") from e

        if not isinstance(text, str) or not text.strip():
            raise GenerationError("Generation service returned no text")
        return text

    async def propose(
        self,
        current: WeeklySchedule,
        instruction: str,
        context: ClassroomContext | None = None,
        timeout: float | None = None,
    ) -> MergeOutcome:
        """
        Ask the service to apply an instruction and validate its answer.

        Args:
            current: Schedule the instruction applies to
            instruction: Free-text edit request
            context: Classroom details for the prompt
            timeout: Seconds before the call is abandoned (default from init)

        Returns:
            MergeOutcome; only ACCEPTED outcomes may be written to the store

        Raises:
            ValueError: If the instruction is blank
        """
        if not instruction or not instruction.strip():
            raise ValueError("Instruction is required")

        current = current.normalized()
        timeout = timeout if timeout is not None else self.timeout_seconds
        prompt = build_schedule_prompt(current, instruction, context)

        try:
            text = await self._generate(prompt, timeout)
        except GenerationError as e:
            logger.warning("generation_failed", error=str(e))
            return MergeOutcome(
                status=MergeStatus.GENERATION_FAILED,
                schedule=self._fallback(current),
                error=str(e),
            )

        try:
            decoded = coerce_schedule(extract_json_object(text), current)
        except ResponseParseError as e:
            logger.warning("generation_unparseable", error=str(e), response_chars=len(text))
            return MergeOutcome(
                status=MergeStatus.PARSE_FAILED,
                schedule=self._fallback(current),
                error=str(e),
                raw_text=text,
            )

        result = self.validator.validate(decoded.schedule)

        if not result.is_valid:
            logger.info(
                "merge_rejected",
                violations=len(result.violations),
                first=str(result.violations[0]),
                dropped=len(decoded.dropped),
            )
            return MergeOutcome(
                status=MergeStatus.REJECTED,
                schedule=current.model_copy(deep=True),
                violations=result.violations,
                dropped=decoded.dropped,
                preserved_days=decoded.preserved_days,
                error="Generated schedule violates one or more invariants",
                raw_text=text,
            )

        diff = diff_schedules(current, decoded.schedule)
        logger.info(
            "merge_accepted",
            added=len(diff.added),
            removed=len(diff.removed),
            changed=len(diff.changed),
            dropped=len(decoded.dropped),
        )
        return MergeOutcome(
            status=MergeStatus.ACCEPTED,
            schedule=decoded.schedule,
            dropped=decoded.dropped,
            preserved_days=decoded.preserved_days,
            diff=diff,
            raw_text=text,
        )
