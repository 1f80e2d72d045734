"""Natural-language schedule edits through an external generation service."""

from .client import GenerationService, VertexGenerationService, message_text
from .decode import (
    DecodedSchedule,
    coerce_entry,
    coerce_schedule,
    extract_json_object,
    iter_brace_spans,
)
from .merge_adapter import AIMergeAdapter, MergeOutcome, MergeStatus
from .prompts import build_schedule_prompt

__all__ = [
    # Client
    "GenerationService",
    "VertexGenerationService",
    "message_text",
    # Decoding
    "DecodedSchedule",
    "coerce_entry",
    "coerce_schedule",
    "extract_json_object",
    "iter_brace_spans",
    # Merge
    "AIMergeAdapter",
    "MergeOutcome",
    "MergeStatus",
    # Prompt
    "build_schedule_prompt",
]
