"""
Decoding of generation-service output into a candidate schedule.

The response text is untrusted. Decoding extracts one JSON object from it,
then coerces each weekday's entries field by field. Entries that fail the
per-entry checks are dropped and reported; they never fail the whole
response. A response with no weekday entry list at all is a parse failure.
Slot uniqueness is left to the validator.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from schedule_engine.data.catalog import DAY_NAMES, is_valid_slot, is_valid_type
from schedule_engine.data.models import ScheduleEntry, WeeklySchedule
from schedule_engine.errors import ResponseParseError
from schedule_engine.logging import get_logger
from schedule_engine.results import DroppedEntry

logger = get_logger(__name__)


# =============================================================================
# JSON Extraction
# =============================================================================

def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index just past the brace that closes text[start], or None if unbalanced."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1

    return None


def iter_brace_spans(text: str) -> Iterator[str]:
    """
    Top-level balanced {...} spans, left to right.

    Spans nested inside a yielded span are not yielded on their own. An
    opening brace that never closes ends the scan.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is None:
            return
        yield text[start:end]
        start = text.find("{", end)


def extract_json_object(text: str) -> dict[str, Any]:
    """
    First balanced {...} span in text that decodes to a JSON object.

    Handles prose around the JSON, markdown code fences and braces inside
    string values. A span that fails to decode is skipped and scanning
    resumes after it. A truncated object is never mistaken for one of the
    objects nested inside it.

    Raises:
        ResponseParseError: If no span decodes to an object
    """
    if not isinstance(text, str) or not text.strip():
        raise ResponseParseError("Empty response")

    for span in iter_brace_spans(text):
        try:
            value = json.loads(span)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value

    raise ResponseParseError("No JSON object found in response")


# =============================================================================
# Entry Coercion
# =============================================================================

def _text(value: Any) -> str:
    """Coerce a free-text field; missing or non-scalar values become ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def coerce_entry(day: str, raw: Any) -> tuple[Optional[ScheduleEntry], Optional[str]]:
    """
    Turn one raw entry into a ScheduleEntry.

    Returns:
        (entry, None) on success, (None, reason) if the entry is dropped
    """
    if not isinstance(raw, dict):
        return None, "entry is not an object"

    slot = raw.get("timeSlot", raw.get("time_slot"))
    if isinstance(slot, str):
        slot = slot.strip()
    if not is_valid_slot(slot):
        return None, f"unknown time slot {slot!r}"

    entry_type = raw.get("type")
    if isinstance(entry_type, str):
        entry_type = entry_type.strip().lower()
    if not is_valid_type(entry_type):
        return None, f"unknown type {entry_type!r}"

    entry = ScheduleEntry(
        time_slot=slot,
        type=entry_type,
        subject=_text(raw.get("subject")),
        room=_text(raw.get("room")),
        notes=_text(raw.get("notes")),
        day=day,
    )
    return entry, None


@dataclass
class DecodedSchedule:
    """Candidate schedule built from a generation response."""
    schedule: WeeklySchedule
    dropped: list[DroppedEntry] = field(default_factory=list)
    preserved_days: list[str] = field(default_factory=list)
    ignored_keys: list[str] = field(default_factory=list)


def _day_lookup(data: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Map canonical day names to response values, matching case-insensitively."""
    by_folded = {d.lower(): d for d in DAY_NAMES}
    found: dict[str, Any] = {}
    ignored: list[str] = []

    for key, value in data.items():
        canonical = by_folded.get(key.strip().lower()) if isinstance(key, str) else None
        if canonical is None:
            ignored.append(str(key))
        elif canonical not in found or key == canonical:
            found[canonical] = value

    return found, ignored


def coerce_schedule(data: dict[str, Any], current: WeeklySchedule) -> DecodedSchedule:
    """
    Build a seven-day candidate from a decoded response.

    A weekday the response leaves out (or gives a non-list value) keeps its
    entries from `current`; the instruction did not touch it. A weekday given
    as a list is taken from the response, minus dropped entries.

    Args:
        data: Decoded JSON object from the response
        current: Schedule the instruction was applied to

    Returns:
        DecodedSchedule with the candidate and what was dropped or preserved

    Raises:
        ResponseParseError: If no weekday key carries a list of entries
    """
    days, ignored = _day_lookup(data)
    if not any(isinstance(v, list) for v in days.values()):
        raise ResponseParseError(
            f"Response has no weekday entry lists (keys: {sorted(str(k) for k in data)})"
        )
    result_days: dict[str, list[ScheduleEntry]] = {}
    dropped: list[DroppedEntry] = []
    preserved: list[str] = []

    for day in DAY_NAMES:
        raw_entries = days.get(day)
        if not isinstance(raw_entries, list):
            result_days[day] = [e.model_copy() for e in current.entries(day)]
            preserved.append(day)
            continue

        kept: list[ScheduleEntry] = []
        for raw in raw_entries:
            entry, reason = coerce_entry(day, raw)
            if entry is None:
                dropped.append(DroppedEntry(day=day, raw=raw, reason=reason))
                logger.info("entry_dropped", day=day, reason=reason)
                continue
            kept.append(entry)
        result_days[day] = kept

    if ignored:
        logger.info("response_keys_ignored", keys=ignored)

    return DecodedSchedule(
        schedule=WeeklySchedule(days=result_days),
        dropped=dropped,
        preserved_days=preserved,
        ignored_keys=ignored,
    )
