"""Load and save weekly schedule documents as JSON files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from schedule_engine.errors import ScheduleValidationError
from schedule_engine.validation import validate

from .models import WeeklySchedule


def load_schedule_file(path: Union[str, Path], strict: bool = True) -> WeeklySchedule:
    """
    Load a schedule document from a JSON file.

    Accepts either a bare day map or an envelope with a 'weeklyData' key
    (the shape stored by the web client). Missing weekdays are filled in.

    Args:
        path: Path to the JSON file
        strict: Run the validator and raise on violations

    Returns:
        The loaded schedule

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        ScheduleValidationError: If the document is malformed or, when
            strict, violates a schedule invariant
    """
    path = Path(path)

    with open(path) as f:
        data = json.load(f)

    return schedule_from_document(data, strict=strict)


def schedule_from_document(data: Any, strict: bool = True) -> WeeklySchedule:
    """Build a schedule from an already-decoded JSON document."""
    if isinstance(data, dict) and "weeklyData" in data:
        data = data["weeklyData"]

    if not isinstance(data, dict):
        raise ScheduleValidationError(["Schedule document must be a JSON object"])

    for day, entries in data.items():
        if entries is not None and not isinstance(entries, list):
            raise ScheduleValidationError([f"{day}: expected a list of entries"])

    converted = {
        day: [_convert_entry_keys(e) for e in (entries or [])]
        for day, entries in data.items()
    }

    try:
        schedule = WeeklySchedule.from_dict(converted)
    except ValidationError as e:
        raise ScheduleValidationError([str(err["msg"]) for err in e.errors()]) from e

    if strict:
        result = validate(schedule)
        if not result.is_valid:
            raise ScheduleValidationError([str(v) for v in result.violations])

    return schedule


def save_schedule_file(schedule: WeeklySchedule, path: Union[str, Path], indent: int = 2) -> None:
    """Write a schedule document as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(schedule.to_dict(), f, indent=indent)
        f.write("\n")


def _convert_entry_keys(entry: Any) -> Any:
    """Accept snake_case entry keys ('time_slot') alongside camelCase."""
    if not isinstance(entry, dict):
        return entry

    def to_camel_case(name: str) -> str:
        return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), name)

    return {to_camel_case(k): v for k, v in entry.items()}
