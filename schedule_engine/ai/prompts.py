"""Prompt construction for instruction-driven schedule edits."""

from __future__ import annotations

import json

from schedule_engine.data.catalog import all_days, all_slots, all_types
from schedule_engine.data.models import ClassroomContext, WeeklySchedule


SCHEDULE_EDIT_PROMPT = """You are an assistant that modifies a weekly class schedule based on a user request. PRESERVE every existing entry and only ADD, MODIFY or REMOVE the entries the request names.

CLASSROOM CONTEXT:
- Subject: {subject}
- Class Title: {title}
- Available Time Slots: {slots}
- Days: {days}

CURRENT SCHEDULE:
{current}

RULES:
1. Keep every existing entry exactly as it is unless the request asks to change or remove it.
2. "add" keeps existing entries and adds new ones.
3. "change" or "modify" changes only the entries mentioned.
4. "remove" or "delete" removes only the entries mentioned.
5. Never put two entries in the same time slot on the same day.
6. Use only the time slots listed above, exactly as written.
7. Valid types: {types}. Entries of type "class" must have a subject.
8. Use realistic room names (A101, Lab1, Library, ...).

REQUIRED JSON STRUCTURE (all seven days, empty lists for free days):
{example}

USER REQUEST: "{instruction}"

Return only the complete modified schedule as a single JSON object, with no commentary."""


_EXAMPLE = {
    "Monday": [
        {
            "timeSlot": "09:00-10:00",
            "type": "class",
            "subject": "Mathematics",
            "room": "A101",
            "notes": "Chapter 5 - Algebra",
        }
    ],
    **{day: [] for day in ("Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")},
}


def build_schedule_prompt(
    current: WeeklySchedule,
    instruction: str,
    context: ClassroomContext | None = None,
) -> str:
    """
    Render the generation request for an edit instruction.

    Args:
        current: Schedule the instruction applies to
        instruction: Free-text edit request
        context: Classroom title and subject, if known

    Returns:
        Prompt text
    """
    if current.is_empty:
        current_text = "Empty schedule"
    else:
        current_text = json.dumps(current.normalized().to_dict(), indent=2)

    return SCHEDULE_EDIT_PROMPT.format(
        subject=(context.subject if context and context.subject else "Not specified"),
        title=(context.title if context and context.title else "Not specified"),
        slots=", ".join(all_slots()),
        days=", ".join(all_days()),
        current=current_text,
        types=", ".join(f'"{t}"' for t in all_types()),
        example=json.dumps(_EXAMPLE, indent=2),
        instruction=instruction.replace('"', "'").strip(),
    )
