"""
Output formatters for weekly schedules.

This module provides formatters for different output formats:
- JSON: The wire document ({"Monday": [...], ...})
- CSV: One row per entry, for spreadsheets
- Console: Slot-by-day grid for the CLI
"""

from __future__ import annotations

import csv
import json
import sys
from io import StringIO
from typing import TextIO

from rich.console import Console
from rich.table import Table

from schedule_engine.data.catalog import DAY_ABBREV, DAY_NAMES, all_slots
from schedule_engine.data.models import ScheduleEntry, WeekKey, WeeklySchedule


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter:
    """Formats a schedule as its wire document."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def format(self, schedule: WeeklySchedule, key: WeekKey | None = None) -> str:
        """
        Format schedule as JSON string.

        Args:
            schedule: Schedule to format
            key: If given, wrap in an envelope with classroom and week

        Returns:
            JSON string
        """
        data: dict = schedule.normalized().to_dict()
        if key is not None:
            data = {
                "classroomId": key.classroom_id,
                "weekStartDate": key.week_start.isoformat(),
                "weeklyData": data,
            }
        return json.dumps(data, indent=self.indent, ensure_ascii=self.ensure_ascii)


def format_json(schedule: WeeklySchedule, indent: int = 2) -> str:
    """Convenience function for JSON formatting."""
    return JSONFormatter(indent=indent).format(schedule)


# =============================================================================
# CSV Formatter
# =============================================================================

class CSVFormatter:
    """Formats a schedule as CSV, days in calendar order and slots in catalog order."""

    DEFAULT_COLUMNS = ["day", "time_slot", "type", "subject", "room", "notes"]

    def __init__(
        self,
        columns: list[str] | None = None,
        include_header: bool = True,
        delimiter: str = ",",
    ):
        self.columns = columns or self.DEFAULT_COLUMNS
        self.include_header = include_header
        self.delimiter = delimiter

    def format(self, schedule: WeeklySchedule) -> str:
        buffer = StringIO()
        self.write(schedule, buffer)
        return buffer.getvalue()

    def write(self, schedule: WeeklySchedule, file: TextIO) -> None:
        """Write CSV rows to a file-like object."""
        writer = csv.writer(file, delimiter=self.delimiter, lineterminator="\n")

        if self.include_header:
            writer.writerow(self.columns)

        for day in DAY_NAMES:
            for entry in schedule.sorted_entries(day):
                writer.writerow(self._entry_to_row(day, entry))

    def _entry_to_row(self, day: str, entry: ScheduleEntry) -> list[str]:
        field_map = {
            "day": day,
            "time_slot": entry.time_slot,
            "type": entry.type,
            "subject": entry.subject,
            "room": entry.room,
            "notes": entry.notes,
        }
        return [field_map.get(col, "") for col in self.columns]


def format_csv(schedule: WeeklySchedule, columns: list[str] | None = None) -> str:
    """Convenience function for CSV formatting."""
    return CSVFormatter(columns=columns).format(schedule)


# =============================================================================
# Console Formatter
# =============================================================================

def _cell_text(entry: ScheduleEntry | None) -> str:
    if entry is None:
        return "-"
    if entry.is_class:
        return f"{entry.subject}\n{entry.room}" if entry.room else entry.subject
    return entry.type.capitalize()


class ConsoleFormatter:
    """Formats a schedule as a slot-by-day grid."""

    def __init__(self, use_colors: bool = True, width: int | None = None, days: list[str] | None = None):
        """
        Initialize console formatter.

        Args:
            use_colors: Render a rich table (plain text otherwise)
            width: Console width (None = auto-detect)
            days: Days to show (all seven if None)
        """
        self.use_colors = use_colors
        self.width = width
        self.days = days or list(DAY_NAMES)

    def format(self, schedule: WeeklySchedule, key: WeekKey | None = None) -> str:
        if self.use_colors:
            console = Console(record=True, width=self.width or 120, file=StringIO())
            self._print_rich(schedule, key, console)
            return console.export_text()
        return self._format_plain(schedule, key)

    def print(self, schedule: WeeklySchedule, key: WeekKey | None = None, file: TextIO | None = None) -> None:
        file = file or sys.stdout
        if self.use_colors:
            self._print_rich(schedule, key, Console(file=file, width=self.width))
        else:
            file.write(self._format_plain(schedule, key))
            file.write("\n")

    def build_table(self, schedule: WeeklySchedule, key: WeekKey | None = None) -> Table:
        title = f"Week of {key.label()}" if key else "Weekly Schedule"
        table = Table(title=title, show_header=True, header_style="bold cyan", show_lines=True)
        table.add_column("Time", style="dim", no_wrap=True)
        for day in self.days:
            table.add_column(DAY_ABBREV[DAY_NAMES.index(day)], justify="center")

        for slot in all_slots():
            row = [slot]
            for day in self.days:
                row.append(_cell_text(schedule.entry_at(day, slot)))
            table.add_row(*row)

        return table

    def _print_rich(self, schedule: WeeklySchedule, key: WeekKey | None, console: Console) -> None:
        console.print(self.build_table(schedule, key))
        if schedule.is_empty:
            console.print("[dim]No entries scheduled this week.[/dim]")

    def _format_plain(self, schedule: WeeklySchedule, key: WeekKey | None) -> str:
        lines = []
        lines.append("=" * 60)
        lines.append(f"SCHEDULE - Week of {key.label()}" if key else "SCHEDULE")
        lines.append("=" * 60)

        for day in self.days:
            entries = schedule.sorted_entries(day)
            lines.append(f"--- {day} ---")
            if not entries:
                lines.append("  (free)")
            for entry in entries:
                label = entry.subject if entry.is_class else entry.type.capitalize()
                room = f" | Room: {entry.room}" if entry.room else ""
                notes = f" | {entry.notes}" if entry.notes else ""
                lines.append(f"  {entry.time_slot}: {label}{room}{notes}")

        return "\n".join(lines)


def format_console(schedule: WeeklySchedule, key: WeekKey | None = None, use_colors: bool = True) -> str:
    """Convenience function for console formatting."""
    return ConsoleFormatter(use_colors=use_colors).format(schedule, key)
