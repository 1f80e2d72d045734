"""
Command-line interface for the schedule engine.

Usage:
    python -m schedule_engine show cls-1 --week 2026-10-12
    python -m schedule_engine add cls-1 Monday 09:00-10:00 --subject Mathematics --room A101
    python -m schedule_engine remove cls-1 Monday 09:00-10:00
    python -m schedule_engine copy-week cls-1 2026-10-12 2026-10-19
    python -m schedule_engine clear-week cls-1 --week 2026-10-19
    python -m schedule_engine generate cls-1 "add Physics on Friday 10:00-11:00"
    python -m schedule_engine validate schedule.json
"""

from __future__ import annotations

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .ai import GenerationService, VertexGenerationService
from .config import EngineSettings, get_settings
from .data.catalog import EntryType, all_slots
from .data.loader import load_schedule_file
from .data.models import ClassroomContext, ScheduleEntry, WeekKey
from .errors import ScheduleValidationError
from .logging import setup_logging
from .output.formatters import ConsoleFormatter, CSVFormatter, JSONFormatter
from .results import OperationResult, OperationStatus
from .service import ScheduleService
from .store import JsonFileScheduleRepository, ScheduleStore

# Create Typer app
app = typer.Typer(
    name="schedule-engine",
    help="Weekly classroom schedule engine.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()


class OutputFormat(str, Enum):
    GRID = "grid"
    PLAIN = "plain"
    JSON = "json"
    CSV = "csv"


# =============================================================================
# Helper Functions
# =============================================================================

def build_generator(settings: EngineSettings) -> GenerationService:
    """Generation service used by the `generate` command."""
    return VertexGenerationService.from_settings(settings)


def open_service(store_dir: Optional[Path]) -> ScheduleService:
    """Service over the JSON file repository."""
    settings = get_settings()
    root = store_dir or Path(settings.store_dir)
    store = ScheduleStore(JsonFileScheduleRepository(root))
    return ScheduleService(store, generator=build_generator(settings), settings=settings)


def week_key(classroom_id: str, week: Optional[str]) -> WeekKey:
    """Key for the week containing `week` (today if None)."""
    try:
        if week is None:
            return WeekKey.current(classroom_id)
        return WeekKey.for_date(classroom_id, week)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid week '{week}': {e}")
        raise typer.Exit(code=1)


def print_result(result: OperationResult) -> None:
    """Print an operation's status and diagnostics."""
    colors = {
        OperationStatus.APPLIED: "green",
        OperationStatus.UNCHANGED: "cyan",
    }
    color = colors.get(result.status, "red")
    subtitle = f"revision {result.revision}" if result.revision is not None else None
    console.print(Panel(
        Text(result.status.value.upper(), style=f"bold {color}"),
        title="Result",
        subtitle=subtitle,
    ))

    if result.error and not result.ok:
        console.print(f"[red]{result.error}[/red]")

    if result.violations:
        table = Table(title="Violations", header_style="bold red")
        table.add_column("Day")
        table.add_column("Slot")
        table.add_column("Rule")
        table.add_column("Message")
        for v in result.violations:
            table.add_row(v.day or "-", v.time_slot or "-", v.kind.value, v.message)
        console.print(table)

    if result.dropped:
        console.print(f"[yellow]Dropped {len(result.dropped)} generated entries:[/yellow]")
        for d in result.dropped:
            console.print(f"  - {d}")

    if result.diff is not None and not result.diff.is_empty:
        for label, items in result.diff.to_dict().items():
            if items:
                console.print(f"[bold]{label.capitalize()}:[/bold] {', '.join(items)}")


def finish(result: OperationResult) -> None:
    print_result(result)
    if not result.ok:
        raise typer.Exit(code=1)


StoreOption = typer.Option(
    None,
    "--store", "-s",
    help="Schedule repository directory (default: SCHEDULE_STORE_DIR)",
)
WeekOption = typer.Option(
    None,
    "--week", "-w",
    help="Any date in the week, YYYY-MM-DD (default: this week)",
)


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Weekly classroom schedule engine."""
    settings = get_settings()
    setup_logging(
        json_output=settings.log_json,
        log_level="DEBUG" if verbose else settings.log_level,
    )


@app.command()
def show(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    week: Optional[str] = WeekOption,
    fmt: OutputFormat = typer.Option(
        OutputFormat.GRID,
        "--format", "-f",
        help="Output format",
    ),
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """
    Display a classroom's schedule for one week.

    Example:
        python -m schedule_engine show cls-1 --week 2026-10-12 --format csv
    """
    service = open_service(store_dir)
    key = week_key(classroom, week)
    schedule = service.get(key)

    if fmt == OutputFormat.JSON:
        typer.echo(JSONFormatter().format(schedule, key))
    elif fmt == OutputFormat.CSV:
        typer.echo(CSVFormatter().format(schedule), nl=False)
    elif fmt == OutputFormat.PLAIN:
        typer.echo(ConsoleFormatter(use_colors=False).format(schedule, key))
    else:
        console.print(ConsoleFormatter().build_table(schedule, key))
        if not service.exists(key):
            console.print("[dim]No schedule created for this week yet.[/dim]")


@app.command()
def validate(
    schedule_file: Path = typer.Argument(
        ...,
        help="Path to a schedule JSON document",
    ),
) -> None:
    """
    Validate a schedule document against every schedule rule.

    Example:
        python -m schedule_engine validate schedule.json
    """
    console.print(f"\n[bold]Validating:[/bold] {schedule_file}\n")

    if not schedule_file.exists():
        console.print(f"[red]Error:[/red] File not found: {schedule_file}")
        raise typer.Exit(code=1)

    try:
        schedule = load_schedule_file(schedule_file)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/red] {e}")
        raise typer.Exit(code=1)
    except ScheduleValidationError as e:
        console.print("[red]Schedule validation failed:[/red]")
        for message in e.messages:
            console.print(f"  - {message}")
        raise typer.Exit(code=1)

    table = Table(title="Entries per day", show_header=False, box=None)
    table.add_column("Day", style="cyan")
    table.add_column("Entries", style="white")
    for day, count in schedule.summary().items():
        table.add_row(day, str(count))
    console.print(table)

    console.print("\n[green]Schedule is valid.[/green]\n")


@app.command()
def add(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    day: str = typer.Argument(..., help="Weekday name, e.g. Monday"),
    time_slot: str = typer.Argument(..., help=f"Time slot, one of {', '.join(all_slots())}"),
    entry_type: EntryType = typer.Option(EntryType.CLASS, "--type", "-t", help="Entry type"),
    subject: str = typer.Option("", "--subject", help="Subject (required for classes)"),
    room: str = typer.Option("", "--room", help="Room"),
    notes: str = typer.Option("", "--notes", help="Notes"),
    week: Optional[str] = WeekOption,
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """
    Add an entry, replacing whatever occupies the same slot.

    Example:
        python -m schedule_engine add cls-1 Monday 09:00-10:00 --subject Mathematics --room A101
    """
    service = open_service(store_dir)
    entry = ScheduleEntry(
        day=day.strip().capitalize(),
        time_slot=time_slot.strip(),
        type=entry_type.value,
        subject=subject,
        room=room,
        notes=notes,
    )
    finish(service.add_or_update(week_key(classroom, week), entry))


@app.command()
def remove(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    day: str = typer.Argument(..., help="Weekday name"),
    time_slot: str = typer.Argument(..., help="Time slot"),
    week: Optional[str] = WeekOption,
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """Remove the entry at a slot (no-op if the slot is free)."""
    service = open_service(store_dir)
    finish(service.remove(week_key(classroom, week), day.strip().capitalize(), time_slot.strip()))


@app.command("copy-week")
def copy_week(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    source: str = typer.Argument(..., help="Any date in the week to copy from"),
    target: str = typer.Argument(..., help="Any date in the week to copy to"),
    require_source: bool = typer.Option(
        False,
        "--require-source",
        help="Fail if the source week was never created",
    ),
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """
    Overwrite one week with another week's schedule.

    Example:
        python -m schedule_engine copy-week cls-1 2026-10-12 2026-10-19
    """
    service = open_service(store_dir)
    source_key = week_key(classroom, source)
    target_key = week_key(classroom, target)
    finish(service.copy_week(
        classroom,
        source_key.week_start,
        target_key.week_start,
        require_source=require_source,
    ))


@app.command("clear-week")
def clear_week(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    week: Optional[str] = WeekOption,
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """Remove every entry from a week."""
    service = open_service(store_dir)
    finish(service.clear(week_key(classroom, week)))


@app.command()
def generate(
    classroom: str = typer.Argument(..., help="Classroom ID"),
    instruction: str = typer.Argument(..., help="What to change, in plain words"),
    week: Optional[str] = WeekOption,
    title: str = typer.Option("", "--title", help="Class title for context"),
    subject: str = typer.Option("", "--subject", help="Class subject for context"),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout", "-t",
        help="Seconds to wait for the generation service",
        min=1,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the proposed schedule without saving it",
    ),
    store_dir: Optional[Path] = StoreOption,
) -> None:
    """
    Edit a week from a natural-language instruction.

    Example:
        python -m schedule_engine generate cls-1 "move Monday's Mathematics to 11:00-12:00"
    """
    if not instruction.strip():
        console.print("[red]Error:[/red] Instruction is required")
        raise typer.Exit(code=1)

    service = open_service(store_dir)
    key = week_key(classroom, week)
    context = ClassroomContext(classroom_id=classroom, title=title, subject=subject)

    if dry_run:
        outcome = asyncio.run(service.adapter.propose(service.get(key), instruction, context, timeout=timeout))
        console.print(ConsoleFormatter().build_table(outcome.schedule, key))
        result = OperationResult(
            status=OperationStatus.UNCHANGED if outcome.accepted else OperationStatus.REJECTED,
            schedule=outcome.schedule,
            violations=outcome.violations,
            error=outcome.error,
            dropped=outcome.dropped,
            diff=outcome.diff,
        )
        if outcome.is_generation_failure:
            result.status = OperationStatus.GENERATION_FAILED
        finish(result)
        return

    with console.status("Generating schedule..."):
        result = asyncio.run(service.generate_and_merge(key, instruction, context, timeout=timeout))

    if result.ok:
        console.print(ConsoleFormatter().build_table(result.schedule, key))
    finish(result)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
