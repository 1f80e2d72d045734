"""
Schedule validation.

This package contains one module per group of schedule invariants. The
ScheduleValidator runs them all and collects violations; validation is
pure, never mutates its input and never raises for malformed input.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .violations import Violation, ViolationKind, ValidationResult

from .structure import (
    as_day_map,
    check_schedule_shape,
    check_day_keys,
    check_day_lists,
    check_declared_days,
    iter_day_entries,
)

from .entries import (
    check_time_slots,
    check_entry_types,
    check_class_subjects,
)

from .no_overlap import (
    find_slot_occupants,
    check_slot_uniqueness,
)


Rule = Callable[[Mapping[Any, Any]], list[Violation]]


# =============================================================================
# Validator
# =============================================================================

class ScheduleValidator:
    """
    Runs every schedule rule over a candidate.

    Accepts a WeeklySchedule or a raw wire document ({"Monday": [...]}),
    so untrusted input can be checked before it is turned into models.

    Usage:
        result = ScheduleValidator().validate(schedule)
        if not result.is_valid:
            for violation in result.violations:
                print(violation)
    """

    DEFAULT_RULES: tuple[Rule, ...] = (
        check_day_keys,
        check_day_lists,
        check_declared_days,
        check_time_slots,
        check_entry_types,
        check_class_subjects,
        check_slot_uniqueness,
    )

    def __init__(self, rules: tuple[Rule, ...] | None = None):
        """
        Initialize the validator.

        Args:
            rules: Rule functions to run (uses DEFAULT_RULES if None)
        """
        self.rules = rules if rules is not None else self.DEFAULT_RULES

    def validate(self, schedule: Any) -> ValidationResult:
        """
        Check a schedule against every rule.

        Args:
            schedule: WeeklySchedule or day-name mapping

        Returns:
            ValidationResult; valid when no rule reports a violation
        """
        shape = check_schedule_shape(schedule)
        if shape:
            return ValidationResult(shape)

        days = as_day_map(schedule)
        violations: list[Violation] = []
        for rule in self.rules:
            violations.extend(rule(days))

        return ValidationResult(violations)


_default_validator = ScheduleValidator()


def validate(schedule: Any) -> ValidationResult:
    """Validate with the default rule set."""
    return _default_validator.validate(schedule)


__all__ = [
    # Results
    "Violation",
    "ViolationKind",
    "ValidationResult",
    # Structure
    "as_day_map",
    "check_schedule_shape",
    "check_day_keys",
    "check_day_lists",
    "check_declared_days",
    "iter_day_entries",
    # Entries
    "check_time_slots",
    "check_entry_types",
    "check_class_subjects",
    # Slot uniqueness
    "find_slot_occupants",
    "check_slot_uniqueness",
    # Validator
    "ScheduleValidator",
    "validate",
]
