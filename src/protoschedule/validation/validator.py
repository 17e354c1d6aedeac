"""Validation of schedule definitions.

Materialization stops at the first bad token. The validator walks the whole
prototype instead and reports every problem, which is what a user editing a
definition file wants to see.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Optional

from protoschedule.domain.errors import ParseError
from protoschedule.domain.models import PRECISION, WeekPrototype
from protoschedule.domain.parsing import parse_duration, parse_time_of_day


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_START = "invalid_start"
    INVALID_DURATION = "invalid_duration"
    DURATION_TOO_SHORT = "duration_too_short"
    EMPTY_SCHEDULE = "empty_schedule"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    day: Optional[str] = None
    index: Optional[int] = None
    label: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.day is not None:
            parts.append(f"{self.day}[{self.index}]:")
        parts.append(self.message)
        if self.label:
            parts.append(f"(label {self.label!r})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a prototype."""

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class ScheduleValidator:
    """Validates a prototype before it is materialized.

    Example:
        >>> result = ScheduleValidator().validate(prototype)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(self, prototype: WeekPrototype) -> ValidationResult:
        result = ValidationResult()

        if prototype.interval_count == 0:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.EMPTY_SCHEDULE,
                message="schedule declares no intervals",
            ))
            return result

        for day, index, record in prototype.iter_records():
            offset = self._check_start(result, day.value, index, record)
            duration = self._check_duration(result, day.value, index, record)
            if offset is None or duration is None:
                continue
            if offset + duration > timedelta(hours=24):
                result.add_warning(
                    f"{day.value}[{index}] {record.label!r} runs past midnight "
                    f"into the next day"
                )

        return result

    def _check_start(self, result, day, index, record) -> Optional[timedelta]:
        try:
            return parse_time_of_day(record.start)
        except ParseError as exc:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.INVALID_START,
                message=str(exc),
                day=day,
                index=index,
                label=record.label,
            ))
            return None

    def _check_duration(self, result, day, index, record) -> Optional[timedelta]:
        try:
            duration = parse_duration(record.duration)
        except ParseError as exc:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.INVALID_DURATION,
                message=str(exc),
                day=day,
                index=index,
                label=record.label,
            ))
            return None
        if duration < PRECISION:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.DURATION_TOO_SHORT,
                message=f"duration {record.duration!r} is shorter than one second",
                day=day,
                index=index,
                label=record.label,
            ))
            return None
        return duration
