"""Validation module for checking schedule definitions."""

from protoschedule.validation.validator import ScheduleValidator, ValidationError

__all__ = [
    "ScheduleValidator",
    "ValidationError",
]
