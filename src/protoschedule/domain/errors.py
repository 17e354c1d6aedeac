"""Exceptions raised while decoding, materializing and querying schedules."""

from typing import Optional


class ProtoscheduleError(Exception):
    """Base class for all protoschedule errors."""


class DecodeError(ProtoscheduleError):
    """Raw definition text is not well-formed or has the wrong shape."""


class ParseError(ProtoscheduleError):
    """A start or duration token failed format validation.

    Attributes:
        field: Name of the offending field ("start" or "duration").
        value: The raw token that failed to parse.
        day: Day key of the record ("mon".."sun"), when known.
        index: Position of the record within its day, when known.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[str] = None,
        day: Optional[str] = None,
        index: Optional[int] = None,
    ):
        super().__init__(message)
        self.field = field
        self.value = value
        self.day = day
        self.index = index

    def __str__(self) -> str:
        msg = super().__str__()
        if self.day is not None and self.index is not None:
            return f"{self.day}[{self.index}]: {msg}"
        return msg


class EmptyScheduleError(ParseError):
    """The definition yields no intervals, so no span can be computed."""


class StaleScheduleError(ProtoscheduleError):
    """A schedule whose refresh failed was queried; build a new one."""
