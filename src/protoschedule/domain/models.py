"""Domain models for weekly prototype schedules.

This module contains the core data structures: the day-keyed prototype as
decoded from a definition, and the absolute intervals produced when that
prototype is projected onto a concrete calendar week.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterator, Optional

# Time unit subtracted from every interval end; intervals are closed at
# second precision.
PRECISION = timedelta(seconds=1)


class Weekday(Enum):
    """Days of the prototype week, Monday first."""

    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"

    @property
    def offset(self) -> int:
        """Days after Monday (0 for Monday, 6 for Sunday)."""
        return list(Weekday).index(self)

    @classmethod
    def from_date(cls, value: datetime) -> "Weekday":
        return list(cls)[value.weekday()]


@dataclass(frozen=True)
class IntervalRecord:
    """One declared interval of the prototype, as raw tokens.

    Attributes:
        start: Military clock string, e.g. "0800".
        duration: Duration expression, e.g. "8h" or "1h30m".
        label: Free-form name used to tell overlapping intervals apart.
    """

    start: str
    duration: str
    label: str = ""


@dataclass(frozen=True)
class WeekPrototype:
    """The recurring weekly definition, keyed by day.

    Every weekday is present in ``days``; days omitted from the source
    definition hold an empty tuple.
    """

    description: str = ""
    days: dict[Weekday, tuple[IntervalRecord, ...]] = field(default_factory=dict)

    def __post_init__(self):
        days = {day: tuple(self.days.get(day, ())) for day in Weekday}
        object.__setattr__(self, "days", days)

    def records_for(self, day: Weekday) -> tuple[IntervalRecord, ...]:
        return self.days.get(day, ())

    def iter_records(self) -> Iterator[tuple[Weekday, int, IntervalRecord]]:
        """Yield (day, index, record) Monday to Sunday in declaration order."""
        for day in Weekday:
            for index, record in enumerate(self.records_for(day)):
                yield day, index, record

    @property
    def interval_count(self) -> int:
        return sum(len(records) for records in self.days.values())


def _same_second(a: datetime, b: datetime) -> bool:
    return a.replace(microsecond=0) == b.replace(microsecond=0)


@dataclass(frozen=True)
class MaterializedInterval:
    """A labeled, closed time range anchored to a calendar week.

    Attributes:
        start: First instant covered.
        end: Last instant covered (start + duration - 1 second).
        label: Label copied from the prototype record.
    """

    start: datetime
    end: datetime
    label: str = ""

    @property
    def duration(self) -> timedelta:
        """Declared duration (end is inclusive, so add back one unit)."""
        return self.end - self.start + PRECISION

    def contains(self, t: datetime) -> bool:
        """Check if ``t`` lies within [start, end] at second precision.

        A sub-second component of ``t`` never pushes it out of a boundary
        second.
        """
        after_start = t > self.start or _same_second(t, self.start)
        before_end = t < self.end or _same_second(t, self.end)
        return after_start and before_end

    def __str__(self) -> str:
        return f"{self.label}: {self.start} ---> {self.end}"


@dataclass(frozen=True)
class MaterializedWeek:
    """One calendar week's worth of absolute intervals.

    Attributes:
        anchor: Civil midnight of the Monday the week was built from.
        intervals: Intervals sorted ascending by start (stable for ties).
        span_start: Earliest start over ``intervals``.
        span_end: Latest end over ``intervals``.
    """

    anchor: datetime
    intervals: tuple[MaterializedInterval, ...]
    span_start: datetime
    span_end: datetime

    def covers(self, t: datetime) -> bool:
        """Check if ``t`` lies inside the span, i.e. the cache is fresh for it."""
        return not (t > self.span_end or t < self.span_start)

    def matching(self, t: datetime) -> list[MaterializedInterval]:
        return [v for v in self.intervals if v.contains(t)]

    def first_match(self, t: datetime) -> Optional[MaterializedInterval]:
        for v in self.intervals:
            if v.contains(t):
                return v
        return None

    def __len__(self) -> int:
        return len(self.intervals)
