"""Projection of a weekly prototype onto a concrete calendar week.

The materializer anchors the prototype at civil midnight of the Monday of the
week containing a reference instant and turns every declared record into an
absolute, closed interval.
"""

import logging
from datetime import datetime, time, timedelta, timezone

from protoschedule.domain.errors import EmptyScheduleError, ParseError
from protoschedule.domain.models import (
    PRECISION,
    MaterializedInterval,
    MaterializedWeek,
    WeekPrototype,
    Weekday,
)
from protoschedule.domain.parsing import parse_duration, parse_time_of_day

logger = logging.getLogger(__name__)

DAY = timedelta(hours=24)


def week_anchor(reference: datetime) -> datetime:
    """Return civil midnight of the Monday on or before ``reference``'s date.

    The tzinfo of ``reference`` (if any) is kept.
    """
    anchor = datetime.combine(reference.date(), time.min, tzinfo=reference.tzinfo)
    while anchor.weekday() != 0:
        anchor = datetime.combine(
            anchor.date() - timedelta(days=1), time.min, tzinfo=reference.tzinfo
        )
    return anchor


def add_elapsed(instant: datetime, delta: timedelta) -> datetime:
    """Add elapsed time to an instant.

    Aware instants are shifted in UTC, so across a DST change the wall clock
    reading moves by more or less than ``delta``. Naive instants are plain
    civil time.
    """
    if instant.tzinfo is None:
        return instant + delta
    return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)


class Materializer:
    """Builds MaterializedWeek instances from a prototype.

    Example:
        >>> materializer = Materializer()
        >>> week = materializer.materialize(prototype, datetime(2024, 1, 17, 9))
        >>> week.anchor
        datetime.datetime(2024, 1, 15, 0, 0)
    """

    def materialize(
        self,
        prototype: WeekPrototype,
        reference: datetime,
    ) -> MaterializedWeek:
        """Materialize the week containing ``reference``.

        Args:
            prototype: The decoded weekly definition.
            reference: Any instant in the target week.

        Returns:
            The sorted intervals and their span.

        Raises:
            ParseError: If a start or duration token is malformed, a
                duration is shorter than one second, or an interval falls
                outside the datetime range.
            EmptyScheduleError: If the prototype declares no intervals.
        """
        anchor = week_anchor(reference)
        working: list[MaterializedInterval] = []

        for day in Weekday:
            records = prototype.records_for(day)
            if not records:
                continue
            # day.offset whole 24h steps from Monday
            try:
                day_anchor = add_elapsed(anchor, day.offset * DAY)
            except OverflowError as exc:
                raise ParseError(
                    f"{day.value} of week {anchor.date()} is out of range",
                    day=day.value,
                ) from exc
            for index, record in enumerate(records):
                working.append(self._build_interval(day_anchor, day, index, record))

        if not working:
            raise EmptyScheduleError("schedule declares no intervals")

        # sorted() is stable, ties keep declaration order
        intervals = tuple(sorted(working, key=lambda v: v.start))
        week = MaterializedWeek(
            anchor=anchor,
            intervals=intervals,
            span_start=intervals[0].start,
            span_end=max(v.end for v in intervals),
        )
        logger.debug(
            "materialized %d intervals for week of %s, span %s -> %s",
            len(intervals),
            anchor.date(),
            week.span_start,
            week.span_end,
        )
        return week

    def _build_interval(self, day_anchor, day, index, record) -> MaterializedInterval:
        try:
            offset = parse_time_of_day(record.start)
            duration = parse_duration(record.duration)
        except ParseError as exc:
            exc.day = day.value
            exc.index = index
            raise
        if duration < PRECISION:
            raise ParseError(
                f"duration {record.duration!r} is shorter than one second",
                field="duration",
                value=record.duration,
                day=day.value,
                index=index,
            )
        try:
            start = add_elapsed(day_anchor, offset)
            end = add_elapsed(start, duration - PRECISION)
        except OverflowError as exc:
            raise ParseError(
                f"duration {record.duration!r} runs past the supported date range",
                field="duration",
                value=record.duration,
                day=day.value,
                index=index,
            ) from exc
        return MaterializedInterval(start=start, end=end, label=record.label)
