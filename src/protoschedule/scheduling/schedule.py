"""Public schedule interface.

This module provides the Schedule class that ties together decoding,
materialization and queries, plus the ``new`` and ``new_from_time``
constructors.
"""

from datetime import datetime, tzinfo
from typing import Optional, Union

from protoschedule.domain.decoding import decode_definition
from protoschedule.domain.models import MaterializedInterval, WeekPrototype
from protoschedule.scheduling.materializer import Materializer
from protoschedule.scheduling.query import (
    IntervalQueryEngine,
    RefreshResult,
    ScheduleConfig,
    WeekCache,
)


class Schedule:
    """A weekly prototype schedule with one materialized week cached.

    Naive datetimes are treated as local civil time. Aware datetimes keep
    their tzinfo; do not mix the two on one schedule.

    Example:
        >>> schedule = new_from_time(definition_json, datetime(2024, 1, 15))
        >>> schedule.within(datetime(2024, 1, 16, 10, 15))
        True
        >>> [v.label for v in schedule.matching_intervals(datetime(2024, 1, 16, 10, 15))]
        ['day-shift']
    """

    def __init__(
        self,
        prototype: WeekPrototype,
        reference: datetime,
        config: Optional[ScheduleConfig] = None,
        materializer: Optional[Materializer] = None,
    ):
        """Materialize ``prototype`` for the week containing ``reference``.

        Raises:
            ParseError: If a start or duration token is malformed.
            EmptyScheduleError: If the prototype declares no intervals.
        """
        self.prototype = prototype
        self.config = config or ScheduleConfig()
        self._cache = WeekCache(prototype, materializer)
        self._cache.load(reference)
        self._engine = IntervalQueryEngine(self._cache, self.config)

    @property
    def description(self) -> str:
        return self.prototype.description

    @property
    def intervals(self) -> tuple[MaterializedInterval, ...]:
        return self._cache.week.intervals

    @property
    def span_start(self) -> datetime:
        return self._cache.week.span_start

    @property
    def span_end(self) -> datetime:
        return self._cache.week.span_end

    @property
    def anchor(self) -> datetime:
        """Monday midnight of the cached week."""
        return self._cache.week.anchor

    @property
    def needs_reconstruction(self) -> bool:
        """True once a refresh has failed; every query then raises."""
        return self._cache.needs_reconstruction

    def within(self, t: datetime) -> bool:
        """Check if ``t`` is covered, re-materializing if ``t`` is off-week."""
        return self._engine.within(t)

    def matching_intervals(self, t: datetime) -> list[MaterializedInterval]:
        """Return all intervals containing ``t``.

        Reads the cached week only unless ``config.refresh_on_match`` is set;
        call ``within`` or ``refresh`` first to move to another week.
        """
        return self._engine.matching_intervals(t)

    def refresh(self, t: datetime) -> RefreshResult:
        """Re-materialize around ``t`` if it is outside the cached span."""
        return self._cache.refresh_if_stale(t)

    def __len__(self) -> int:
        return len(self._cache.week)

    def __str__(self) -> str:
        from protoschedule.output.debug_generator import DebugGenerator

        return DebugGenerator().generate_to_string(self)


def new_from_time(
    definition: Union[str, bytes],
    reference: datetime,
    config: Optional[ScheduleConfig] = None,
) -> Schedule:
    """Decode a definition and materialize the week containing ``reference``.

    Raises:
        DecodeError: If the definition is not valid.
        ParseError: If a start or duration token is malformed.
    """
    return Schedule(decode_definition(definition), reference, config)


def new(
    definition: Union[str, bytes],
    config: Optional[ScheduleConfig] = None,
    tz: Optional[tzinfo] = None,
) -> Schedule:
    """Decode a definition and materialize the current week.

    Args:
        definition: JSON schedule definition.
        config: Query behaviour options.
        tz: Zone for the current instant. Without it the schedule runs on
            naive local wall-clock time, so day steps and durations ignore
            DST changes. Pass a zone such as ``ZoneInfo("Europe/Berlin")``
            to step in elapsed time across DST transitions.
    """
    return new_from_time(definition, datetime.now(tz), config)
