"""Point-in-time queries against a materialized week.

The query engine owns a single-slot cache holding one materialized week.
Queries that fall outside the cached span re-materialize the week containing
the query instant before answering.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from protoschedule.domain.errors import ParseError, ProtoscheduleError, StaleScheduleError
from protoschedule.domain.models import (
    MaterializedInterval,
    MaterializedWeek,
    WeekPrototype,
)
from protoschedule.scheduling.materializer import Materializer

logger = logging.getLogger(__name__)


@dataclass
class ScheduleConfig:
    """Query behaviour options.

    Attributes:
        refresh_on_match: When True, matching_intervals re-materializes on a
            cache miss the same way within does. By default it only reads the
            week currently cached.
    """

    refresh_on_match: bool = False


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of a refresh_if_stale call.

    Attributes:
        refreshed: True if a new week was materialized.
        error: The failure that invalidated the cache, if any.
    """

    refreshed: bool = False
    error: Optional[ProtoscheduleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class WeekCache:
    """Single-slot cache of the materialized week for one prototype."""

    def __init__(
        self,
        prototype: WeekPrototype,
        materializer: Optional[Materializer] = None,
    ):
        self.prototype = prototype
        self.materializer = materializer or Materializer()
        self._week: Optional[MaterializedWeek] = None
        self._failure: Optional[ProtoscheduleError] = None

    @property
    def needs_reconstruction(self) -> bool:
        return self._failure is not None

    @property
    def week(self) -> MaterializedWeek:
        """The cached week.

        Raises:
            StaleScheduleError: If the last refresh failed.
        """
        if self._failure is not None or self._week is None:
            raise StaleScheduleError(
                "schedule has no valid materialized week; construct a new one"
            ) from self._failure
        return self._week

    def load(self, reference: datetime) -> MaterializedWeek:
        """Materialize the week containing ``reference``, raising on failure."""
        self._week = None
        try:
            self._week = self.materializer.materialize(self.prototype, reference)
        except ProtoscheduleError as exc:
            self._failure = exc
            raise
        except OverflowError as exc:
            self._failure = ParseError(f"week of {reference} is out of range")
            raise self._failure from exc
        self._failure = None
        return self._week

    def refresh_if_stale(self, t: datetime) -> RefreshResult:
        """Re-materialize around ``t`` if it lies outside the cached span."""
        if self._failure is not None:
            return RefreshResult(error=self._failure)
        if self._week is not None and self._week.covers(t):
            return RefreshResult()
        logger.debug("%s outside cached span, re-materializing", t)
        try:
            self.load(t)
        except ProtoscheduleError as exc:
            logger.warning("refresh for %s failed: %s", t, exc)
            return RefreshResult(error=exc)
        return RefreshResult(refreshed=True)


class IntervalQueryEngine:
    """Answers membership and enumeration queries for one schedule.

    Lookup is a linear scan; a week holds tens of intervals.
    """

    def __init__(self, cache: WeekCache, config: Optional[ScheduleConfig] = None):
        self.cache = cache
        self.config = config or ScheduleConfig()

    def within(self, t: datetime) -> bool:
        """Check if ``t`` falls in any interval, refreshing the week on a miss.

        Raises:
            StaleScheduleError: If the refresh failed. The schedule must be
                rebuilt from its definition.
        """
        self._refresh(t)
        return self.cache.week.first_match(t) is not None

    def matching_intervals(self, t: datetime) -> list[MaterializedInterval]:
        """Return every interval containing ``t``, in start order.

        Without ``refresh_on_match`` this reads the cached week only, so an
        instant from another week yields no matches.
        """
        if self.config.refresh_on_match:
            self._refresh(t)
        return self.cache.week.matching(t)

    def _refresh(self, t: datetime) -> None:
        result = self.cache.refresh_if_stale(t)
        if not result.ok:
            raise StaleScheduleError(
                f"could not materialize week for {t}: {result.error}"
            ) from result.error
