"""Materialization and query engine for weekly schedules."""

from protoschedule.scheduling.materializer import Materializer, week_anchor
from protoschedule.scheduling.query import (
    IntervalQueryEngine,
    RefreshResult,
    ScheduleConfig,
    WeekCache,
)
from protoschedule.scheduling.schedule import Schedule, new, new_from_time

__all__ = [
    "Schedule",
    "new",
    "new_from_time",
    "Materializer",
    "week_anchor",
    "IntervalQueryEngine",
    "WeekCache",
    "RefreshResult",
    "ScheduleConfig",
]
