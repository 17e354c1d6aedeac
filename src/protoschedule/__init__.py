"""Weekly prototype schedules: materialize a recurring week and query it."""

from protoschedule.domain.errors import (
    DecodeError,
    EmptyScheduleError,
    ParseError,
    ProtoscheduleError,
    StaleScheduleError,
)
from protoschedule.domain.models import (
    IntervalRecord,
    MaterializedInterval,
    MaterializedWeek,
    WeekPrototype,
    Weekday,
)
from protoschedule.scheduling.query import RefreshResult, ScheduleConfig
from protoschedule.scheduling.schedule import Schedule, new, new_from_time

__version__ = "0.1.0"

__all__ = [
    "Schedule",
    "ScheduleConfig",
    "RefreshResult",
    "new",
    "new_from_time",
    # Models
    "IntervalRecord",
    "MaterializedInterval",
    "MaterializedWeek",
    "WeekPrototype",
    "Weekday",
    # Errors
    "ProtoscheduleError",
    "DecodeError",
    "ParseError",
    "EmptyScheduleError",
    "StaleScheduleError",
]
