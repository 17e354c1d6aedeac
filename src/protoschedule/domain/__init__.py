"""Domain models, parsing primitives and definition decoding."""

from protoschedule.domain.decoding import decode_definition, load_definition
from protoschedule.domain.errors import (
    DecodeError,
    EmptyScheduleError,
    ParseError,
    ProtoscheduleError,
    StaleScheduleError,
)
from protoschedule.domain.models import (
    PRECISION,
    IntervalRecord,
    MaterializedInterval,
    MaterializedWeek,
    WeekPrototype,
    Weekday,
)
from protoschedule.domain.parsing import (
    MILITARY_TIME_FORMAT,
    parse_duration,
    parse_time_of_day,
)

__all__ = [
    # Models
    "IntervalRecord",
    "MaterializedInterval",
    "MaterializedWeek",
    "PRECISION",
    "WeekPrototype",
    "Weekday",
    # Decoding and parsing
    "MILITARY_TIME_FORMAT",
    "decode_definition",
    "load_definition",
    "parse_duration",
    "parse_time_of_day",
    # Errors
    "DecodeError",
    "EmptyScheduleError",
    "ParseError",
    "ProtoscheduleError",
    "StaleScheduleError",
]
