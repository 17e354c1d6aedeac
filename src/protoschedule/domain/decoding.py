"""Decoding of JSON schedule definitions into a WeekPrototype.

Wire format::

    {
      "description": "Support desk",
      "schedule": {
        "mon": [{"start": "0800", "duration": "9h", "label": "day"}],
        "sat": []
      }
    }

Day keys are optional and unknown keys are ignored. Keys match without
regard to case ("Mon", "MON" and "mon" are the same day); when a key appears
in several spellings the last one wins. A null day or null ``schedule`` is
empty.
"""

from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from protoschedule.domain.errors import DecodeError
from protoschedule.domain.models import IntervalRecord, WeekPrototype, Weekday


class _CaseFoldedModel(BaseModel):
    """Model whose input keys are matched case-insensitively."""

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data):
        if isinstance(data, dict):
            return {
                key.lower() if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data


class IntervalEncoding(_CaseFoldedModel):
    """Single interval entry as it appears on the wire."""

    start: str
    duration: str
    label: str = ""

    def to_record(self) -> IntervalRecord:
        return IntervalRecord(start=self.start, duration=self.duration, label=self.label)


class WeekEncoding(_CaseFoldedModel):
    """The ``schedule`` object: one optional list per day key."""

    mon: list[IntervalEncoding] = Field(default_factory=list)
    tue: list[IntervalEncoding] = Field(default_factory=list)
    wed: list[IntervalEncoding] = Field(default_factory=list)
    thu: list[IntervalEncoding] = Field(default_factory=list)
    fri: list[IntervalEncoding] = Field(default_factory=list)
    sat: list[IntervalEncoding] = Field(default_factory=list)
    sun: list[IntervalEncoding] = Field(default_factory=list)

    @field_validator("mon", "tue", "wed", "thu", "fri", "sat", "sun", mode="before")
    @classmethod
    def _null_day_is_empty(cls, value):
        return [] if value is None else value


class DefinitionEncoding(_CaseFoldedModel):
    """Top-level schedule definition document."""

    description: str = ""
    schedule: WeekEncoding = Field(default_factory=WeekEncoding)

    @field_validator("schedule", mode="before")
    @classmethod
    def _null_schedule_is_empty(cls, value):
        return {} if value is None else value

    def to_prototype(self) -> WeekPrototype:
        days = {
            day: tuple(item.to_record() for item in getattr(self.schedule, day.value))
            for day in Weekday
        }
        return WeekPrototype(description=self.description, days=days)


def decode_definition(text: Union[str, bytes]) -> WeekPrototype:
    """Decode definition text into a prototype.

    Args:
        text: JSON document in the schedule definition format.

    Returns:
        The decoded prototype. Tokens are not parsed yet.

    Raises:
        DecodeError: If the text is not valid JSON or does not match the
            expected shape.
    """
    try:
        encoded = DefinitionEncoding.model_validate_json(text)
    except ValidationError as exc:
        raise DecodeError(f"invalid schedule definition: {exc}") from exc
    return encoded.to_prototype()


def load_definition(path: Union[str, Path]) -> WeekPrototype:
    """Read and decode a definition file."""
    return decode_definition(Path(path).read_text(encoding="utf-8"))
