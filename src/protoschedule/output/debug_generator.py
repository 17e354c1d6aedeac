"""Debug text output for schedule inspection.

This module creates a human-readable dump of a schedule's cached week:
- Description, interval count and span
- One line per interval with label, start and end
- Optionally, a per-day breakdown with overlap counts
"""

from collections import defaultdict
from pathlib import Path
from typing import Union

from protoschedule.domain.models import Weekday
from protoschedule.scheduling.schedule import Schedule


class DebugGenerator:
    """Generates debug text for a materialized schedule.

    Example:
        >>> print(DebugGenerator().generate_to_string(schedule))
        Schedule Definition: Support desk, 22 intervals,
        span 2024-01-15 08:00:00 -> 2024-01-20 16:59:59
        ...
    """

    def __init__(self, include_days: bool = False):
        self.include_days = include_days

    def generate(self, schedule: Schedule, output_path: Union[str, Path]) -> str:
        """Generate debug text and save to file.

        Args:
            schedule: The schedule to describe.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(schedule)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(self, schedule: Schedule) -> str:
        lines = [
            f"Schedule Definition: {schedule.description}, {len(schedule)} intervals, ",
            f"span {schedule.span_start} -> {schedule.span_end}",
        ]
        lines.extend(str(v) for v in schedule.intervals)

        if self.include_days:
            lines.append("")
            lines.extend(self._day_breakdown(schedule))

        return "\n".join(lines) + "\n"

    def _day_breakdown(self, schedule: Schedule) -> list[str]:
        """Per-day interval counts and overlapping pairs."""
        by_day = defaultdict(list)
        for v in schedule.intervals:
            by_day[Weekday.from_date(v.start)].append(v)

        lines = ["-" * 60]
        lines.append(f"{'Day':<5} {'Intervals':>9} {'Overlaps':>9}")
        lines.append("-" * 60)
        for day in Weekday:
            intervals = by_day.get(day, [])
            overlaps = sum(
                1
                for i, a in enumerate(intervals)
                for b in intervals[i + 1:]
                if b.start <= a.end
            )
            lines.append(f"{day.value:<5} {len(intervals):>9} {overlaps:>9}")
        return lines
