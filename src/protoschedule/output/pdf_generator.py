"""PDF generation for schedule output.

This module creates a printable week view of a schedule's cached week:
- One timeline row per weekday, midnight to midnight
- Interval bars colored by label, split at midnight when they spill over
- A legend mapping colors to labels
"""

from datetime import datetime, timedelta
from io import BytesIO
from pathlib import Path
from typing import Union

from protoschedule.domain.models import MaterializedInterval, PRECISION, Weekday
from protoschedule.scheduling.materializer import DAY, add_elapsed
from protoschedule.scheduling.schedule import Schedule

# Label palette (RGB tuples, 0-1 scale), assigned in order of first use
PALETTE = [
    (0.4, 0.7, 0.4),  # Green
    (0.4, 0.4, 0.8),  # Blue
    (0.8, 0.6, 0.2),  # Orange
    (0.7, 0.4, 0.7),  # Purple
    (0.6, 0.6, 0.6),  # Gray
    (1.0, 0.9, 0.5),  # Yellow
    (0.9, 0.7, 0.7),  # Pink
]
BACKGROUND = (0.95, 0.95, 0.95)


class PDFGenerator:
    """Generates a printable week timeline PDF.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(schedule, "week.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(self, schedule: Schedule, output_path: Union[str, Path]) -> None:
        """Generate the week PDF and save to file.

        Args:
            schedule: The schedule whose cached week is drawn.
            output_path: Path to save the PDF.
        """
        canvas = self._canvas_module()
        c = canvas.Canvas(str(output_path), pagesize=(self.page_width, self.page_height))
        self._draw_week_page(c, schedule)
        c.save()

    def generate_to_buffer(self, schedule: Schedule) -> BytesIO:
        """Generate the week PDF and return it as a bytes buffer."""
        canvas = self._canvas_module()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
        self._draw_week_page(c, schedule)
        c.save()
        buffer.seek(0)
        return buffer

    def _canvas_module(self):
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas

    def label_colors(self, schedule: Schedule) -> dict[str, tuple[float, float, float]]:
        colors = {}
        for v in schedule.intervals:
            if v.label not in colors:
                colors[v.label] = PALETTE[len(colors) % len(PALETTE)]
        return colors

    def _draw_week_page(self, c, schedule: Schedule) -> None:
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        row_height = usable_height / len(Weekday)

        timeline_left = self.margin + 60  # Space for day names
        timeline_width = self.page_width - self.margin - 20 - timeline_left

        self._draw_header(c, schedule)
        top = self.page_height - self.margin - header_height
        self._draw_time_axis(c, timeline_left, top, timeline_width)

        colors = self.label_colors(schedule)
        day_anchor = schedule.anchor
        for day in Weekday:
            y = top - (day.offset + 1) * row_height
            height = row_height - 6

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            label = day_anchor.strftime("%a %d %b")
            c.drawString(self.margin, y + height / 2 - 3, label)

            c.setFillColorRGB(*BACKGROUND)
            c.rect(timeline_left, y, timeline_width, height, fill=1, stroke=0)

            intervals = [
                v for v in schedule.intervals
                if v.start < day_anchor + DAY and v.end >= day_anchor
            ]
            lane_height = height / max(1, len(intervals))
            for lane, interval in enumerate(intervals):
                self._draw_segment(
                    c,
                    interval,
                    day_anchor,
                    colors[interval.label],
                    timeline_left,
                    timeline_width,
                    y + height - (lane + 1) * lane_height,
                    lane_height,
                )
            day_anchor = add_elapsed(day_anchor, DAY)

        self._draw_legend(c, colors, self.margin, self.margin + 10)
        c.showPage()

    def _draw_header(self, c, schedule: Schedule) -> None:
        """Draw page header with description and span."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Weekly Schedule - {schedule.description or 'untitled'}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"{len(schedule)} intervals, span {schedule.span_start:%Y-%m-%d %H:%M} "
            f"to {schedule.span_end:%Y-%m-%d %H:%M}",
        )

    def _draw_time_axis(self, c, x: float, y: float, width: float) -> None:
        """Draw time axis with markers every two hours."""
        c.setFont("Helvetica", 8)
        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        for hour in range(0, 25, 2):
            hour_x = x + width * hour / 24
            c.line(hour_x, y, hour_x, y - 5)
            if hour < 24:
                c.drawCentredString(hour_x, y + 5, f"{hour:02d}")

    def _draw_segment(
        self,
        c,
        interval: MaterializedInterval,
        day_anchor: datetime,
        color: tuple[float, float, float],
        timeline_x: float,
        timeline_width: float,
        y: float,
        height: float,
    ) -> None:
        """Draw the part of ``interval`` that falls on the day at ``day_anchor``."""
        seg_start = max(interval.start, day_anchor)
        seg_end = min(interval.end + PRECISION, day_anchor + DAY)
        start_frac = self._day_fraction(seg_start - day_anchor)
        end_frac = self._day_fraction(seg_end - day_anchor)

        bx = timeline_x + start_frac * timeline_width
        bw = max(1.0, (end_frac - start_frac) * timeline_width)
        c.setFillColorRGB(*color)
        c.rect(bx, y, bw, height, fill=1, stroke=0)

        c.setStrokeColorRGB(0.3, 0.3, 0.3)
        c.setLineWidth(0.5)
        c.rect(bx, y, bw, height, fill=0, stroke=1)

    @staticmethod
    def _day_fraction(offset: timedelta) -> float:
        return min(1.0, max(0.0, offset / DAY))

    def _draw_legend(self, c, colors: dict, x: float, y: float) -> None:
        """Draw legend for label colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        c.setFont("Helvetica", 7)
        current_x = x + 45
        for label, color in colors.items():
            c.setFillColorRGB(*color)
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, (label or "(no label)")[:16])
            current_x += 90
