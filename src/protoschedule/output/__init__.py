"""Output generation for schedules (text dump, PDF)."""

from protoschedule.output.debug_generator import DebugGenerator
from protoschedule.output.pdf_generator import PDFGenerator

__all__ = [
    "DebugGenerator",
    "PDFGenerator",
]
