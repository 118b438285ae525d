"""Output generation for leave analyses (text report, PDF)."""

from premium_leave.output.pdf_generator import PDFGenerator
from premium_leave.output.report_generator import ReportGenerator

__all__ = [
    "PDFGenerator",
    "ReportGenerator",
]
