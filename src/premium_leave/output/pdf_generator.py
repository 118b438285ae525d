"""PDF generation for leave analyses.

This module creates printable PDF reports showing:
- A summary page with employee counts and a bar per urgency level
- An employee table sorted by urgency, with leave dates and retirement gap
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from premium_leave.domain.models import UrgencyLevel
from premium_leave.parsing.dates import format_date
from premium_leave.scheduling.analyzer import AnalysisResult, AnalyzedRecord

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    UrgencyLevel.URGENT: (0.85, 0.3, 0.3),  # Red
    UrgencyLevel.MEDIUM: (0.95, 0.7, 0.3),  # Orange
    UrgencyLevel.LOW: (0.4, 0.7, 0.4),  # Green
    UrgencyLevel.NO_LEAVE_SCHEDULED: (0.6, 0.6, 0.6),  # Gray
    "header": (0.9, 0.9, 0.9),
}


class PDFGenerator:
    """Generates printable PDF urgency reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(result, "urgency.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        title: str = "Premium Leave Urgency",
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.title = title

    def generate(self, result: AnalysisResult, output_path: Union[str, Path]) -> None:
        """Generate the PDF report and save it to a file.

        Args:
            result: The analysis to render.
            output_path: Path to save the PDF.
        """
        canvas = self._load_canvas()
        c = canvas.Canvas(str(output_path), pagesize=self._pagesize())
        self._draw(c, result)
        c.save()

    def generate_to_buffer(self, result: AnalysisResult) -> BytesIO:
        """Generate the PDF report and return it as a bytes buffer."""
        canvas = self._load_canvas()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=self._pagesize())
        self._draw(c, result)
        c.save()
        buffer.seek(0)
        return buffer

    @staticmethod
    def _load_canvas():
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas

    def _pagesize(self) -> tuple[float, float]:
        return (self.page_width, self.page_height)

    def _draw(self, c, result: AnalysisResult) -> None:
        self._draw_summary_page(c, result)
        self._draw_employee_pages(c, result)

    def _draw_summary_page(self, c, result: AnalysisResult) -> None:
        """Draw summary page with counts per level."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, f"{self.title} - Summary")

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        counts = result.counts
        c.setFont("Helvetica", 10)
        c.drawString(self.margin + 20, y, f"Total Employees: {counts.total}")
        y -= 15
        c.drawString(self.margin + 20, y, f"Attention Required: {len(result.attention_required())}")
        y -= 15
        c.drawString(self.margin + 20, y, f"Data Issues: {len(result.diagnostics)}")
        y -= 35

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Employees by Urgency Level")
        y -= 25

        self._draw_level_bars(c, result, self.margin + 20, y, 400)
        c.showPage()

    def _draw_level_bars(self, c, result: AnalysisResult, x: float, y: float, width: float) -> None:
        """Draw one horizontal bar per level, scaled to the largest group."""
        counts = result.counts
        levels = sorted(UrgencyLevel, key=lambda lvl: lvl.priority)
        largest = max((counts.for_level(level) for level in levels), default=0) or 1
        bar_left = x + 130
        bar_height = 14

        for level in levels:
            count = counts.for_level(level)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 10)
            c.drawString(x, y + 3, level.label)

            bar_width = (count / largest) * width
            c.setFillColorRGB(*COLORS[level])
            c.rect(bar_left, y, bar_width, bar_height, fill=1, stroke=0)

            c.setFillColorRGB(0, 0, 0)
            c.drawString(bar_left + bar_width + 5, y + 3, str(count))
            y -= bar_height + 12

    def _draw_employee_pages(self, c, result: AnalysisResult) -> None:
        """Draw the employee table, most urgent first."""
        entries = [entry for group in result.grouped().values() for entry in group]
        if not entries:
            return

        row_height = 16
        header_height = 60
        footer_height = 30
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height))
        total_pages = (len(entries) + rows_per_page - 1) // rows_per_page

        for page_start in range(0, len(entries), rows_per_page):
            page_entries = entries[page_start : page_start + rows_per_page]

            c.setFont("Helvetica-Bold", 16)
            c.drawString(self.margin, self.page_height - self.margin - 20, f"{self.title} - Employees")

            y = self.page_height - self.margin - header_height
            self._draw_table_header(c, y, row_height)
            for entry in page_entries:
                y -= row_height
                self._draw_entry_row(c, entry, y, row_height)

            page_num = (page_start // rows_per_page) + 1
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {total_pages}",
            )
            c.showPage()

    def _columns(self) -> list[tuple[str, float]]:
        x = self.margin
        return [
            ("Level", x),
            ("Name", x + 90),
            ("Leave start", x + 290),
            ("Leave end", x + 370),
            ("Retirement", x + 450),
            ("Gap (months)", x + 530),
            ("Score", x + 620),
        ]

    def _draw_table_header(self, c, y: float, height: float) -> None:
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y - 4, self.page_width - 2 * self.margin, height, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        for label, x in self._columns():
            c.drawString(x + 2, y, label)

    def _draw_entry_row(self, c, entry: AnalyzedRecord, y: float, height: float) -> None:
        """Draw a single employee row."""
        assessment = entry.assessment
        schedule = entry.schedule
        values = [
            assessment.level.label,
            entry.name[:34],
            format_date(schedule.start) or "-",
            format_date(schedule.end) or "-",
            format_date(assessment.retirement_date) or "-",
            "-" if assessment.months_gap is None else str(assessment.months_gap),
            str(entry.score),
        ]

        c.setFillColorRGB(*COLORS[assessment.level])
        c.rect(self.margin, y - 4, 6, height - 2, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        for (_, x), value in zip(self._columns(), values):
            c.drawString(x + 10 if x == self.margin else x + 2, y, value)
