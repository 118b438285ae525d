"""Plain-text report for leave analyses.

This module creates a text report showing:
- Employee counts per urgency level
- Per-employee schedule and retirement gap, grouped by level
- Data-quality diagnostics found while reading the sheet
"""

from pathlib import Path
from typing import Union

from premium_leave.domain.models import UrgencyLevel
from premium_leave.parsing.dates import format_date
from premium_leave.scheduling.analyzer import AnalysisResult, AnalyzedRecord


class ReportGenerator:
    """Generates text reports from an AnalysisResult.

    Example:
        >>> generator = ReportGenerator()
        >>> print(generator.generate_to_string(result))
    """

    def __init__(self, include_diagnostics: bool = True, max_name_length: int = 30):
        self.include_diagnostics = include_diagnostics
        self.max_name_length = max_name_length

    def generate(self, result: AnalysisResult, output_path: Union[str, Path]) -> str:
        """Generate the report and save it to a file.

        Args:
            result: The analysis to report on.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(result)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(self, result: AnalysisResult) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(result)

    def _generate_content(self, result: AnalysisResult) -> str:
        lines = []

        lines.append("=" * 80)
        lines.append("PREMIUM LEAVE URGENCY REPORT")
        lines.append("=" * 80)
        lines.append("")

        counts = result.counts
        lines.append(f"Total Employees: {counts.total}")
        for level in sorted(UrgencyLevel, key=lambda lvl: lvl.priority):
            count = counts.for_level(level)
            percent = (count / counts.total * 100) if counts.total else 0.0
            lines.append(f"  {level.label + ':':<20} {count:>5} ({percent:.1f}%)")
        lines.append("")

        for level, entries in result.grouped().items():
            if not entries:
                continue
            lines.append("-" * 80)
            lines.append(f"{level.label.upper()} ({len(entries)})")
            lines.append("-" * 80)
            lines.append(
                f"{'#':>3} {'Name':<{self.max_name_length}} {'Leave':^23} "
                f"{'Retirement':^10} {'Gap':>6} {'Score':>5}"
            )
            for i, entry in enumerate(entries, 1):
                lines.append(self._entry_line(i, entry))
                lines.append(f"    {entry.assessment.reason}")
            lines.append("")

        attention = result.attention_required()
        lines.append("-" * 80)
        lines.append(f"ATTENTION REQUIRED ({len(attention)})")
        lines.append("-" * 80)
        if attention:
            for entry in attention:
                lines.append(f"  {entry.name} (score {entry.score})")
        else:
            lines.append("  None")
        lines.append("")

        if self.include_diagnostics:
            lines.append("-" * 80)
            lines.append(f"DIAGNOSTICS ({len(result.diagnostics)})")
            lines.append("-" * 80)
            if len(result.diagnostics):
                for diagnostic in result.diagnostics:
                    lines.append(f"  {diagnostic}")
            else:
                lines.append("  No data issues found")
            lines.append("")

        return "\n".join(lines)

    def _entry_line(self, index: int, entry: AnalyzedRecord) -> str:
        name = entry.name[: self.max_name_length]
        schedule = entry.schedule
        if schedule.has_leave:
            leave = f"{format_date(schedule.start)}-{format_date(schedule.end)}"
        else:
            leave = "-"
        retirement = format_date(entry.assessment.retirement_date) or "-"
        months_gap = entry.assessment.months_gap
        gap = f"{months_gap}m" if months_gap is not None else "-"
        return (
            f"{index:>3} {name:<{self.max_name_length}} {leave:^23} "
            f"{retirement:^10} {gap:>6} {entry.score:>5}"
        )
