"""Leave period calculation.

Turns a leave start and a month count into a concrete calendar. A leave
month is always 30 days, so the calendar is built with plain day
arithmetic and never depends on calendar month lengths:

    end = start + (months * 30 - 1) days

The requested months are also partitioned into consecutive 30-day
segments, which are the accounting blocks shown on schedules.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from premium_leave.domain.models import (
    AvailableBalance,
    EmployeeRecord,
    LeavePeriodSegment,
    LeaveScheduleDetails,
)
from premium_leave.domain.policies import LeavePolicy
from premium_leave.parsing.dates import format_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeasibilityResult:
    """Whether a schedule fits before a limit date."""

    feasible: bool
    problems: tuple[str, ...] = ()


@dataclass
class LeaveStatistics:
    """Aggregate leave figures for a group of employees."""

    total: int = 0
    with_leave: int = 0
    without_leave: int = 0
    total_days: int = 0
    total_months: int = 0
    average_months: float = 0.0
    complete_schedules: int = 0
    partial_schedules: int = 0


class LeaveCalculator:
    """Computes leave calendars from start dates and month counts.

    Example:
        >>> calculator = LeaveCalculator()
        >>> calculator.compute_end(date(2025, 3, 1), 3)
        datetime.date(2025, 5, 29)
        >>> len(calculator.split_into_segments(date(2025, 3, 1), 3))
        3
    """

    def __init__(self, policy: Optional[LeavePolicy] = None):
        self.policy = policy or LeavePolicy()

    def compute_end(self, start: date, months: int) -> date:
        """Last day of a leave of `months` 30-day months starting at `start`.

        Non-positive counts are a caller error. Record data goes through
        compute_schedule_details, which reports no leave instead.

        Raises:
            ValueError: If months is not positive.
        """
        if months <= 0:
            raise ValueError(f"Leave month count must be positive, got {months}")
        return start + timedelta(days=months * self.policy.days_per_month - 1)

    def split_into_segments(self, start: date, months: Optional[int]) -> list[LeavePeriodSegment]:
        """Partition a leave into consecutive 30-day segments.

        Args:
            start: First day of leave.
            months: Number of segments to produce (0 or None gives none).

        Returns:
            Exactly `months` contiguous, non-overlapping segments.
        """
        if not months or months < 0:
            return []

        length = self.policy.days_per_month
        segments = []
        current = start
        for sequence in range(1, months + 1):
            end = current + timedelta(days=length - 1)
            segments.append(
                LeavePeriodSegment(
                    sequence=sequence,
                    start=current,
                    end=end,
                    days=length,
                    reference_month=current.month,
                    reference_year=current.year,
                )
            )
            current = end + timedelta(days=1)
        return segments

    def compute_schedule_details(self, record: EmployeeRecord) -> LeaveScheduleDetails:
        """Build the leave schedule for one employee.

        Custom ranges keep their literal start and end; the totals are
        derived from the inclusive span. Start-only periods get the
        canonical end. In both cases the segments partition the record's
        requested month count.
        """
        period = record.leave_start
        months = record.leave_months
        if period is None or not period.is_valid or period.start is None or not months or months <= 0:
            return LeaveScheduleDetails.empty()

        start = period.start
        if period.is_custom_range and not period.has_conflict:
            end = period.end
            total_days = (end - start).days + 1
            total_months = math.ceil(total_days / self.policy.days_per_month)
        elif period.is_custom_range:
            # Conflicting range: keep the literal end, count the requested months
            end = period.end
            total_days = months * self.policy.days_per_month
            total_months = months
        else:
            end = self.compute_end(start, months)
            total_days = months * self.policy.days_per_month
            total_months = months

        full_blocks, remainder = divmod(total_months, self.policy.months_per_full_leave)

        logger.debug(
            "Schedule for %s: %s to %s, %d days",
            record.name, format_date(start), format_date(end), total_days,
        )

        return LeaveScheduleDetails(
            has_leave=True,
            start=start,
            end=end,
            total_days=total_days,
            total_months=total_months,
            full_leave_blocks=full_blocks,
            remainder_months=remainder,
            segments=tuple(self.split_into_segments(start, months)),
            is_custom_range=period.is_custom_range,
            description=self.describe(full_blocks, remainder, total_days),
        )

    def compute_available_balance(self, months_used: Optional[int], months_remaining: Optional[int]) -> AvailableBalance:
        """Split granted months into used and remaining."""
        used = months_used or 0
        remaining = months_remaining or 0
        total = used + remaining
        return AvailableBalance(
            total_available=total,
            used=used,
            remaining=remaining,
            percent_used=(used / total) * 100 if total > 0 else 0.0,
        )

    def describe(self, full_blocks: int, remainder_months: int, total_days: int) -> str:
        """Describe a schedule, e.g. "1 leave + 2 months (150 days)"."""
        parts = []
        if full_blocks > 0:
            parts.append(f"{full_blocks} {'leave' if full_blocks == 1 else 'leaves'}")
        if remainder_months > 0:
            parts.append(f"{remainder_months} {'month' if remainder_months == 1 else 'months'}")
        return f"{' + '.join(parts)} ({total_days} days)"

    def check_feasibility(self, record: EmployeeRecord, limit: Optional[date]) -> FeasibilityResult:
        """Check that a schedule ends by `limit` and uses all remaining months."""
        details = self.compute_schedule_details(record)
        if not details.has_leave:
            return FeasibilityResult(feasible=False, problems=("No leave scheduled",))

        problems = []
        if limit is not None and details.end > limit:
            problems.append(f"Leave ends after the limit date ({format_date(limit)})")

        balance = self.compute_available_balance(record.months_used, record.months_remaining)
        if balance.remaining > details.total_months:
            unscheduled = balance.remaining - details.total_months
            problems.append(f"{unscheduled} granted leave months are not scheduled")

        return FeasibilityResult(feasible=not problems, problems=tuple(problems))

    def compute_statistics(self, records: Iterable[EmployeeRecord]) -> LeaveStatistics:
        """Aggregate schedule figures over many employees."""
        stats = LeaveStatistics()
        for record in records:
            stats.total += 1
            details = self.compute_schedule_details(record)
            if not details.has_leave:
                stats.without_leave += 1
                continue

            stats.with_leave += 1
            stats.total_days += details.total_days
            stats.total_months += details.total_months
            if details.full_leave_blocks > 0 and details.remainder_months == 0:
                stats.complete_schedules += 1
            else:
                stats.partial_schedules += 1

        if stats.with_leave:
            stats.average_months = stats.total_months / stats.with_leave
        return stats

    @staticmethod
    def find_segment_containing(details: LeaveScheduleDetails, day: date) -> Optional[LeavePeriodSegment]:
        """Get the segment covering `day`, if any."""
        for segment in details.segments:
            if segment.contains(day):
                return segment
        return None


_DEFAULT_CALCULATOR = LeaveCalculator()


def compute_end(start: date, months: int) -> date:
    return _DEFAULT_CALCULATOR.compute_end(start, months)


def split_into_segments(start: date, months: Optional[int]) -> list[LeavePeriodSegment]:
    return _DEFAULT_CALCULATOR.split_into_segments(start, months)


def compute_schedule_details(record: EmployeeRecord) -> LeaveScheduleDetails:
    return _DEFAULT_CALCULATOR.compute_schedule_details(record)


def compute_available_balance(months_used: Optional[int], months_remaining: Optional[int]) -> AvailableBalance:
    return _DEFAULT_CALCULATOR.compute_available_balance(months_used, months_remaining)
