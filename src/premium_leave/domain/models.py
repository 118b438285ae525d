"""Domain models for premium leave scheduling.

This module contains the core data structures shared by the parser, the
leave calculator and the urgency classifier: parsed periods, employee
records, 30-day leave segments, computed schedules and urgency assessments.

Every model is immutable. Operations that derive one model from another
always build a new value, so two calls with the same input produce equal
output.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class PeriodKind(Enum):
    """How a leave-start cell was interpreted."""

    CUSTOM_RANGE = "custom_range"  # Explicit start and end dates
    START_ONLY = "start_only"  # Single date, end derived from month count
    INVALID = "invalid"  # Could not be parsed


@dataclass(frozen=True)
class ParsedPeriod:
    """Result of interpreting a leave-start token.

    Attributes:
        kind: Which shape the token matched.
        start: First day of leave (None when invalid).
        end: Literal last day for custom ranges, None otherwise.
        raw: Original cell text, kept for diagnostics.
    """

    kind: PeriodKind
    start: Optional[date] = None
    end: Optional[date] = None
    raw: str = ""

    @classmethod
    def custom_range(cls, start: date, end: date, raw: str = "") -> "ParsedPeriod":
        """Create a period with an explicit end date."""
        return cls(kind=PeriodKind.CUSTOM_RANGE, start=start, end=end, raw=raw)

    @classmethod
    def start_only(cls, start: date, raw: str = "") -> "ParsedPeriod":
        """Create a period whose end is computed from a month count."""
        return cls(kind=PeriodKind.START_ONLY, start=start, raw=raw)

    @classmethod
    def invalid(cls, raw: str = "") -> "ParsedPeriod":
        """Create an unparseable period retaining the original text."""
        return cls(kind=PeriodKind.INVALID, raw=raw)

    @property
    def is_valid(self) -> bool:
        return self.kind is not PeriodKind.INVALID

    @property
    def is_custom_range(self) -> bool:
        return self.kind is PeriodKind.CUSTOM_RANGE

    @property
    def has_conflict(self) -> bool:
        """True when a custom range starts after it ends."""
        return (
            self.kind is PeriodKind.CUSTOM_RANGE
            and self.start is not None
            and self.end is not None
            and self.start > self.end
        )


@dataclass(frozen=True)
class EmployeeRecord:
    """One resolved spreadsheet row for an employee.

    Attributes:
        name: Employee name (never blank for a built record).
        birth_date: Date of birth, if known.
        admission_date: Date of admission to public service, if known.
        months_used: Leave months already granted and used.
        months_remaining: Leave months granted but not yet used.
        leave_months: Months requested in the current leave schedule.
        leave_start: Parsed leave-start period, None when absent.
        position: Job title, display only.
        unit: Organizational unit, display only.
        source_rows: Raw rows this record came from, stored as tuples of
            (column, value) pairs so the record stays hashable.
    """

    name: str
    birth_date: Optional[date] = None
    admission_date: Optional[date] = None
    months_used: int = 0
    months_remaining: int = 0
    leave_months: int = 0
    leave_start: Optional[ParsedPeriod] = None
    position: str = ""
    unit: str = ""
    source_rows: tuple[tuple[tuple[str, str], ...], ...] = ()

    @staticmethod
    def freeze_row(row: dict) -> tuple[tuple[str, str], ...]:
        """Convert a raw row mapping into the hashable form kept on records."""
        return tuple(
            (str(key), "" if value is None else str(value))
            for key, value in row.items()
        )

    def source_dicts(self) -> list[dict[str, str]]:
        """Source rows as plain dictionaries."""
        return [dict(row) for row in self.source_rows]


@dataclass(frozen=True)
class LeavePeriodSegment:
    """A single 30-day leave block.

    Attributes:
        sequence: 1-based position within the schedule.
        start: First day of the block.
        end: Last day of the block (start + 29 days).
        days: Number of days in the block (always 30 by default policy).
        reference_month: Calendar month the block starts in (display only).
        reference_year: Calendar year the block starts in (display only).
    """

    sequence: int
    start: date
    end: date
    days: int
    reference_month: int
    reference_year: int

    def contains(self, day: date) -> bool:
        """Check if a date falls inside this block (inclusive)."""
        return self.start <= day <= self.end


@dataclass(frozen=True)
class LeaveScheduleDetails:
    """Computed leave calendar for one employee.

    Attributes:
        has_leave: False when no leave start or month count is available.
        start: First day of leave.
        end: Last day of leave (literal end for custom ranges).
        total_days: Days covered by the leave.
        total_months: Leave months covered.
        full_leave_blocks: Number of complete 3-month leaves.
        remainder_months: Months left over after complete leaves.
        segments: Canonical 30-day partition of the requested months.
        is_custom_range: True when the end came from an explicit range.
        description: Human-readable summary of the schedule.
    """

    has_leave: bool
    start: Optional[date] = None
    end: Optional[date] = None
    total_days: int = 0
    total_months: int = 0
    full_leave_blocks: int = 0
    remainder_months: int = 0
    segments: tuple[LeavePeriodSegment, ...] = ()
    is_custom_range: bool = False
    description: str = ""

    @classmethod
    def empty(cls) -> "LeaveScheduleDetails":
        """Schedule for an employee without leave."""
        return cls(has_leave=False)


@dataclass(frozen=True)
class AvailableBalance:
    """Granted leave months split into used and remaining."""

    total_available: int
    used: int
    remaining: int
    percent_used: float


@dataclass(frozen=True)
class RetirementEstimate:
    """Retirement eligibility as computed by an external estimator."""

    eligible: bool
    estimated_date: Optional[date] = None

    @property
    def is_usable(self) -> bool:
        return self.eligible and self.estimated_date is not None


class UrgencyLevel(Enum):
    """Urgency for rescheduling an employee's leave before retirement."""

    URGENT = "urgent"
    MEDIUM = "medium"
    LOW = "low"
    NO_LEAVE_SCHEDULED = "no_leave_scheduled"

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]

    @property
    def priority(self) -> int:
        """Sort key, 1 is most urgent."""
        return _LEVEL_PRIORITIES[self]


_LEVEL_LABELS = {
    UrgencyLevel.URGENT: "Urgent",
    UrgencyLevel.MEDIUM: "Medium",
    UrgencyLevel.LOW: "Low",
    UrgencyLevel.NO_LEAVE_SCHEDULED: "No leave scheduled",
}

_LEVEL_PRIORITIES = {
    UrgencyLevel.URGENT: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.LOW: 3,
    UrgencyLevel.NO_LEAVE_SCHEDULED: 4,
}


@dataclass(frozen=True)
class UrgencyAssessment:
    """Classification of one employee.

    Attributes:
        level: Final urgency level (after escalation).
        reason: Human-readable explanation.
        gap_years: Years between leave end and retirement, None when unknown.
        months_gap: gap_years * 12 rounded down; negative when the leave
            ends after retirement.
        has_unused_months: True when granted months are left unscheduled.
        unused_months: Number of unscheduled granted months.
        escalated: True when unused months raised the level.
        leave_end: Last day of leave, if scheduled.
        retirement_date: Estimated retirement date, if known.
        schedule: The schedule the assessment was computed from.
    """

    level: UrgencyLevel
    reason: str
    gap_years: Optional[float] = None
    months_gap: Optional[int] = None
    has_unused_months: bool = False
    unused_months: int = 0
    escalated: bool = False
    leave_end: Optional[date] = None
    retirement_date: Optional[date] = None
    schedule: LeaveScheduleDetails = field(default_factory=LeaveScheduleDetails.empty)

    @property
    def has_retirement_date(self) -> bool:
        return self.retirement_date is not None

    @property
    def ends_after_retirement(self) -> bool:
        return self.gap_years is not None and self.gap_years < 0
