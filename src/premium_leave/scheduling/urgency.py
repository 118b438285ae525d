"""Urgency classification for leave schedules.

Each employee is classified by how close their leave ends to their
estimated retirement:

- NO_LEAVE_SCHEDULED: no leave start or month count
- URGENT: leave ends after retirement, or at most 2 years before it
- MEDIUM: leave ends 2 to 5 years before retirement
- LOW: more than 5 years of margin, or retirement unknown

Granted months that are not part of the schedule escalate the result one
level (low -> medium with 3+ unused months, medium -> urgent with 6+).
"""

import logging
import math
from typing import Optional

from premium_leave.domain.models import (
    EmployeeRecord,
    LeaveScheduleDetails,
    RetirementEstimate,
    UrgencyAssessment,
    UrgencyLevel,
)
from premium_leave.domain.policies import DefaultUrgencyPolicy, ScorePolicy, UrgencyPolicy
from premium_leave.parsing.dates import format_date
from premium_leave.scheduling.calculator import LeaveCalculator

logger = logging.getLogger(__name__)

NO_LEAVE_REASON = "No leave scheduled"
NO_RETIREMENT_REASON = "Retirement date could not be determined"


class UrgencyClassifier:
    """Classifies employees by leave-to-retirement urgency.

    Example:
        >>> classifier = UrgencyClassifier()
        >>> assessment = classifier.classify(record, estimate)
        >>> assessment.level
        <UrgencyLevel.MEDIUM: 'medium'>
    """

    def __init__(
        self,
        calculator: Optional[LeaveCalculator] = None,
        policy: Optional[UrgencyPolicy] = None,
        score_policy: Optional[ScorePolicy] = None,
    ):
        """Initialize classifier with policies.

        Args:
            calculator: Calculator used to build schedules.
            policy: Thresholds for levels and escalation.
            score_policy: Weights for the ranking score.
        """
        self.calculator = calculator or LeaveCalculator()
        self.policy = policy or DefaultUrgencyPolicy()
        self.score_policy = score_policy or ScorePolicy()

    def classify(
        self,
        record: EmployeeRecord,
        retirement: Optional[RetirementEstimate],
    ) -> UrgencyAssessment:
        """Classify one employee.

        Args:
            record: The employee record.
            retirement: Externally computed retirement estimate, or None.

        Returns:
            UrgencyAssessment with the final level and its explanation.
        """
        schedule = self.calculator.compute_schedule_details(record)
        return self.classify_schedule(record, schedule, retirement)

    def classify_schedule(
        self,
        record: EmployeeRecord,
        schedule: LeaveScheduleDetails,
        retirement: Optional[RetirementEstimate],
    ) -> UrgencyAssessment:
        """Classify with an already computed schedule for `record`."""
        if not schedule.has_leave:
            return UrgencyAssessment(
                level=UrgencyLevel.NO_LEAVE_SCHEDULED,
                reason=NO_LEAVE_REASON,
                schedule=schedule,
            )

        if retirement is None or not retirement.is_usable:
            logger.debug("No retirement estimate for %s", record.name)
            return UrgencyAssessment(
                level=UrgencyLevel.LOW,
                reason=NO_RETIREMENT_REASON,
                leave_end=schedule.end,
                schedule=schedule,
            )

        retirement_date = retirement.estimated_date
        gap_years = (retirement_date - schedule.end).days / self.policy.days_per_year()
        months_gap = math.floor(gap_years * 12)

        if gap_years < 0:
            level = UrgencyLevel.URGENT
            reason = (
                "CRITICAL: leave ends after retirement "
                f"(retirement {format_date(retirement_date)}, leave end {format_date(schedule.end)})"
            )
        elif gap_years <= self.policy.urgent_max_years():
            level = UrgencyLevel.URGENT
            reason = f"Leave ends only {months_gap} months before retirement"
        elif gap_years <= self.policy.medium_max_years():
            level = UrgencyLevel.MEDIUM
            reason = f"Leave ends {math.floor(gap_years)} years ({months_gap} months) before retirement"
        else:
            level = UrgencyLevel.LOW
            reason = (
                f"Leave ends with margin: {math.floor(gap_years)} years "
                f"({months_gap} months) before retirement"
            )

        balance = self.calculator.compute_available_balance(record.months_used, record.months_remaining)
        unused = max(0, balance.remaining - schedule.total_months)

        escalated = False
        if level is UrgencyLevel.LOW and unused >= self.policy.escalate_low_months():
            level = UrgencyLevel.MEDIUM
            reason += f" | ATTENTION: {unused} leave months not scheduled"
            escalated = True
        elif level is UrgencyLevel.MEDIUM and unused >= self.policy.escalate_medium_months():
            level = UrgencyLevel.URGENT
            reason += f" | ALERT: {unused} leave months not scheduled"
            escalated = True

        return UrgencyAssessment(
            level=level,
            reason=reason,
            gap_years=gap_years,
            months_gap=months_gap,
            has_unused_months=unused > 0,
            unused_months=unused,
            escalated=escalated,
            leave_end=schedule.end,
            retirement_date=retirement_date,
            schedule=schedule,
        )

    def score(self, record: EmployeeRecord, retirement: Optional[RetirementEstimate]) -> int:
        """Urgency score from 0 to 100 for ranking (100 is most urgent)."""
        return self.score_assessment(self.classify(record, retirement))

    def score_assessment(self, assessment: UrgencyAssessment) -> int:
        """Score an existing assessment."""
        if assessment.level is UrgencyLevel.NO_LEAVE_SCHEDULED:
            return self.score_policy.no_leave
        if assessment.gap_years is None:
            return self.score_policy.no_retirement

        horizon = self.score_policy.horizon_years
        base = 100 - min(100.0, max(0.0, assessment.gap_years * 100 / horizon))
        if assessment.has_unused_months:
            base = min(100.0, base + assessment.unused_months * self.score_policy.per_unused_month)
        # Halves round up
        return math.floor(base + 0.5)

    @staticmethod
    def needs_attention(assessment: UrgencyAssessment) -> bool:
        """True for urgent employees or anyone with unscheduled months."""
        return assessment.level is UrgencyLevel.URGENT or assessment.has_unused_months

    def recommendations(self, assessment: UrgencyAssessment) -> list[str]:
        """Suggested actions for an assessment."""
        actions = []

        if assessment.level is UrgencyLevel.NO_LEAVE_SCHEDULED:
            actions.append("Schedule premium leave as soon as possible")
            actions.append("Check for granted leave months not yet used")

        if assessment.level is UrgencyLevel.URGENT:
            actions.append("IMMEDIATE ACTION: review the leave schedule")
            if assessment.ends_after_retirement:
                actions.append("CRITICAL: leave ends after retirement, adjust dates now")
            else:
                actions.append("Consider bringing leave periods forward")

        if assessment.level is UrgencyLevel.MEDIUM:
            actions.append("Monitor the leave schedule")
            actions.append("Plan ahead to avoid conflicts with retirement")

        if assessment.has_unused_months and assessment.unused_months >= self.policy.escalate_low_months():
            actions.append(f"{assessment.unused_months} granted leave months are not scheduled")
            actions.append("Include every available month in the schedule")

        if not actions:
            actions.append("Schedule is adequate, keep regular follow-up")
        return actions

    @staticmethod
    def format_report(assessment: UrgencyAssessment) -> str:
        """Multi-line text summary of an assessment."""
        lines = [
            f"Urgency level: {assessment.level.label}",
            f"Reason: {assessment.reason}",
        ]
        if assessment.leave_end is not None:
            lines.append(f"Leave ends: {format_date(assessment.leave_end)}")
        if assessment.retirement_date is not None:
            lines.append(f"Estimated retirement: {format_date(assessment.retirement_date)}")
            lines.append(
                f"Gap: {assessment.gap_years:.1f} years ({assessment.months_gap} months)"
            )
        if assessment.has_unused_months:
            lines.append(f"WARNING: {assessment.unused_months} leave months not scheduled")
        return "\n".join(lines)


_DEFAULT_CLASSIFIER = UrgencyClassifier()


def classify(record: EmployeeRecord, retirement: Optional[RetirementEstimate]) -> UrgencyAssessment:
    return _DEFAULT_CLASSIFIER.classify(record, retirement)


def score(record: EmployeeRecord, retirement: Optional[RetirementEstimate]) -> int:
    return _DEFAULT_CLASSIFIER.score(record, retirement)
