"""Domain models and business rules for premium leave."""

from premium_leave.domain.models import (
    AvailableBalance,
    EmployeeRecord,
    LeavePeriodSegment,
    LeaveScheduleDetails,
    ParsedPeriod,
    PeriodKind,
    RetirementEstimate,
    UrgencyAssessment,
    UrgencyLevel,
)
from premium_leave.domain.policies import (
    DefaultUrgencyPolicy,
    LeavePolicy,
    ScorePolicy,
    UrgencyPolicy,
)

__all__ = [
    # Models
    "AvailableBalance",
    "EmployeeRecord",
    "LeavePeriodSegment",
    "LeaveScheduleDetails",
    "ParsedPeriod",
    "PeriodKind",
    "RetirementEstimate",
    "UrgencyAssessment",
    "UrgencyLevel",
    # Policies
    "DefaultUrgencyPolicy",
    "LeavePolicy",
    "ScorePolicy",
    "UrgencyPolicy",
]
