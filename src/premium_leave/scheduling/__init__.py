"""Leave calculation, urgency classification and batch analysis."""

from premium_leave.scheduling.analyzer import (
    AnalysisResult,
    AnalyzedRecord,
    LeaveAnalyzer,
    UrgencyCounts,
)
from premium_leave.scheduling.calculator import (
    FeasibilityResult,
    LeaveCalculator,
    LeaveStatistics,
)
from premium_leave.scheduling.retirement import (
    ColumnRetirementEstimator,
    FixedRetirementEstimator,
    RetirementEstimator,
)
from premium_leave.scheduling.urgency import UrgencyClassifier

__all__ = [
    # Leave calendar
    "LeaveCalculator",
    "FeasibilityResult",
    "LeaveStatistics",
    # Retirement estimators
    "RetirementEstimator",
    "ColumnRetirementEstimator",
    "FixedRetirementEstimator",
    # Urgency
    "UrgencyClassifier",
    # Batch analysis
    "LeaveAnalyzer",
    "AnalysisResult",
    "AnalyzedRecord",
    "UrgencyCounts",
]
