"""Policy definitions for leave scheduling rules.

This module contains configurable policies that hold the business constants
for leave arithmetic and urgency classification. Policies are kept separate
from the calculator and classifier to allow independent testing and easy
modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class LeavePolicy:
    """Fixed-length leave arithmetic.

    A leave month is always 30 days regardless of the calendar, and one
    full premium leave is 3 leave months (90 days).
    """

    days_per_month: int = 30
    months_per_full_leave: int = 3

    @property
    def days_per_full_leave(self) -> int:
        return self.days_per_month * self.months_per_full_leave


class UrgencyPolicy(ABC):
    """Abstract base class for urgency thresholds."""

    @abstractmethod
    def urgent_max_years(self) -> float:
        """Largest leave-to-retirement gap (years) still classed as urgent."""
        pass

    @abstractmethod
    def medium_max_years(self) -> float:
        """Largest gap (years) classed as medium."""
        pass

    @abstractmethod
    def escalate_low_months(self) -> int:
        """Unused months that raise a low classification to medium."""
        pass

    @abstractmethod
    def escalate_medium_months(self) -> int:
        """Unused months that raise a medium classification to urgent."""
        pass

    @abstractmethod
    def days_per_year(self) -> float:
        """Year length used to turn a day gap into years."""
        pass


@dataclass(frozen=True)
class DefaultUrgencyPolicy(UrgencyPolicy):
    """Default urgency policy implementation.

    Classification by years between leave end and retirement:
    - gap < 0: urgent (leave would end after retirement)
    - 0 <= gap <= 2: urgent
    - 2 < gap <= 5: medium
    - gap > 5: low

    Unused granted months escalate one level:
    - low with >= 3 unused months becomes medium
    - medium with >= 6 unused months becomes urgent
    """

    urgent_years: float = 2.0
    medium_years: float = 5.0
    escalate_low: int = 3
    escalate_medium: int = 6
    year_days: float = 365.25

    def urgent_max_years(self) -> float:
        return self.urgent_years

    def medium_max_years(self) -> float:
        return self.medium_years

    def escalate_low_months(self) -> int:
        return self.escalate_low

    def escalate_medium_months(self) -> int:
        return self.escalate_medium

    def days_per_year(self) -> float:
        return self.year_days


@dataclass(frozen=True)
class ScorePolicy:
    """Weights for the 0-100 urgency score used for ranking.

    - gap mapped linearly over a 10-year horizon (0 years -> 100)
    - +2 per unused month, capped at 100
    - 50 when no leave is scheduled, 25 when retirement is unknown
    """

    horizon_years: float = 10.0
    per_unused_month: int = 2
    no_leave: int = 50
    no_retirement: int = 25
