"""Retirement estimator interface.

Retirement eligibility rules (age, service time, transition rules) are
computed outside this package. The classifier only needs an estimator:
anything callable as `estimator(record) -> RetirementEstimate`. The
adapters here read an already-computed date; they do not implement any
eligibility policy.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Mapping, Optional, Union

from premium_leave.domain.models import EmployeeRecord, RetirementEstimate
from premium_leave.parsing.dates import DateNormalizer
from premium_leave.parsing.fields import FieldAliases, FieldResolver

UNKNOWN_RETIREMENT = RetirementEstimate(eligible=False, estimated_date=None)


class RetirementEstimator(ABC):
    """Abstract base class for retirement estimators."""

    @abstractmethod
    def estimate(self, record: EmployeeRecord) -> RetirementEstimate:
        """Estimate retirement for one employee.

        Returns:
            The estimate; an ineligible estimate when it cannot be computed.
        """
        pass

    def __call__(self, record: EmployeeRecord) -> RetirementEstimate:
        return self.estimate(record)


EstimatorLike = Union[RetirementEstimator, Callable[[EmployeeRecord], Optional[RetirementEstimate]]]


class ColumnRetirementEstimator(RetirementEstimator):
    """Reads a precomputed retirement date column from the record's source rows."""

    def __init__(
        self,
        aliases: Optional[FieldAliases] = None,
        normalizer: Optional[DateNormalizer] = None,
    ):
        self.aliases = aliases or FieldAliases()
        self.normalizer = normalizer or DateNormalizer()

    def estimate(self, record: EmployeeRecord) -> RetirementEstimate:
        for row in record.source_dicts():
            raw = FieldResolver(row).get(self.aliases.retirement_date)
            if not raw:
                continue
            parsed = self.normalizer.parse_single_date(raw)
            if parsed is not None:
                return RetirementEstimate(eligible=True, estimated_date=parsed)
        return UNKNOWN_RETIREMENT


class FixedRetirementEstimator(RetirementEstimator):
    """Looks up retirement dates by employee name."""

    def __init__(self, dates: Mapping[str, date]):
        self.dates = dict(dates)

    def estimate(self, record: EmployeeRecord) -> RetirementEstimate:
        estimated = self.dates.get(record.name)
        if estimated is None:
            return UNKNOWN_RETIREMENT
        return RetirementEstimate(eligible=True, estimated_date=estimated)
