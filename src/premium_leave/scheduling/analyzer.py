"""Batch analysis of employee leave schedules.

LeaveAnalyzer runs the full pipeline over a sheet: rows are resolved into
records, each record gets a schedule, a retirement estimate, an urgency
assessment and a score. Data problems are collected in a DiagnosticLog
and never stop the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from premium_leave.domain.models import (
    EmployeeRecord,
    LeaveScheduleDetails,
    UrgencyAssessment,
    UrgencyLevel,
)
from premium_leave.parsing.fields import RecordBuilder
from premium_leave.scheduling.calculator import LeaveCalculator
from premium_leave.scheduling.retirement import UNKNOWN_RETIREMENT, EstimatorLike
from premium_leave.scheduling.urgency import UrgencyClassifier
from premium_leave.validation.diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzedRecord:
    """Everything computed for one employee."""

    record: EmployeeRecord
    schedule: LeaveScheduleDetails
    assessment: UrgencyAssessment
    score: int

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def level(self) -> UrgencyLevel:
        return self.assessment.level


@dataclass
class UrgencyCounts:
    """Number of employees per urgency level."""

    total: int = 0
    urgent: int = 0
    medium: int = 0
    low: int = 0
    no_leave: int = 0

    def add(self, level: UrgencyLevel) -> None:
        self.total += 1
        if level is UrgencyLevel.URGENT:
            self.urgent += 1
        elif level is UrgencyLevel.MEDIUM:
            self.medium += 1
        elif level is UrgencyLevel.LOW:
            self.low += 1
        else:
            self.no_leave += 1

    def for_level(self, level: UrgencyLevel) -> int:
        return {
            UrgencyLevel.URGENT: self.urgent,
            UrgencyLevel.MEDIUM: self.medium,
            UrgencyLevel.LOW: self.low,
            UrgencyLevel.NO_LEAVE_SCHEDULED: self.no_leave,
        }[level]

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "urgent": self.urgent,
            "medium": self.medium,
            "low": self.low,
            "no_leave": self.no_leave,
        }


def _gap_sort_key(entry: AnalyzedRecord):
    months_gap = entry.assessment.months_gap
    return (months_gap is None, months_gap if months_gap is not None else 0)


@dataclass
class AnalysisResult:
    """Result of analyzing a batch of records.

    Attributes:
        entries: One AnalyzedRecord per record, in input order.
        counts: Number of employees per level.
        diagnostics: Data-quality issues found along the way.
    """

    entries: list[AnalyzedRecord] = field(default_factory=list)
    counts: UrgencyCounts = field(default_factory=UrgencyCounts)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    def by_level(self, level: UrgencyLevel) -> list[AnalyzedRecord]:
        """Entries of one level, smallest months gap first, unknown gap last."""
        return sorted(
            (entry for entry in self.entries if entry.level is level),
            key=_gap_sort_key,
        )

    def grouped(self) -> dict[UrgencyLevel, list[AnalyzedRecord]]:
        """All four groups, most urgent first."""
        return {
            level: self.by_level(level)
            for level in sorted(UrgencyLevel, key=lambda lvl: lvl.priority)
        }

    def attention_required(self) -> list[AnalyzedRecord]:
        """Entries that are urgent or have unscheduled months, highest score first."""
        flagged = [
            entry for entry in self.entries
            if UrgencyClassifier.needs_attention(entry.assessment)
        ]
        return sorted(flagged, key=lambda entry: (-entry.score, entry.name))

    def get(self, name: str) -> Optional[AnalyzedRecord]:
        """Get the first entry for an employee name."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)


class LeaveAnalyzer:
    """Runs records through schedule, retirement and urgency stages.

    Example:
        >>> analyzer = LeaveAnalyzer(ColumnRetirementEstimator())
        >>> result = analyzer.analyze_rows(load_rows("leave.csv"))
        >>> result.counts.urgent
        3
    """

    def __init__(
        self,
        estimator: EstimatorLike,
        calculator: Optional[LeaveCalculator] = None,
        classifier: Optional[UrgencyClassifier] = None,
        builder: Optional[RecordBuilder] = None,
        memoize: bool = True,
    ):
        """Initialize analyzer.

        Args:
            estimator: Callable giving a RetirementEstimate for a record.
                Returning None is treated as an unknown retirement date.
            calculator: Leave calculator. Defaults to the classifier's one.
            classifier: Urgency classifier.
            builder: Record builder used by analyze_rows.
            memoize: Cache results per record on this instance.
        """
        self.estimator = estimator
        self.classifier = classifier or UrgencyClassifier(calculator=calculator)
        self.calculator = calculator or self.classifier.calculator
        self.builder = builder or RecordBuilder()
        self.memoize = memoize
        self._cache: dict[EmployeeRecord, AnalyzedRecord] = {}

    def analyze_rows(self, rows: Iterable[Mapping]) -> AnalysisResult:
        """Build records from raw rows and analyze them."""
        records, diagnostics = self.builder.build_all(list(rows))
        result = self.analyze_records(records)
        # Row diagnostics come before anything found during analysis
        result.diagnostics.entries[:0] = diagnostics
        return result

    def analyze_records(self, records: Iterable[EmployeeRecord]) -> AnalysisResult:
        """Analyze records, keeping input order."""
        result = AnalysisResult()
        for record in records:
            entry = self.analyze_record(record, result.diagnostics)
            result.entries.append(entry)
            result.counts.add(entry.level)

        logger.info(
            "Analyzed %d employees: %d urgent, %d medium, %d low, %d without leave",
            result.counts.total,
            result.counts.urgent,
            result.counts.medium,
            result.counts.low,
            result.counts.no_leave,
        )
        return result

    def analyze_record(
        self,
        record: EmployeeRecord,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> AnalyzedRecord:
        """Analyze a single record.

        Args:
            record: The employee record.
            diagnostics: Log that receives issues found for this record.
        """
        if self.memoize and record in self._cache:
            entry = self._cache[record]
        else:
            entry = self._compute(record)
            if self.memoize:
                self._cache[record] = entry

        if diagnostics is not None and entry.schedule.has_leave and not entry.assessment.has_retirement_date:
            diagnostics.add(
                Diagnostic(
                    kind=DiagnosticKind.INCOMPLETE_DATA,
                    message="Retirement date could not be estimated",
                    employee=record.name,
                    field_name="retirement_date",
                )
            )
        return entry

    def clear_cache(self) -> None:
        self._cache.clear()

    def _compute(self, record: EmployeeRecord) -> AnalyzedRecord:
        schedule = self.calculator.compute_schedule_details(record)
        estimate = self.estimator(record) or UNKNOWN_RETIREMENT
        assessment = self.classifier.classify_schedule(record, schedule, estimate)
        return AnalyzedRecord(
            record=record,
            schedule=schedule,
            assessment=assessment,
            score=self.classifier.score_assessment(assessment),
        )
