"""Tests for retirement estimators and batch analysis."""

from datetime import date

import pytest

from premium_leave.domain.models import EmployeeRecord, RetirementEstimate, UrgencyLevel
from premium_leave.parsing.fields import FieldAliases
from premium_leave.scheduling.analyzer import LeaveAnalyzer, UrgencyCounts
from premium_leave.scheduling.retirement import (
    UNKNOWN_RETIREMENT,
    ColumnRetirementEstimator,
    FixedRetirementEstimator,
    RetirementEstimator,
)
from premium_leave.validation.diagnostics import DiagnosticKind


def row(name, start="01/03/2025", months="3", retirement="", remaining=""):
    return {
        "SERVIDOR": name,
        "DATA NASCIMENTO": "10/04/1965",
        "ADMISSAO": "01/02/1990",
        "MESES": months,
        "INICIO": start,
        "LICENCA A CONCEDER": remaining,
        "APOSENTADORIA": retirement,
    }


class TestRetirementEstimators:
    """Tests for the retirement estimator adapters."""

    def test_column_estimator(self):
        record = EmployeeRecord(
            name="Ana",
            source_rows=(EmployeeRecord.freeze_row({"Aposentadoria": "29/05/2028"}),),
        )
        estimate = ColumnRetirementEstimator()(record)
        assert estimate.is_usable
        assert estimate.estimated_date == date(2028, 5, 29)

    def test_column_estimator_missing_or_bad(self):
        missing = EmployeeRecord(name="Ana")
        bad = EmployeeRecord(
            name="Ana",
            source_rows=(EmployeeRecord.freeze_row({"APOSENTADORIA": "indefinida"}),),
        )
        estimator = ColumnRetirementEstimator()
        assert estimator(missing) == UNKNOWN_RETIREMENT
        assert estimator(bad) == UNKNOWN_RETIREMENT

    def test_column_estimator_custom_alias(self):
        record = EmployeeRecord(
            name="Ana",
            source_rows=(EmployeeRecord.freeze_row({"RETIRES": "2030-01-01"}),),
        )
        estimator = ColumnRetirementEstimator(FieldAliases(retirement_date=("RETIRES",)))
        assert estimator(record).estimated_date == date(2030, 1, 1)

    def test_fixed_estimator(self):
        estimator = FixedRetirementEstimator({"Ana": date(2030, 1, 1)})
        assert estimator(EmployeeRecord(name="Ana")).estimated_date == date(2030, 1, 1)
        assert estimator(EmployeeRecord(name="Bruno")) == UNKNOWN_RETIREMENT

    def test_estimator_is_abstract(self):
        with pytest.raises(TypeError):
            RetirementEstimator()


class TestUrgencyCounts:
    """Tests for UrgencyCounts."""

    def test_add_and_as_dict(self):
        counts = UrgencyCounts()
        for level in (UrgencyLevel.URGENT, UrgencyLevel.URGENT, UrgencyLevel.LOW,
                      UrgencyLevel.NO_LEAVE_SCHEDULED):
            counts.add(level)
        assert counts.as_dict() == {"total": 4, "urgent": 2, "medium": 0, "low": 1, "no_leave": 1}
        assert counts.for_level(UrgencyLevel.URGENT) == 2


class TestLeaveAnalyzer:
    """Tests for LeaveAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        return LeaveAnalyzer(ColumnRetirementEstimator())

    @pytest.fixture
    def rows(self):
        return [
            row("Ana", retirement="29/05/2025"),  # urgent, gap 0
            row("Bruno", retirement="29/05/2028"),  # medium
            row("   ", retirement="29/05/2028"),  # skipped
            row("Carla", start=""),  # no leave
            row("Davi", retirement="29/05/2032"),  # low
            row("Elisa", retirement="29/11/2026"),  # urgent, larger gap
            row("Fabio"),  # low, retirement unknown
        ]

    def test_counts(self, analyzer, rows):
        result = analyzer.analyze_rows(rows)
        assert result.counts.as_dict() == {
            "total": 6, "urgent": 2, "medium": 1, "low": 2, "no_leave": 1,
        }
        assert len(result) == 6

    def test_input_order_kept(self, analyzer, rows):
        result = analyzer.analyze_rows(rows)
        assert [entry.name for entry in result.entries] == ["Ana", "Bruno", "Carla", "Davi", "Elisa", "Fabio"]

    def test_blank_name_excluded_with_diagnostic(self, analyzer, rows):
        result = analyzer.analyze_rows(rows)
        skipped = result.diagnostics.by_kind(DiagnosticKind.MISSING_REQUIRED_FIELD)
        assert len(skipped) == 1
        assert skipped[0].details == {"row_index": 2}
        assert result.diagnostics.entries[0] is skipped[0]

    def test_record_without_leave_included(self, analyzer, rows):
        entry = analyzer.analyze_rows(rows).get("Carla")
        assert entry.level is UrgencyLevel.NO_LEAVE_SCHEDULED
        assert entry.score == 50

    def test_unknown_retirement_reported(self, analyzer, rows):
        result = analyzer.analyze_rows(rows)
        assert result.get("Fabio").level is UrgencyLevel.LOW
        assert result.get("Fabio").score == 25
        incomplete = [
            d for d in result.diagnostics.for_employee("Fabio")
            if d.field_name == "retirement_date"
        ]
        assert len(incomplete) == 1

    def test_by_level_sorted_by_gap(self, analyzer, rows):
        result = analyzer.analyze_rows(rows)
        urgent = result.by_level(UrgencyLevel.URGENT)
        assert [entry.name for entry in urgent] == ["Ana", "Elisa"]

    def test_unknown_gap_sorted_last(self, analyzer, rows):
        low = analyzer.analyze_rows(rows).by_level(UrgencyLevel.LOW)
        assert [entry.name for entry in low] == ["Davi", "Fabio"]

    def test_grouped(self, analyzer, rows):
        groups = analyzer.analyze_rows(rows).grouped()
        assert list(groups) == [
            UrgencyLevel.URGENT,
            UrgencyLevel.MEDIUM,
            UrgencyLevel.LOW,
            UrgencyLevel.NO_LEAVE_SCHEDULED,
        ]
        assert [entry.name for entry in groups[UrgencyLevel.MEDIUM]] == ["Bruno"]

    def test_attention_required(self, analyzer, rows):
        rows.append(row("Gil", retirement="29/05/2032", remaining="5"))
        attention = analyzer.analyze_rows(rows).attention_required()
        assert [entry.name for entry in attention] == ["Ana", "Elisa", "Gil"]

    def test_memoized_per_instance(self, rows):
        calls = []

        def estimator(record):
            calls.append(record.name)
            return RetirementEstimate(eligible=True, estimated_date=date(2028, 5, 29))

        analyzer = LeaveAnalyzer(estimator)
        first = analyzer.analyze_rows(rows)
        second = analyzer.analyze_rows(rows)
        assert len(calls) == 6
        assert first.entries == second.entries

        analyzer.clear_cache()
        analyzer.analyze_rows(rows)
        assert len(calls) == 12

    def test_memoize_disabled(self, rows):
        calls = []

        def estimator(record):
            calls.append(record.name)
            return None

        analyzer = LeaveAnalyzer(estimator, memoize=False)
        analyzer.analyze_rows(rows)
        analyzer.analyze_rows(rows)
        assert len(calls) == 12

    def test_estimator_returning_none(self, rows):
        result = LeaveAnalyzer(lambda record: None).analyze_rows(rows)
        assert result.get("Ana").assessment.retirement_date is None

    def test_analyze_records(self):
        analyzer = LeaveAnalyzer(FixedRetirementEstimator({}))
        result = analyzer.analyze_records([EmployeeRecord(name="Ana"), EmployeeRecord(name="Bruno")])
        assert result.counts.no_leave == 2
        assert len(result.diagnostics) == 0

    def test_data_problems_do_not_stop_batch(self, analyzer):
        rows = [
            row("Ana", start="sem data", retirement="29/05/2028"),
            row("Bruno", months="três", retirement="29/05/2028"),
            row("Carla", retirement="29/05/2028"),
        ]
        result = analyzer.analyze_rows(rows)
        assert len(result) == 3
        assert result.diagnostics.has_errors
        assert result.get("Carla").level is UrgencyLevel.MEDIUM
