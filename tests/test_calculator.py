"""Tests for the leave period calculator."""

from datetime import date, timedelta

import pytest

from premium_leave.domain.models import EmployeeRecord, ParsedPeriod
from premium_leave.domain.policies import LeavePolicy
from premium_leave.scheduling.calculator import (
    LeaveCalculator,
    compute_available_balance,
    compute_end,
    compute_schedule_details,
    split_into_segments,
)


def make_record(period=None, months=3, used=0, remaining=0, name="Ana"):
    return EmployeeRecord(
        name=name,
        months_used=used,
        months_remaining=remaining,
        leave_months=months,
        leave_start=period,
    )


class TestComputeEnd:
    """Tests for compute_end."""

    def test_three_months(self):
        """01/03/2025 plus 3 leave months ends 89 days later."""
        assert compute_end(date(2025, 3, 1), 3) == date(2025, 5, 29)

    def test_one_month(self):
        assert compute_end(date(2025, 1, 1), 1) == date(2025, 1, 30)

    def test_crosses_leap_day(self):
        assert compute_end(date(2024, 2, 1), 1) == date(2024, 3, 1)

    @pytest.mark.parametrize("months", [0, -1])
    def test_non_positive_months_rejected(self, months):
        with pytest.raises(ValueError):
            compute_end(date(2025, 3, 1), months)

    def test_custom_month_length(self):
        calculator = LeaveCalculator(LeavePolicy(days_per_month=31))
        assert calculator.compute_end(date(2025, 1, 1), 1) == date(2025, 1, 31)


class TestSplitIntoSegments:
    """Tests for split_into_segments."""

    def test_three_segments(self):
        segments = split_into_segments(date(2025, 3, 1), 3)
        assert [(s.start, s.end) for s in segments] == [
            (date(2025, 3, 1), date(2025, 3, 30)),
            (date(2025, 3, 31), date(2025, 4, 29)),
            (date(2025, 4, 30), date(2025, 5, 29)),
        ]
        assert [s.sequence for s in segments] == [1, 2, 3]
        assert [s.reference_month for s in segments] == [3, 3, 4]

    @pytest.mark.parametrize("months", [1, 2, 5, 12])
    def test_segments_partition_the_leave(self, months):
        """Segments are contiguous 30-day blocks ending at compute_end."""
        start = date(2024, 11, 15)
        segments = split_into_segments(start, months)
        assert len(segments) == months
        assert segments[0].start == start
        assert segments[-1].end == compute_end(start, months)
        for segment in segments:
            assert segment.days == 30
            assert (segment.end - segment.start).days == 29
        for previous, current in zip(segments, segments[1:]):
            assert current.start == previous.end + timedelta(days=1)

    @pytest.mark.parametrize("months", [0, None, -2])
    def test_no_months_no_segments(self, months):
        assert split_into_segments(date(2025, 3, 1), months) == []


class TestComputeScheduleDetails:
    """Tests for compute_schedule_details."""

    def test_start_only(self):
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3)
        details = compute_schedule_details(record)
        assert details.has_leave
        assert details.start == date(2025, 3, 1)
        assert details.end == date(2025, 5, 29)
        assert details.total_days == 90
        assert details.total_months == 3
        assert details.full_leave_blocks == 1
        assert details.remainder_months == 0
        assert len(details.segments) == 3
        assert not details.is_custom_range
        assert details.description == "1 leave (90 days)"

    def test_blocks_and_remainder(self):
        record = make_record(ParsedPeriod.start_only(date(2025, 1, 1)), months=5)
        details = compute_schedule_details(record)
        assert details.full_leave_blocks == 1
        assert details.remainder_months == 2
        assert details.description == "1 leave + 2 months (150 days)"

    def test_custom_range_uses_literal_end(self):
        """The explicit end wins; totals follow the inclusive span."""
        period = ParsedPeriod.custom_range(date(2025, 3, 1), date(2025, 6, 15))
        details = compute_schedule_details(make_record(period, months=3))
        assert details.end == date(2025, 6, 15)
        assert details.total_days == 107
        assert details.total_months == 4
        assert details.full_leave_blocks == 1
        assert details.remainder_months == 1
        assert details.is_custom_range
        # Segments still follow the requested month count
        assert len(details.segments) == 3

    def test_conflicting_range_counts_requested_months(self):
        period = ParsedPeriod.custom_range(date(2025, 6, 1), date(2025, 3, 1))
        details = compute_schedule_details(make_record(period, months=3))
        assert details.has_leave
        assert details.end == date(2025, 3, 1)
        assert details.total_days == 90
        assert details.total_months == 3

    def test_no_leave_start(self):
        details = compute_schedule_details(make_record(None, months=3))
        assert not details.has_leave
        assert details.segments == ()

    def test_no_months(self):
        details = compute_schedule_details(make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=0))
        assert not details.has_leave

    def test_invalid_period(self):
        details = compute_schedule_details(make_record(ParsedPeriod.invalid("x"), months=3))
        assert not details.has_leave

    def test_idempotent(self):
        """Two calls on the same record give equal results."""
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=4)
        assert compute_schedule_details(record) == compute_schedule_details(record)


class TestAvailableBalance:
    """Tests for compute_available_balance."""

    def test_balance(self):
        balance = compute_available_balance(3, 6)
        assert balance.total_available == 9
        assert balance.used == 3
        assert balance.remaining == 6
        assert balance.percent_used == pytest.approx(33.333, rel=1e-3)

    def test_missing_values_are_zero(self):
        balance = compute_available_balance(None, None)
        assert balance.total_available == 0
        assert balance.percent_used == 0.0


class TestLeaveCalculatorHelpers:
    """Tests for describe, feasibility, statistics and segment lookup."""

    @pytest.fixture
    def calculator(self):
        return LeaveCalculator()

    def test_describe_plural(self, calculator):
        assert calculator.describe(2, 0, 180) == "2 leaves (180 days)"
        assert calculator.describe(0, 1, 30) == "1 month (30 days)"

    def test_feasible_schedule(self, calculator):
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3, remaining=3)
        result = calculator.check_feasibility(record, date(2026, 1, 1))
        assert result.feasible
        assert result.problems == ()

    def test_schedule_past_limit(self, calculator):
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3, remaining=3)
        result = calculator.check_feasibility(record, date(2025, 5, 1))
        assert not result.feasible
        assert "after the limit" in result.problems[0]

    def test_unscheduled_months_not_feasible(self, calculator):
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3, remaining=6)
        result = calculator.check_feasibility(record, None)
        assert not result.feasible
        assert "3 granted leave months" in result.problems[0]

    def test_no_leave_not_feasible(self, calculator):
        assert not calculator.check_feasibility(make_record(None), None).feasible

    def test_statistics(self, calculator):
        records = [
            make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3),
            make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=4),
            make_record(None),
        ]
        stats = calculator.compute_statistics(records)
        assert stats.total == 3
        assert stats.with_leave == 2
        assert stats.without_leave == 1
        assert stats.total_days == 210
        assert stats.total_months == 7
        assert stats.average_months == pytest.approx(3.5)
        assert stats.complete_schedules == 1
        assert stats.partial_schedules == 1

    def test_find_segment_containing(self, calculator):
        record = make_record(ParsedPeriod.start_only(date(2025, 3, 1)), months=3)
        details = calculator.compute_schedule_details(record)
        assert calculator.find_segment_containing(details, date(2025, 4, 15)).sequence == 2
        assert calculator.find_segment_containing(details, date(2025, 6, 1)) is None
