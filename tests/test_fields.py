"""Tests for field resolution and record building."""

from datetime import date

import pytest

from premium_leave.domain.models import PeriodKind
from premium_leave.parsing.fields import (
    FieldAliases,
    FieldResolver,
    RecordBuilder,
    normalize_key,
    parse_month_count,
)
from premium_leave.validation.diagnostics import DiagnosticKind


class TestNormalizeKey:
    """Tests for column name normalization."""

    def test_accents_case_and_underscores(self):
        assert normalize_key("Início de Licença_Prêmio") == "INICIO DE LICENCA PREMIO"

    def test_whitespace_collapsed(self):
        assert normalize_key("  A   PARTIR ") == "A PARTIR"

    def test_none(self):
        assert normalize_key(None) == ""


class TestParseMonthCount:
    """Tests for month count extraction."""

    @pytest.mark.parametrize("raw,expected", [
        ("3", 3),
        ("(3)", 3),
        ("3 meses", 3),
        ("30(DIAS)", 30),
        (6, 6),
        (4.0, 4),
    ])
    def test_first_integer_wins(self, raw, expected):
        assert parse_month_count(raw) == expected

    def test_no_digits(self):
        assert parse_month_count("três") is None
        assert parse_month_count(None) is None


class TestFieldResolver:
    """Tests for FieldResolver."""

    def test_case_and_accent_insensitive(self):
        resolver = FieldResolver({"Servidor": "Ana", "INÍCIO": "jan/2025"})
        assert resolver.get(["NOME", "SERVIDOR"]) == "Ana"
        assert resolver.get("inicio") == "jan/2025"

    def test_first_non_empty_alias_wins(self):
        """An empty first alias falls through to the next one."""
        resolver = FieldResolver({"SERVIDOR": "  ", "NOME": "Bruno"})
        assert resolver.get(["SERVIDOR", "NOME"]) == "Bruno"

    def test_alias_priority(self):
        resolver = FieldResolver({"NOME": "Carla", "SERVIDOR": "Carla Souza"})
        assert resolver.get(["SERVIDOR", "NOME"]) == "Carla Souza"

    def test_missing_field(self):
        resolver = FieldResolver({"NOME": "Ana"})
        assert resolver.get(["MESES"]) == ""
        assert not resolver.has(["MESES"])

    def test_fuzzy_substring_match(self):
        """Fuzzy mode matches aliases contained in longer headers."""
        row = {"Nº de MESES solicitados": "3"}
        assert FieldResolver(row).get("MESES") == ""
        assert FieldResolver(row, fuzzy=True).get("MESES") == "3"


class TestRecordBuilder:
    """Tests for RecordBuilder."""

    @pytest.fixture
    def builder(self):
        return RecordBuilder()

    @pytest.fixture
    def full_row(self):
        return {
            "SERVIDOR": "Ana Lima",
            "DATA NASCIMENTO": "10/04/1965",
            "ADMISSÃO": "01/02/1990",
            "LICENÇA CONCEDIDA": "3",
            "LICENÇA A CONCEDER": "6",
            "MESES": "3",
            "INÍCIO": "01/03/2025",
            "CARGO": "Analista",
            "LOTAÇÃO": "Secretaria",
        }

    def test_full_row(self, builder, full_row):
        """A complete row resolves every field without diagnostics."""
        record, diagnostics = builder.build(full_row)
        assert diagnostics == []
        assert record.name == "Ana Lima"
        assert record.birth_date == date(1965, 4, 10)
        assert record.admission_date == date(1990, 2, 1)
        assert record.months_used == 3
        assert record.months_remaining == 6
        assert record.leave_months == 3
        assert record.leave_start.kind is PeriodKind.START_ONLY
        assert record.leave_start.start == date(2025, 3, 1)
        assert record.position == "Analista"
        assert record.unit == "Secretaria"

    def test_source_row_kept(self, builder, full_row):
        record, _ = builder.build(full_row)
        assert record.source_dicts() == [full_row]

    def test_blank_name_skipped(self, builder, full_row):
        """Rows without a name produce no record and a diagnostic."""
        full_row["SERVIDOR"] = "   "
        record, diagnostics = builder.build(full_row, row_index=4)
        assert record is None
        assert len(diagnostics) == 1
        assert diagnostics[0].kind is DiagnosticKind.MISSING_REQUIRED_FIELD
        assert diagnostics[0].details == {"row_index": 4}

    def test_missing_leave_start(self, builder, full_row):
        """A record without leave start is still built."""
        del full_row["INÍCIO"]
        record, diagnostics = builder.build(full_row)
        assert record is not None
        assert record.leave_start is None
        assert diagnostics == []

    def test_unparseable_leave_start(self, builder, full_row):
        full_row["INÍCIO"] = "a definir"
        record, diagnostics = builder.build(full_row)
        assert record.leave_start is None
        kinds = [d.kind for d in diagnostics]
        assert kinds == [DiagnosticKind.UNPARSEABLE_DATE]
        assert diagnostics[0].value == "a definir"
        assert diagnostics[0].employee == "Ana Lima"

    def test_start_and_end_columns_give_custom_range(self, builder, full_row):
        full_row["FINAL"] = "15/06/2025"
        record, diagnostics = builder.build(full_row)
        assert diagnostics == []
        assert record.leave_start.kind is PeriodKind.CUSTOM_RANGE
        assert record.leave_start.end == date(2025, 6, 15)

    def test_range_in_start_column(self, builder, full_row):
        full_row["INÍCIO"] = "01/03/2025 a 29/05/2025"
        record, _ = builder.build(full_row)
        assert record.leave_start.kind is PeriodKind.CUSTOM_RANGE

    def test_date_conflict_reported_and_kept(self, builder, full_row):
        """Start after end keeps the period and adds a DATE_CONFLICT."""
        full_row["FINAL"] = "01/01/2025"
        record, diagnostics = builder.build(full_row)
        assert record.leave_start.has_conflict
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DATE_CONFLICT]

    def test_unparseable_end_column(self, builder, full_row):
        """A bad end date falls back to the start date alone."""
        full_row["FINAL"] = "??"
        record, diagnostics = builder.build(full_row)
        assert record.leave_start.kind is PeriodKind.START_ONLY
        assert [d.field_name for d in diagnostics] == ["leave_end"]

    def test_schedule_text_used_without_start(self, builder, full_row):
        del full_row["INÍCIO"]
        full_row["CRONOGRAMA"] = "mar/2025"
        record, _ = builder.build(full_row)
        assert record.leave_start.start == date(2025, 3, 1)

    def test_months_from_schedule_text(self, builder, full_row):
        """A "N meses a partir de" note gives the start and month count."""
        del full_row["INÍCIO"]
        del full_row["MESES"]
        full_row["CRONOGRAMA"] = "3 meses a partir de jan/2025"
        record, diagnostics = builder.build(full_row)
        assert diagnostics == []
        assert record.leave_start.kind is PeriodKind.START_ONLY
        assert record.leave_start.start == date(2025, 1, 1)
        assert record.leave_months == 3

    def test_months_column_wins_over_schedule_text(self, builder, full_row):
        del full_row["INÍCIO"]
        full_row["MESES"] = "6"
        full_row["CRONOGRAMA"] = "3 meses a partir de jan/2025"
        record, _ = builder.build(full_row)
        assert record.leave_start.start == date(2025, 1, 1)
        assert record.leave_months == 6

    def test_missing_personal_dates(self, builder):
        record, diagnostics = builder.build({"NOME": "Bruno", "MESES": "3"})
        assert record.birth_date is None
        assert [d.kind for d in diagnostics] == [DiagnosticKind.INCOMPLETE_DATA]
        assert "birth date and admission date" in diagnostics[0].message

    def test_unparseable_birth_date(self, builder, full_row):
        full_row["DATA NASCIMENTO"] = "31/02/1965"
        record, diagnostics = builder.build(full_row)
        assert record.birth_date is None
        kinds = [d.kind for d in diagnostics]
        assert kinds == [DiagnosticKind.UNPARSEABLE_DATE, DiagnosticKind.INCOMPLETE_DATA]

    def test_invalid_month_count(self, builder, full_row):
        full_row["MESES"] = "três"
        record, diagnostics = builder.build(full_row)
        assert record.leave_months == 0
        assert diagnostics[0].kind is DiagnosticKind.INVALID_NUMBER
        assert diagnostics[0].field_name == "leave_months"

    def test_custom_aliases(self):
        aliases = FieldAliases(name=("EMPLOYEE",), leave_months=("DURATION",))
        record, _ = RecordBuilder(aliases=aliases).build({"EMPLOYEE": "Dana", "DURATION": "2"})
        assert record.name == "Dana"
        assert record.leave_months == 2

    def test_build_all_drops_nameless_rows(self, builder, full_row):
        rows = [full_row, {"MESES": "3"}, dict(full_row, SERVIDOR="Bruno")]
        records, diagnostics = builder.build_all(rows)
        assert [r.name for r in records] == ["Ana Lima", "Bruno"]
        skipped = [d for d in diagnostics if d.kind is DiagnosticKind.MISSING_REQUIRED_FIELD]
        assert skipped[0].details == {"row_index": 1}
