"""Field resolution and record building for raw spreadsheet rows.

Source sheets name the same logical column in many ways ("INÍCIO",
"Inicio de Licença Premio", "A_PARTIR"). FieldResolver maps each logical
field to the first non-empty column among an ordered list of aliases,
ignoring case and accents. RecordBuilder uses it to turn one raw row into
an EmployeeRecord plus the diagnostics found along the way.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union

from premium_leave.domain.models import EmployeeRecord, ParsedPeriod, PeriodKind
from premium_leave.parsing.dates import DateNormalizer, format_date
from premium_leave.validation.diagnostics import Diagnostic, DiagnosticKind

logger = logging.getLogger(__name__)

_FIRST_INTEGER = re.compile(r"(\d+)")


def normalize_key(key) -> str:
    """Normalize a column name: strip accents, upper-case, collapse spaces."""
    if key is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(key))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.upper().replace("_", " ").split())


def parse_month_count(raw) -> Optional[int]:
    """Extract a month count from a cell.

    The first integer in the text is used, so "3", "(3)", "3 meses" and
    "30(DIAS)" all work. Returns None when the cell holds no digits.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw)
    match = _FIRST_INTEGER.search(str(raw))
    return int(match.group(1)) if match else None


class FieldResolver:
    """Case- and accent-insensitive lookup of logical fields in a row.

    Example:
        >>> resolver = FieldResolver({"Servidor": "Ana", "INÍCIO": "jan/2025"})
        >>> resolver.get(["NOME", "SERVIDOR"])
        'Ana'
        >>> resolver.get(["INICIO"])
        'jan/2025'
    """

    def __init__(self, row: Mapping, fuzzy: bool = False):
        """Initialize resolver for one row.

        Args:
            row: Mapping of column name to cell value.
            fuzzy: If True, fall back to substring matching between the
                normalized alias and column names when no exact alias hits.
        """
        self.row = row
        self.fuzzy = fuzzy
        self._keys: dict[str, str] = {}
        for key in row:
            # First column wins when two headers normalize to the same key
            self._keys.setdefault(normalize_key(key), key)

    def get(self, aliases: Union[str, Sequence[str]]) -> str:
        """Get the first non-empty value among aliases, stripped.

        Args:
            aliases: A column name or names in priority order.

        Returns:
            The cell text, or an empty string when nothing matches.
        """
        if isinstance(aliases, str):
            aliases = [aliases]

        for alias in aliases:
            original = self._keys.get(normalize_key(alias))
            if original is not None:
                value = self._text(self.row[original])
                if value:
                    return value

        if self.fuzzy:
            for alias in aliases:
                wanted = normalize_key(alias)
                if not wanted:
                    continue
                for normalized, original in self._keys.items():
                    if wanted in normalized or normalized in wanted:
                        value = self._text(self.row[original])
                        if value:
                            return value

        return ""

    def has(self, aliases: Union[str, Sequence[str]]) -> bool:
        """Check if any alias resolves to a non-empty value."""
        return bool(self.get(aliases))

    @staticmethod
    def _text(value) -> str:
        if value is None:
            return ""
        return str(value).strip()


@dataclass(frozen=True)
class FieldAliases:
    """Column aliases for each logical field, in priority order.

    Defaults cover the Portuguese headers used by the leave spreadsheets
    and their common English equivalents.
    """

    name: tuple[str, ...] = ("SERVIDOR", "NOME", "NOME SERVIDOR", "NOME COMPLETO", "NAME")
    birth_date: tuple[str, ...] = (
        "DATA NASCIMENTO", "DATA DE NASCIMENTO", "NASCIMENTO", "DT NASCIMENTO", "BIRTH DATE",
    )
    admission_date: tuple[str, ...] = (
        "ADMISSAO", "DATA ADMISSAO", "DATA DE ADMISSAO", "DT ADMISSAO", "ADMISSION DATE",
    )
    months_used: tuple[str, ...] = (
        "LICENCA CONCEDIDA", "LICENCAS CONCEDIDAS", "CONCEDIDA", "MONTHS USED",
    )
    months_remaining: tuple[str, ...] = (
        "LICENCA A CONCEDER", "LICENCAS A CONCEDER", "A CONCEDER", "MONTHS REMAINING",
    )
    leave_months: tuple[str, ...] = ("MESES", "MESES DE LICENCA", "LEAVE MONTHS")
    leave_start: tuple[str, ...] = (
        "INICIO", "INICIO DE LICENCA PREMIO", "A PARTIR", "APARTIR", "LEAVE START",
    )
    leave_end: tuple[str, ...] = (
        "FINAL", "FIM", "FINAL DE LICENCA PREMIO", "TERMINO", "LEAVE END",
    )
    schedule_text: tuple[str, ...] = ("CRONOGRAMA", "CRONOGRAMA DE LICENCA", "SCHEDULE")
    position: tuple[str, ...] = ("CARGO", "POSITION")
    unit: tuple[str, ...] = ("LOTACAO", "UNIDADE", "SETOR", "UNIT")
    retirement_date: tuple[str, ...] = (
        "APOSENTADORIA", "DATA APOSENTADORIA", "PREVISAO APOSENTADORIA", "RETIREMENT DATE",
    )


@dataclass
class RecordBuilder:
    """Builds EmployeeRecords from raw rows.

    Example:
        >>> builder = RecordBuilder()
        >>> record, diagnostics = builder.build({"NOME": "Ana", "MESES": "3",
        ...                                      "INICIO": "01/03/2025"})
        >>> record.leave_start.kind
        <PeriodKind.START_ONLY: 'start_only'>
    """

    aliases: FieldAliases = field(default_factory=FieldAliases)
    normalizer: DateNormalizer = field(default_factory=DateNormalizer)
    fuzzy: bool = False

    def build(
        self,
        row: Mapping,
        row_index: Optional[int] = None,
    ) -> tuple[Optional[EmployeeRecord], list[Diagnostic]]:
        """Resolve one raw row.

        Args:
            row: Mapping of column name to cell text.
            row_index: Position of the row in its sheet, reported when the
                row is skipped.

        Returns:
            Tuple of (record, diagnostics). The record is None only when the
            row has no usable name.
        """
        resolver = FieldResolver(row, fuzzy=self.fuzzy)
        diagnostics: list[Diagnostic] = []

        name = resolver.get(self.aliases.name)
        if not name:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.MISSING_REQUIRED_FIELD,
                    message="Row has no employee name and was skipped",
                    field_name="name",
                    details={} if row_index is None else {"row_index": row_index},
                )
            )
            logger.warning("Skipping row %s without employee name", row_index)
            return None, diagnostics

        birth_date = self._optional_date(resolver, self.aliases.birth_date, "birth_date", name, diagnostics)
        admission_date = self._optional_date(
            resolver, self.aliases.admission_date, "admission_date", name, diagnostics
        )

        missing = [
            label
            for label, value in (("birth date", birth_date), ("admission date", admission_date))
            if value is None
        ]
        if missing:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.INCOMPLETE_DATA,
                    message=f"Missing {' and '.join(missing)}",
                    employee=name,
                )
            )

        months_used = self._month_count(resolver, self.aliases.months_used, "months_used", name, diagnostics)
        months_remaining = self._month_count(
            resolver, self.aliases.months_remaining, "months_remaining", name, diagnostics
        )
        leave_months = self._month_count(resolver, self.aliases.leave_months, "leave_months", name, diagnostics)

        leave_start, schedule_months = self._leave_period(resolver, name, diagnostics)
        if schedule_months and not resolver.get(self.aliases.leave_months):
            leave_months = schedule_months

        record = EmployeeRecord(
            name=name,
            birth_date=birth_date,
            admission_date=admission_date,
            months_used=months_used,
            months_remaining=months_remaining,
            leave_months=leave_months,
            leave_start=leave_start,
            position=resolver.get(self.aliases.position),
            unit=resolver.get(self.aliases.unit),
            source_rows=(EmployeeRecord.freeze_row(row),),
        )
        return record, diagnostics

    def build_all(self, rows: Sequence[Mapping]) -> tuple[list[EmployeeRecord], list[Diagnostic]]:
        """Build records for many rows, dropping rows without a name."""
        records = []
        diagnostics: list[Diagnostic] = []
        for index, row in enumerate(rows):
            record, row_diagnostics = self.build(row, row_index=index)
            diagnostics.extend(row_diagnostics)
            if record is not None:
                records.append(record)
        return records, diagnostics

    def _optional_date(self, resolver, aliases, field_name, name, diagnostics):
        raw = resolver.get(aliases)
        if not raw:
            return None
        parsed = self.normalizer.parse_single_date(raw)
        if parsed is None:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.UNPARSEABLE_DATE,
                    message=f"Could not parse {field_name.replace('_', ' ')}",
                    employee=name,
                    field_name=field_name,
                    value=raw,
                )
            )
        return parsed

    def _month_count(self, resolver, aliases, field_name, name, diagnostics) -> int:
        raw = resolver.get(aliases)
        if not raw:
            return 0
        count = parse_month_count(raw)
        if count is None:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.INVALID_NUMBER,
                    message=f"Could not read {field_name.replace('_', ' ')} as a number",
                    employee=name,
                    field_name=field_name,
                    value=raw,
                )
            )
            return 0
        return count

    def _leave_period(self, resolver, name, diagnostics) -> tuple[Optional[ParsedPeriod], Optional[int]]:
        start_raw = resolver.get(self.aliases.leave_start)
        end_raw = resolver.get(self.aliases.leave_end)

        period = None
        if start_raw and end_raw:
            start = self.normalizer.parse_single_date(start_raw)
            end = self.normalizer.parse_single_date(end_raw)
            if start is not None and end is not None:
                period = ParsedPeriod.custom_range(start, end, f"{start_raw} - {end_raw}")
            elif end is None:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNPARSEABLE_DATE,
                        message="Could not parse leave end",
                        employee=name,
                        field_name="leave_end",
                        value=end_raw,
                    )
                )

        if period is None:
            raw = start_raw or resolver.get(self.aliases.schedule_text)
            if not raw:
                return None, None
            scheduled = self.normalizer.parse_schedule_text(raw)
            if scheduled is not None:
                months, period = scheduled
                return period, months
            period = self.normalizer.parse_period(raw)

        if period.kind is PeriodKind.INVALID:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.UNPARSEABLE_DATE,
                    message="Could not parse leave start",
                    employee=name,
                    field_name="leave_start",
                    value=period.raw,
                )
            )
            logger.debug("Leave start for %s unparseable: %r", name, period.raw)
            return None, None

        if period.has_conflict:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.DATE_CONFLICT,
                    message=(
                        f"Leave starts {format_date(period.start)} after it ends "
                        f"{format_date(period.end)}"
                    ),
                    employee=name,
                    field_name="leave_start",
                    value=period.raw,
                )
            )
            logger.warning("Date conflict in leave period for %s: %r", name, period.raw)

        return period, None
