"""Date normalization for spreadsheet cells.

Leave spreadsheets hold dates in many shapes: full Brazilian dates
(15/01/2025), month/year pairs (01/2025, jan/2025, Jan-25, janeiro/2025),
ISO dates and explicit ranges ("01/03/2025 - 29/05/2025"). Each shape is
recognized by an independent matcher; matchers are tried in a fixed
priority order and the first one that recognizes the token wins.

Parsing never raises. A token that matches no shape yields None (or an
INVALID period), and the caller records a diagnostic.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from premium_leave.domain.models import ParsedPeriod

logger = logging.getLogger(__name__)

PORTUGUESE_MONTHS = {
    "jan": 1, "fev": 2, "mar": 3, "abr": 4, "mai": 5, "jun": 6,
    "jul": 7, "ago": 8, "set": 9, "out": 10, "nov": 11, "dez": 12,
    "janeiro": 1, "fevereiro": 2, "marco": 3, "abril": 4, "maio": 5,
    "junho": 6, "julho": 7, "agosto": 8, "setembro": 9, "outubro": 10,
    "novembro": 11, "dezembro": 12,
}

ENGLISH_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
    "january": 1, "february": 2, "march": 3, "april": 4, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10,
    "november": 11, "december": 12,
}

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{4}|\d{2})$")
_TEXT_MONTH_YEAR = re.compile(
    r"^([^\W\d_]+)\.?(?:\s*[/\-]\s*|\s+de\s+|\s+)(\d{4}|\d{2})$",
    re.IGNORECASE,
)
_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

_RANGE_ENDPOINT = r"\d{1,2}/\d{1,2}/(?:\d{4}|\d{2})"
_RANGE = re.compile(
    rf"^({_RANGE_ENDPOINT})(?:\s*[-–]\s*|\s+(?:a|to|ate|até)\s+)({_RANGE_ENDPOINT})$",
    re.IGNORECASE,
)

_MONTHS_FROM = re.compile(
    r"(\d+)\s*m[eê]s(?:es)?\s*(?:a\s*partir\s*de|em)\s*([^\s,]+)",
    re.IGNORECASE,
)

_QUOTES = "\"'"


def normalize_year(year: int) -> int:
    """Expand a two-digit year: 00-49 -> 2000-2049, 50-99 -> 1950-1999."""
    if 0 <= year <= 49:
        return 2000 + year
    if 50 <= year <= 99:
        return 1900 + year
    return year


def normalize_month_key(raw: str) -> str:
    """Lower-case a month name and strip accents and punctuation."""
    decomposed = unicodedata.normalize("NFD", raw.lower())
    return "".join(ch for ch in decomposed if "a" <= ch <= "z")


def _expand_year(digits: str) -> int:
    """Only two-digit years are expanded; "0025" stays year 25."""
    year = int(digits)
    return normalize_year(year) if len(digits) == 2 else year


def month_from_name(name: str) -> Optional[int]:
    """Look up a month name in the Portuguese table, then the English one.

    Full names and 3-letter abbreviations are accepted in both languages.
    When neither table knows the whole word, its 3-letter prefix is tried
    ("outub" -> 10); anything else yields None.
    """
    key = normalize_month_key(name)
    if not key:
        return None
    for table in (PORTUGUESE_MONTHS, ENGLISH_MONTHS):
        if key in table:
            return table[key]
    if len(key) >= 3:
        prefix = key[:3]
        for table in (PORTUGUESE_MONTHS, ENGLISH_MONTHS):
            if prefix in table:
                return table[prefix]
    return None


def format_date(value: Optional[date]) -> str:
    """Format a date as DD/MM/YYYY, or an empty string for None."""
    if value is None:
        return ""
    return f"{value.day:02d}/{value.month:02d}/{value.year}"


@dataclass(frozen=True)
class DateNormalizer:
    """Parses heterogeneous date tokens into calendar dates.

    Attributes:
        min_year: Earliest accepted year.
        max_year: Latest accepted year.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.parse_single_date("jan/26")
        datetime.date(2026, 1, 1)
        >>> normalizer.parse_period("01/03/2025 a 29/05/2025").kind
        <PeriodKind.CUSTOM_RANGE: 'custom_range'>
    """

    min_year: int = 1900
    max_year: int = 2100

    @property
    def matchers(self) -> tuple[Callable[[str], Optional[date]], ...]:
        """Single-date recognizers in priority order."""
        return (
            self._match_day_month_year,
            self._match_month_year,
            self._match_text_month_year,
            self._match_iso,
        )

    def parse_single_date(self, token) -> Optional[date]:
        """Parse one date token.

        Args:
            token: Raw cell text.

        Returns:
            The parsed date, or None when no recognized shape matches.
        """
        cleaned = self._clean(token)
        if not cleaned:
            return None

        for matcher in self.matchers:
            result = matcher(cleaned)
            if result is not _NO_MATCH:
                return result

        logger.debug("Unrecognized date token: %r", token)
        return None

    def parse_period(self, token) -> ParsedPeriod:
        """Interpret a leave-start cell as a range, a start date or invalid.

        Ranges are only recognized between two full DD/MM/YYYY-family
        dates joined by "-", "a" or "to".
        """
        raw = "" if token is None else str(token)
        cleaned = self._clean(token)
        if not cleaned:
            return ParsedPeriod.invalid(raw)

        match = _RANGE.match(cleaned)
        if match:
            start = self.parse_single_date(match.group(1))
            end = self.parse_single_date(match.group(2))
            if start is not None and end is not None:
                return ParsedPeriod.custom_range(start, end, raw)

        start = self.parse_single_date(cleaned)
        if start is not None:
            return ParsedPeriod.start_only(start, raw)

        return ParsedPeriod.invalid(raw)

    def parse_schedule_text(self, token) -> Optional[tuple[int, ParsedPeriod]]:
        """Read a "3 meses a partir de jan/2025" schedule note.

        Returns:
            Tuple of (month count, start-only period), or None when the
            text is not in that form or its date does not parse.
        """
        raw = "" if token is None else str(token)
        match = _MONTHS_FROM.search(self._clean(token))
        if not match:
            return None
        months = int(match.group(1))
        start = self.parse_single_date(match.group(2).rstrip("."))
        if start is None or months <= 0:
            return None
        return months, ParsedPeriod.start_only(start, raw)

    def _clean(self, token) -> str:
        if not isinstance(token, str):
            return ""
        return token.strip().strip(_QUOTES).strip()

    def _build(self, year: int, month: int, day: int) -> Optional[date]:
        if not self.min_year <= year <= self.max_year:
            return None
        try:
            return date(year, month, day)
        except ValueError:
            return None

    def _match_day_month_year(self, text: str):
        match = _DAY_MONTH_YEAR.match(text)
        if not match:
            return _NO_MATCH
        day, month, year = match.groups()
        return self._build(_expand_year(year), int(month), int(day))

    def _match_month_year(self, text: str):
        match = _MONTH_YEAR.match(text)
        if not match:
            return _NO_MATCH
        month, year = match.groups()
        return self._build(_expand_year(year), int(month), 1)

    def _match_text_month_year(self, text: str):
        match = _TEXT_MONTH_YEAR.match(text)
        if not match:
            return _NO_MATCH
        month = month_from_name(match.group(1))
        if month is None:
            return None
        return self._build(_expand_year(match.group(2)), month, 1)

    def _match_iso(self, text: str):
        match = _ISO.match(text)
        if not match:
            return _NO_MATCH
        year, month, day = (int(g) for g in match.groups())
        return self._build(year, month, day)


# Sentinel distinguishing "shape not recognized" from "recognized but invalid".
_NO_MATCH = object()

_DEFAULT_NORMALIZER = DateNormalizer()


def parse_single_date(token) -> Optional[date]:
    """Parse one date token with the default year window."""
    return _DEFAULT_NORMALIZER.parse_single_date(token)


def parse_period(token) -> ParsedPeriod:
    """Interpret a leave-start cell with the default year window."""
    return _DEFAULT_NORMALIZER.parse_period(token)
