"""Parsing of raw spreadsheet rows, dates and leave periods."""

from premium_leave.parsing.dates import (
    DateNormalizer,
    format_date,
    normalize_year,
    parse_period,
    parse_single_date,
)
from premium_leave.parsing.fields import (
    FieldAliases,
    FieldResolver,
    RecordBuilder,
    normalize_key,
    parse_month_count,
)
from premium_leave.parsing.loader import load_rows

__all__ = [
    # Dates
    "DateNormalizer",
    "format_date",
    "normalize_year",
    "parse_period",
    "parse_single_date",
    # Fields and records
    "FieldAliases",
    "FieldResolver",
    "RecordBuilder",
    "normalize_key",
    "parse_month_count",
    # Input files
    "load_rows",
]
