"""Loading raw rows from spreadsheet exports.

Rows are returned as plain column -> text mappings, ready for the
RecordBuilder. Supported inputs:
- CSV (delimiter detected between "," and ";")
- JSON (a list of objects)
- XLSX (first worksheet, first row as headers; requires openpyxl)
"""

import csv
import io
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Union

from premium_leave.parsing.dates import format_date

logger = logging.getLogger(__name__)


def load_rows(path: Union[str, Path]) -> list[dict[str, str]]:
    """Load rows from a file, choosing the reader by file suffix.

    Args:
        path: Path to a .csv, .json or .xlsx file.

    Returns:
        List of row mappings. Fully blank rows are skipped.

    Raises:
        ValueError: If the suffix is not supported or the JSON is not a list.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        rows = _load_csv(path)
    elif suffix == ".json":
        rows = _load_json(path)
    elif suffix in (".xlsx", ".xlsm"):
        rows = _load_xlsx(path)
    else:
        raise ValueError(f"Unsupported input file type: {path.suffix or path.name}")

    logger.info("Loaded %d rows from %s", len(rows), path)
    return rows


def detect_delimiter(header_line: str) -> str:
    """Pick ";" when it outnumbers "," in the header line."""
    return ";" if header_line.count(";") > header_line.count(",") else ","


def cell_to_text(value) -> str:
    """Convert a cell value to the text the parser expects."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return format_date(value.date())
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_blank(row: dict[str, str]) -> bool:
    return not any(value for value in row.values())


def _load_csv(path: Path) -> list[dict[str, str]]:
    text = path.read_text(encoding="utf-8-sig")
    lines = text.splitlines()
    if not lines:
        return []

    reader = csv.DictReader(io.StringIO(text), delimiter=detect_delimiter(lines[0]))
    rows = []
    for raw in reader:
        row = {
            key.strip(): cell_to_text(value)
            for key, value in raw.items()
            if key and key.strip()
        }
        if not _is_blank(row):
            rows.append(row)
    return rows


def _load_json(path: Path) -> list[dict[str, str]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of objects in {path}")

    rows = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a list of objects in {path}")
        row = {str(key): cell_to_text(value) for key, value in item.items()}
        if not _is_blank(row):
            rows.append(row)
    return rows


def _load_xlsx(path: Path) -> list[dict[str, str]]:
    try:
        import openpyxl
    except ImportError:
        raise ImportError(
            "openpyxl is required to read .xlsx files. "
            "Install with: pip install openpyxl"
        )

    workbook = openpyxl.load_workbook(path, data_only=True, read_only=True)
    try:
        sheet = workbook.worksheets[0]
        iterator = sheet.iter_rows(values_only=True)
        header = next(iterator, None)
        if header is None:
            return []
        headers = [cell_to_text(cell) for cell in header]

        rows = []
        for values in iterator:
            row = {
                name: cell_to_text(value)
                for name, value in zip(headers, values)
                if name
            }
            if not _is_blank(row):
                rows.append(row)
        return rows
    finally:
        workbook.close()
