"""Diagnostics for data-quality issues found while processing records.

Nothing in the leave core raises for bad spreadsheet data. Every stage
returns a best-effort result and reports what it could not use as
Diagnostic entries, which accumulate in a DiagnosticLog that callers may
show to users.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional


class DiagnosticKind(Enum):
    """Kinds of data-quality issues."""

    UNPARSEABLE_DATE = "unparseable_date"
    DATE_CONFLICT = "date_conflict"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INCOMPLETE_DATA = "incomplete_data"
    INVALID_NUMBER = "invalid_number"


# Kinds that mean part of a record could not be used as given.
ERROR_KINDS = frozenset({
    DiagnosticKind.UNPARSEABLE_DATE,
    DiagnosticKind.DATE_CONFLICT,
    DiagnosticKind.MISSING_REQUIRED_FIELD,
    DiagnosticKind.INVALID_NUMBER,
})


@dataclass(frozen=True)
class Diagnostic:
    """A single data-quality issue."""

    kind: DiagnosticKind
    message: str
    employee: Optional[str] = None
    field_name: Optional[str] = None
    value: Optional[str] = None
    details: dict = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_error(self) -> bool:
        return self.kind in ERROR_KINDS

    def __str__(self) -> str:
        parts = [f"[{self.kind.value}]"]
        if self.employee:
            parts.append(f"Employee {self.employee}:")
        parts.append(self.message)
        if self.value is not None:
            parts.append(f"(value {self.value!r})")
        return " ".join(parts)


@dataclass
class DiagnosticLog:
    """Accumulated diagnostics for a processing pass.

    Example:
        >>> log = DiagnosticLog()
        >>> log.extend(diagnostics)
        >>> for diagnostic in log.by_kind(DiagnosticKind.UNPARSEABLE_DATE):
        ...     print(diagnostic)
    """

    entries: list[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        self.entries.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.entries.extend(diagnostics)

    def by_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Get diagnostics of a single kind, in insertion order."""
        return [d for d in self.entries if d.kind is kind]

    def for_employee(self, name: str) -> list[Diagnostic]:
        return [d for d in self.entries if d.employee == name]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.entries)

    def counts(self) -> dict[DiagnosticKind, int]:
        """Number of diagnostics per kind (kinds with none are omitted)."""
        result: dict[DiagnosticKind, int] = {}
        for diagnostic in self.entries:
            result[diagnostic.kind] = result.get(diagnostic.kind, 0) + 1
        return result

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
