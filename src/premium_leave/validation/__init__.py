"""Diagnostics for data-quality issues in leave records."""

from premium_leave.validation.diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
]
