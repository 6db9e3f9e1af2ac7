"""Diagnostics module - warning records, ignore patterns, classification, reporting."""

from pltguard.diagnostics.classify import classify, is_ignored
from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.diagnostics.patterns import (
    WILDCARD,
    Exact,
    IgnorePattern,
    Pattern,
    Sequence,
    Wildcard,
    compile_ignore_list,
    compile_pattern,
)
from pltguard.diagnostics.report import ResultReporter, exit_code, format_warning, summary

__all__ = [
    "ClassifiedResult",
    "DiagnosticRecord",
    "Exact",
    "IgnorePattern",
    "Pattern",
    "ResultReporter",
    "Sequence",
    "WILDCARD",
    "Wildcard",
    "classify",
    "compile_ignore_list",
    "compile_pattern",
    "exit_code",
    "format_warning",
    "is_ignored",
    "summary",
]
