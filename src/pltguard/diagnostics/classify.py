"""Warning classification - partition warnings into ignored and failed."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.diagnostics.patterns import IgnorePattern


def is_ignored(record: DiagnosticRecord, patterns: Sequence[IgnorePattern]) -> bool:
    """True when the record matches at least one pattern."""
    return any(pattern.matches(record) for pattern in patterns)


def classify(
    diagnostics: Iterable[DiagnosticRecord],
    patterns: Sequence[IgnorePattern],
) -> ClassifiedResult:
    """Split warnings into (ignored, failed).

    Every record lands in exactly one side; records keep their relative
    order. Pattern order has no effect on the result.
    """
    ignored: list[DiagnosticRecord] = []
    failed: list[DiagnosticRecord] = []
    for record in diagnostics:
        (ignored if is_ignored(record, patterns) else failed).append(record)
    return ClassifiedResult(ignored=tuple(ignored), failed=tuple(failed))
