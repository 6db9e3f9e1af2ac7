"""Analysis engine interface."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pltguard.diagnostics.models import DiagnosticRecord


class AnalysisEngine(Protocol):
    """The type analyzer, treated as a black box.

    All calls block until the engine finishes. Any call may raise
    :class:`~pltguard.core.errors.EngineError` when the engine cannot
    complete it at all; ordinary findings are returned as records.
    """

    def build(
        self,
        output: Path,
        paths: Sequence[Path],
        predecessors: Sequence[Path],
    ) -> Sequence[DiagnosticRecord]:
        """Build a PLT at ``output`` from ``paths``, seeded with ``predecessors``."""
        ...

    def check(self, database: Path) -> Sequence[DiagnosticRecord]:
        """Check that an existing PLT is consistent with the code it covers."""
        ...

    def analyze(
        self,
        databases: Sequence[Path],
        paths: Sequence[Path],
        warnings: Sequence[str],
    ) -> Sequence[DiagnosticRecord]:
        """Run success typing analysis of ``paths`` against ``databases``."""
        ...
