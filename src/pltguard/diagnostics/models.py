"""Diagnostic models - warning records and classification results."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DiagnosticRecord:
    """A single warning produced by the analysis engine.

    Mirrors Dialyzer's warning tuple ``{Tag, {File, Line}, {Kind, Args}}``.
    ``message`` is the engine's own rendering and takes no part in equality.
    """

    tag: str  # warn_return_no_exit, warn_matching, ...
    location: tuple[Any, ...] | None  # (file, line) or (file, (line, column))
    detail: Any
    message: str | None = field(default=None, compare=False)

    @property
    def file(self) -> str | None:
        return self.location[0] if self.location else None

    @property
    def line(self) -> Any:
        return self.location[1] if self.location and len(self.location) > 1 else None

    @property
    def kind(self) -> Any:
        """First element of the detail tuple (unknown_function, no_return, ...)."""
        if isinstance(self.detail, (tuple, list)) and self.detail:
            return self.detail[0]
        return None

    def as_term(self) -> tuple[Any, Any, Any]:
        return (self.tag, self.location, self.detail)

    @classmethod
    def from_term(cls, term: Any, message: str | None = None) -> DiagnosticRecord:
        """Build a record from a decoded warning tuple.

        Raises:
            ValueError: If the term does not have the warning shape.
        """
        if not isinstance(term, tuple) or len(term) != 3:
            raise ValueError(f"Expected a 3-tuple warning term, got {term!r}")
        tag, location, detail = term
        if not isinstance(tag, str):
            raise ValueError(f"Expected an atom warning tag, got {tag!r}")
        if location is not None and not isinstance(location, tuple):
            raise ValueError(f"Expected a {{File, Line}} location, got {location!r}")
        return cls(tag=tag, location=location, detail=detail, message=message)


@dataclass(frozen=True)
class ClassifiedResult:
    """Partition of one batch of warnings."""

    ignored: Sequence[DiagnosticRecord] = ()
    failed: Sequence[DiagnosticRecord] = ()

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    @property
    def is_empty(self) -> bool:
        return not self.ignored and not self.failed

    @property
    def total(self) -> int:
        return len(self.ignored) + len(self.failed)
