"""Ignore patterns - structural wildcard matching over warning terms.

A pattern has the same shape as a warning term. Any position, at any
depth, may hold the wildcard, which matches whatever value is found there
(including nested structures). In configuration files patterns are written
as nested lists with the string ``"_"`` as wildcard::

    analysis:
      ignored_warnings:
        - [warn_return_only_exit, [lib/mix/tasks/ct.ex, _], [no_return, _]]

Only ``true`` and ``false`` are read as booleans from config files, so
atoms such as ``on`` or ``no`` can be written bare. Integers and floats
never match each other, nor booleans.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Final

from pltguard.diagnostics.models import DiagnosticRecord

WILDCARD_TOKEN: Final = "_"


class Wildcard:
    """Matches any value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "_"


WILDCARD: Final = Wildcard()


@dataclass(frozen=True, slots=True)
class Exact:
    """Matches a value equal to ``value``."""

    value: Any


@dataclass(frozen=True, slots=True)
class Sequence:
    """Matches a tuple or list of the same length, element-wise."""

    items: tuple[Pattern, ...]


Pattern = Wildcard | Exact | Sequence


def compile_pattern(raw: Any) -> Pattern:
    """Convert a configuration value into a pattern tree."""
    if isinstance(raw, (Wildcard, Exact, Sequence)):
        return raw
    if isinstance(raw, str) and raw == WILDCARD_TOKEN:
        return WILDCARD
    if isinstance(raw, (list, tuple)):
        return Sequence(tuple(compile_pattern(item) for item in raw))
    return Exact(raw)


def _equal(expected: Any, actual: Any) -> bool:
    # Python treats True == 1 and 1 == 1.0; Erlang match patterns keep them apart.
    if isinstance(expected, (int, float)) or isinstance(actual, (int, float)):
        return type(expected) is type(actual) and expected == actual
    return bool(expected == actual)


def matches(pattern: Pattern, value: Any) -> bool:
    """Test a value against a pattern tree."""
    if isinstance(pattern, Wildcard):
        return True
    if isinstance(pattern, Sequence):
        if not isinstance(value, (tuple, list)) or len(value) != len(pattern.items):
            return False
        return all(matches(p, v) for p, v in zip(pattern.items, value, strict=True))
    return _equal(pattern.value, value)


@dataclass(frozen=True, slots=True)
class IgnorePattern:
    """Template for warnings that must not fail the run."""

    tag: Pattern
    location: Pattern
    detail: Pattern

    @classmethod
    def from_config(cls, raw: Any) -> IgnorePattern:
        """Build from a ``[tag, location, detail]`` configuration entry.

        Raises:
            ValueError: If the entry does not have three elements.
        """
        if not isinstance(raw, (list, tuple)) or len(raw) != 3:
            raise ValueError(f"Ignore pattern must be [tag, location, detail], got {raw!r}")
        tag, location, detail = raw
        return cls(compile_pattern(tag), compile_pattern(location), compile_pattern(detail))

    def matches(self, record: DiagnosticRecord) -> bool:
        return (
            matches(self.tag, record.tag)
            and matches(self.location, record.location)
            and matches(self.detail, record.detail)
        )


def compile_ignore_list(entries: Iterable[Any]) -> list[IgnorePattern]:
    return [IgnorePattern.from_config(entry) for entry in entries]
