"""Engine module - analysis engine interface, Dialyzer adapter and term codec."""

from pltguard.engine.base import AnalysisEngine
from pltguard.engine.dialyzer import DialyzerEngine
from pltguard.engine.terms import Atom, Opaque, TermSyntaxError, format_term, parse_term

__all__ = [
    "AnalysisEngine",
    "Atom",
    "DialyzerEngine",
    "Opaque",
    "TermSyntaxError",
    "format_term",
    "parse_term",
]
