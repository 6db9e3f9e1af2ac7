"""Result reporting - render classified warnings and decide the exit code."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from pltguard.core.formatting import indent, pluralize
from pltguard.core.logging import get_logger
from pltguard.core.progress import get_output_console
from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.engine.terms import format_term

log = get_logger("report")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _mfa(value: object) -> str | None:
    if isinstance(value, (tuple, list)) and len(value) == 3:
        m, f, a = value
        return f"{m}:{f}/{a}"
    return None


def format_warning(record: DiagnosticRecord) -> str:
    """Render one warning as an indented line.

    Unknown type/function/behaviour warnings carry a placeholder location
    (``:0:``), so they render the referenced symbol only.
    """
    detail = record.detail
    if isinstance(detail, (tuple, list)) and len(detail) == 2:
        kind, ref = detail
        if kind == "unknown_type" and (mfa := _mfa(ref)):
            return indent(f"Unknown type: {mfa}")
        if kind == "unknown_function" and (mfa := _mfa(ref)):
            return indent(f"Unknown function: {mfa}")
        if kind == "unknown_behaviour":
            return indent(f"Unknown behaviour: {ref}")

    if record.message and record.message.strip():
        return indent(record.message.strip())
    return indent(format_term(record.as_term()))


def exit_code(result: ClassifiedResult) -> int:
    """Non-zero only when unignored warnings remain."""
    return EXIT_FAILURE if result.has_failures else EXIT_SUCCESS


def summary(result: ClassifiedResult) -> Text:
    """One-line verdict covering the four ignored/failed combinations."""
    ignored = len(result.ignored)
    failed = len(result.failed)

    if not ignored and not failed:
        return Text("SUCCESS: No failures or warnings.", style="green")
    if not failed:
        return Text.assemble(
            ("SUCCESS: ", "green"), (f"{pluralize(ignored, 'warning')}.", "yellow")
        )
    if not ignored:
        return Text(f"FAILURE: {pluralize(failed, 'failure')}.", style="red")
    return Text.assemble(
        (f"FAILURE: {pluralize(failed, 'failure')}, ", "red"),
        (f"{pluralize(ignored, 'warning')}.", "yellow"),
    )


class ResultReporter:
    """Prints classified warnings to the console.

    Ignored warnings are listed under "Warnings:", failed ones under
    "Errors:". With ``debug`` the raw warning terms are dumped as well,
    which is the easiest way to write new ignore patterns.
    """

    def __init__(self, console: Console | None = None, *, debug: bool = False) -> None:
        self._console = console or get_output_console()
        self._debug = debug

    def print_findings(self, result: ClassifiedResult) -> None:
        """List warnings without a verdict (also used for PLT checks)."""
        if result.ignored:
            self._print_block("Warnings:", result.ignored, "yellow")
        if result.failed:
            self._print_block("Errors:", result.failed, "red")

    def print_raw(self, result: ClassifiedResult) -> None:
        self._console.print("IGNORED WARNINGS:", highlight=False)
        self._print_terms(result.ignored)
        self._console.print("FAILURES:", highlight=False)
        self._print_terms(result.failed)

    def report(self, result: ClassifiedResult) -> int:
        """Print findings and the summary line, and return the exit code."""
        self.print_findings(result)
        if self._debug:
            self.print_raw(result)
        self._console.print(summary(result))

        code = exit_code(result)
        log.info(
            "analysis_result",
            ignored=len(result.ignored),
            failed=len(result.failed),
            exit_code=code,
        )
        return code

    def _print_block(self, title: str, records: Sequence[DiagnosticRecord], style: str) -> None:
        body = "\n".join(format_warning(r) for r in records)
        self._console.print(Text(f"{title}\n{body}\n", style=style))

    def _print_terms(self, records: Sequence[DiagnosticRecord]) -> None:
        lines = ",\n ".join(format_term(r.as_term()) for r in records)
        self._console.print(Text(f"[{lines}]"))
