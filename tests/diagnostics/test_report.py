"""Tests for result reporting and exit codes."""

import io
from collections.abc import Callable

import pytest
from rich.console import Console

from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.diagnostics.report import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    ResultReporter,
    exit_code,
    format_warning,
    summary,
)
from pltguard.engine.terms import Atom

RecordFactory = Callable[..., DiagnosticRecord]


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, force_terminal=False, color_system=None), buffer


class TestFormatWarning:
    def test_unknown_function_has_no_line_reference(self, record_factory: RecordFactory) -> None:
        record = record_factory(
            tag="warn_unknown",
            file="a.ex",
            line=5,
            detail=(Atom("unknown_function"), (Atom("Foo"), Atom("bar"), 2)),
            message="a.ex:5: Function 'Foo':bar/2 does not exist.",
        )
        assert format_warning(record) == "  Unknown function: Foo:bar/2"

    def test_unknown_type(self, record_factory: RecordFactory) -> None:
        record = record_factory(
            tag="warn_unknown",
            detail=(Atom("unknown_type"), (Atom("Elixir.Foo"), Atom("t"), 0)),
        )
        assert format_warning(record) == "  Unknown type: Elixir.Foo:t/0"

    def test_unknown_behaviour(self, record_factory: RecordFactory) -> None:
        record = record_factory(
            tag="warn_behaviour",
            detail=(Atom("unknown_behaviour"), Atom("Elixir.GenStage")),
        )
        assert format_warning(record) == "  Unknown behaviour: Elixir.GenStage"

    def test_other_warnings_use_engine_message(self, record_factory: RecordFactory) -> None:
        record = record_factory(message="lib/a.ex:3: Function foo/0 has no local return\n")
        assert format_warning(record) == "  lib/a.ex:3: Function foo/0 has no local return"

    def test_falls_back_to_raw_term(self, record_factory: RecordFactory) -> None:
        record = record_factory(
            tag="warn_matching", file="lib/a.ex", line=7, detail=(Atom("guard_fail"), [])
        )
        assert format_warning(record) == '  {warn_matching,{"lib/a.ex",7},{guard_fail,[]}}'


class TestExitCode:
    def test_success_when_nothing_failed(self, record_factory: RecordFactory) -> None:
        assert exit_code(ClassifiedResult()) == EXIT_SUCCESS
        assert exit_code(ClassifiedResult(ignored=(record_factory(),))) == EXIT_SUCCESS

    def test_failure_when_anything_failed(self, record_factory: RecordFactory) -> None:
        assert exit_code(ClassifiedResult(failed=(record_factory(),))) == EXIT_FAILURE
        assert EXIT_FAILURE != EXIT_SUCCESS


class TestSummary:
    @pytest.mark.parametrize(
        ("ignored", "failed", "expected"),
        [
            (0, 0, "SUCCESS: No failures or warnings."),
            (1, 0, "SUCCESS: 1 warning."),
            (3, 0, "SUCCESS: 3 warnings."),
            (0, 1, "FAILURE: 1 failure."),
            (2, 2, "FAILURE: 2 failures, 2 warnings."),
        ],
    )
    def test_verdicts(
        self, record_factory: RecordFactory, ignored: int, failed: int, expected: str
    ) -> None:
        result = ClassifiedResult(
            ignored=tuple(record_factory(line=n) for n in range(ignored)),
            failed=tuple(record_factory(line=n) for n in range(failed)),
        )
        assert summary(result).plain == expected


class TestResultReporter:
    def test_report_prints_blocks_and_summary(self, record_factory: RecordFactory) -> None:
        # Given
        console, buffer = _console()
        result = ClassifiedResult(
            ignored=(record_factory(message="lib/a.ex:1: ignored one"),),
            failed=(record_factory(message="lib/b.ex:2: failed one"),),
        )

        # When
        code = ResultReporter(console).report(result)

        # Then
        out = buffer.getvalue()
        assert code == EXIT_FAILURE
        assert out.index("Warnings:") < out.index("ignored one")
        assert out.index("Errors:") < out.index("failed one")
        assert "FAILURE: 1 failure, 1 warning." in out
        assert "IGNORED WARNINGS:" not in out

    def test_report_empty_result(self) -> None:
        console, buffer = _console()
        code = ResultReporter(console).report(ClassifiedResult())
        out = buffer.getvalue()
        assert code == EXIT_SUCCESS
        assert "Warnings:" not in out
        assert "Errors:" not in out
        assert "SUCCESS: No failures or warnings." in out

    def test_debug_prints_raw_terms(self, record_factory: RecordFactory) -> None:
        console, buffer = _console()
        result = ClassifiedResult(
            failed=(record_factory(tag="warn_matching", file="lib/a.ex", line=4),)
        )

        ResultReporter(console, debug=True).report(result)

        out = buffer.getvalue()
        assert "IGNORED WARNINGS:\n[]" in out
        assert "FAILURES:" in out
        assert '{warn_matching,{"lib/a.ex",4}' in out

    def test_print_findings_has_no_verdict(self, record_factory: RecordFactory) -> None:
        console, buffer = _console()
        ResultReporter(console).print_findings(ClassifiedResult(failed=(record_factory(),)))
        out = buffer.getvalue()
        assert "Errors:" in out
        assert "SUCCESS" not in out
        assert "FAILURE" not in out
