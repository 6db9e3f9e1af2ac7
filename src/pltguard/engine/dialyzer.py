"""Dialyzer engine - runs dialyzer:run/1 in a fresh erl node.

The option list is rendered as Erlang source and evaluated with
``erl -noshell -eval``. The evaluated program prints each warning as a
single ``{Warning, FormattedText}`` term on its own marked line, so both
the raw tuple (for pattern matching) and Dialyzer's own rendering (for
display) reach Python. A thrown ``{dialyzer_error, Msg}`` is printed the
same way and the node halts with status 2.
"""

from __future__ import annotations

import subprocess
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pltguard.core.errors import EngineError
from pltguard.core.logging import get_logger
from pltguard.diagnostics.models import DiagnosticRecord
from pltguard.engine.terms import Atom, TermSyntaxError, format_term, parse_term

log = get_logger("engine.dialyzer")

OUTPUT_MARKER = "%%pltguard "
_ERROR_STATUS = 2

_PROGRAM = """\
io:setopts([{encoding, unicode}]),
Opts = %(options)s,
try dialyzer:run(Opts) of
    Warnings ->
        lists:foreach(
            fun(W) ->
                Text = lists:flatten(dialyzer:format_warning(W, fullpath)),
                io:format("%(marker)s~0tp~n", [{W, Text}])
            end,
            Warnings),
        halt(0)
catch
    throw:{dialyzer_error, Msg} ->
        io:format("%(marker)s~0tp~n", [{dialyzer_error, unicode:characters_to_list(Msg)}]),
        halt(%(status)d)
end.
"""


def render_program(options: list[tuple[Atom, Any]]) -> str:
    """Erlang source that runs Dialyzer with ``options`` and prints the results."""
    return _PROGRAM % {
        "options": format_term(options),
        "marker": OUTPUT_MARKER,
        "status": _ERROR_STATUS,
    }


def _paths(paths: Sequence[Path]) -> list[str]:
    return [str(p) for p in paths]


class DialyzerEngine:
    """:class:`~pltguard.engine.base.AnalysisEngine` backed by the local Erlang install."""

    def __init__(self, erl_executable: str = "erl") -> None:
        self._erl = erl_executable

    def build(
        self,
        output: Path,
        paths: Sequence[Path],
        predecessors: Sequence[Path],
    ) -> list[DiagnosticRecord]:
        return self._run(
            "build",
            [
                (Atom("analysis_type"), Atom("plt_build")),
                (Atom("output_plt"), str(output)),
                (Atom("plts"), _paths(predecessors)),
                (Atom("files_rec"), _paths(paths)),
            ],
        )

    def check(self, database: Path) -> list[DiagnosticRecord]:
        return self._run(
            "check",
            [
                (Atom("analysis_type"), Atom("plt_check")),
                (Atom("init_plt"), str(database)),
            ],
        )

    def analyze(
        self,
        databases: Sequence[Path],
        paths: Sequence[Path],
        warnings: Sequence[str],
    ) -> list[DiagnosticRecord]:
        return self._run(
            "analysis",
            [
                (Atom("analysis_type"), Atom("succ_typings")),
                (Atom("plts"), _paths(databases)),
                (Atom("files_rec"), _paths(paths)),
                (Atom("warnings"), [Atom(w) for w in warnings]),
            ],
        )

    def _run(self, operation: str, options: list[tuple[Atom, Any]]) -> list[DiagnosticRecord]:
        cmd = [self._erl, "-noshell", "-eval", render_program(options)]
        log.debug("engine_command", operation=operation, options=format_term(options))
        start = time.monotonic()
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError:
            raise EngineError.not_found(self._erl) from None
        except OSError as e:
            raise EngineError.failure(operation, str(e)) from e

        log.debug(
            "engine_done",
            operation=operation,
            returncode=proc.returncode,
            duration_s=round(time.monotonic() - start, 3),
        )

        records: list[DiagnosticRecord] = []
        for line in proc.stdout.splitlines():
            if not line.startswith(OUTPUT_MARKER):
                if line.strip():
                    log.debug("engine_output", operation=operation, line=line)
                continue
            payload = line[len(OUTPUT_MARKER) :]
            try:
                term = parse_term(payload)
            except TermSyntaxError as e:
                raise EngineError.bad_output(operation, payload, str(e)) from e

            if isinstance(term, tuple) and len(term) == 2 and term[0] == "dialyzer_error":
                raise EngineError.failure(operation, str(term[1]).strip())
            if not (isinstance(term, tuple) and len(term) == 2):
                raise EngineError.bad_output(operation, payload, "expected {Warning, Text}")

            warning, text = term
            try:
                records.append(DiagnosticRecord.from_term(warning, message=str(text)))
            except ValueError as e:
                raise EngineError.bad_output(operation, payload, str(e)) from e

        if proc.returncode != 0:
            reason = proc.stderr.strip() or proc.stdout.strip() or f"exit status {proc.returncode}"
            raise EngineError.failure(operation, reason)

        return records
