"""Tests for pltguard run command."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from pltguard.cli.main import cli
from pltguard.core.errors import HostError
from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.engine.terms import Atom
from pltguard.runner import RunOptions, RunResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    for key in list(os.environ):
        if key.startswith("PLTGUARD__"):
            monkeypatch.delenv(key)
    with patch("pltguard.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml"):
        yield


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Mix project whose PLT cache lives under tmp_path."""
    (tmp_path / "mix.exs").write_text("  def project, do: [app: :my_app]\n")
    (tmp_path / ".pltguard").mkdir()
    config = tmp_path / ".pltguard" / "config.yaml"
    config.write_text(f"plt:\n  cache_dir: {tmp_path / 'cache'}\n")
    return tmp_path


def _invoke(args: list[str], host: Any, engine: Any) -> Any:
    with (
        patch("pltguard.cli.run.MixHost", return_value=host),
        patch("pltguard.cli.run.DialyzerEngine", return_value=engine),
    ):
        return runner.invoke(cli, ["run", *args])


class TestRunCommand:
    """pltguard run command tests."""

    def test_given_non_project_dir_when_run_then_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["run", str(tmp_path)])
        assert result.exit_code != 0
        assert "Not inside a Mix project" in result.output

    def test_given_clean_project_when_run_then_succeeds(
        self, project: Path, fake_host: Any, engine_factory: Callable[..., Any]
    ) -> None:
        engine = engine_factory()

        result = _invoke([str(project)], fake_host, engine)

        assert result.exit_code == 0, result.output
        assert "SUCCESS: No failures or warnings." in result.output
        assert "Building Erlang/OTP PLT" in result.output
        assert fake_host.compiled == 1

    def test_given_unignored_warning_when_run_then_exit_one(
        self,
        project: Path,
        fake_host: Any,
        engine_factory: Callable[..., Any],
        record_factory: Callable[..., DiagnosticRecord],
    ) -> None:
        record = record_factory(
            tag="warn_unknown",
            file="a.ex",
            line=5,
            detail=(Atom("unknown_function"), (Atom("Foo"), Atom("bar"), 2)),
        )

        result = _invoke([str(project)], fake_host, engine_factory(analysis=[record]))

        assert result.exit_code == 1
        assert "Unknown function: Foo:bar/2" in result.output
        assert "FAILURE: 1 failure." in result.output

    def test_given_ignore_pattern_when_run_then_succeeds(
        self,
        project: Path,
        fake_host: Any,
        engine_factory: Callable[..., Any],
        record_factory: Callable[..., DiagnosticRecord],
    ) -> None:
        with (project / ".pltguard" / "config.yaml").open("a") as f:
            f.write(
                "analysis:\n"
                "  ignored_warnings:\n"
                "    - [warn_return_only_exit, _, [no_return, _]]\n"
            )
        record = record_factory(
            tag="warn_return_only_exit",
            file="x.ex",
            line=10,
            detail=(Atom("no_return"), [Atom("only_explicit")]),
        )

        result = _invoke([str(project)], fake_host, engine_factory(analysis=[record]))

        assert result.exit_code == 0, result.output
        assert "SUCCESS: 1 warning." in result.output

    def test_given_flags_when_run_then_override_config(self, project: Path) -> None:
        with (project / ".pltguard" / "config.yaml").open("a") as f:
            f.write("project:\n  compile: true\n")
        mock_runner = MagicMock()
        mock_runner.run.return_value = RunResult(result=ClassifiedResult(), exit_code=0)

        with (
            patch("pltguard.cli.run.AnalysisRunner", return_value=mock_runner),
            patch("pltguard.cli.run.MixHost"),
        ):
            result = runner.invoke(
                cli, ["run", str(project), "--no-check", "--no-compile", "--debug"]
            )

        assert result.exit_code == 0, result.output
        mock_runner.run.assert_called_once_with(RunOptions(check=False, compile=False, debug=True))

    def test_given_engine_failure_when_run_then_reports_error(
        self, project: Path, fake_host: Any, engine_factory: Callable[..., Any]
    ) -> None:
        result = _invoke([str(project)], fake_host, engine_factory(fail_on="build"))

        assert result.exit_code == 1
        assert "ENGINE_FAILURE" in result.output
        assert "Dialyzer build failed: boom" in result.output
        assert "SUCCESS" not in result.output

    def test_given_compile_failure_when_run_then_no_analysis(
        self, project: Path, fake_host: Any, engine_factory: Callable[..., Any]
    ) -> None:
        fake_host.compile = MagicMock(side_effect=HostError.compile_failed(1))
        engine = engine_factory()

        result = _invoke([str(project)], fake_host, engine)

        assert result.exit_code == 1
        assert "HOST_COMPILE_FAILED" in result.output
        assert engine.calls == []
