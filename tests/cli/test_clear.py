"""Tests for pltguard clear command.

Covers:
- collect_targets() selection of dependencies, shared and orphan PLTs
- clear_plts() confirmation and removal
- CLI wiring
"""

from __future__ import annotations

import io
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from pltguard.cli.clear import clear_plts, collect_targets
from pltguard.cli.main import cli
from pltguard.config.models import PltConfig, PltGuardConfig
from pltguard.plt.fingerprint import PltLocations
from pltguard.runner import resolve_locations

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
def config(cache_dir: Path) -> PltGuardConfig:
    return PltGuardConfig(plt=PltConfig(cache_dir=str(cache_dir)))


@pytest.fixture
def populated(config: PltGuardConfig, fake_host: Any) -> PltLocations:
    """All three PLTs on disk plus a leftover dependencies PLT."""
    locations = resolve_locations(config, fake_host)
    for path in [*locations.all(), fake_host.build_path() / "deps-old.plt"]:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"plt")
    return locations


def _quiet() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestCollectTargets:
    def test_default_is_dependencies_only(
        self, config: PltGuardConfig, fake_host: Any, populated: PltLocations
    ) -> None:
        assert collect_targets(config, fake_host) == [populated.dependencies]

    def test_all_includes_shared(
        self, config: PltGuardConfig, fake_host: Any, populated: PltLocations
    ) -> None:
        targets = collect_targets(config, fake_host, include_shared=True)
        assert targets == populated.all()

    def test_orphans_included_on_request(
        self, config: PltGuardConfig, fake_host: Any, populated: PltLocations
    ) -> None:
        targets = collect_targets(config, fake_host, include_orphans=True)
        assert targets == [populated.dependencies, fake_host.build_path() / "deps-old.plt"]

    def test_missing_files_skipped(self, config: PltGuardConfig, fake_host: Any) -> None:
        assert collect_targets(config, fake_host, include_shared=True, include_orphans=True) == []


class TestClearPlts:
    def test_nothing_to_clear(self) -> None:
        assert clear_plts([], yes=True, console=_quiet()) is False

    def test_defaults_to_shared_status_console(self) -> None:
        with patch("pltguard.core.progress._console") as shared:
            clear_plts([], yes=True)
        assert "Nothing to clear" in shared.print.call_args[0][0]

    def test_yes_removes_without_prompt(self, populated: PltLocations) -> None:
        with patch("pltguard.cli.clear.questionary.select") as select:
            assert clear_plts([populated.dependencies], yes=True, console=_quiet()) is True
        select.assert_not_called()
        assert not populated.dependencies.exists()
        assert populated.platform.exists()

    def test_declined_prompt_keeps_files(self, populated: PltLocations) -> None:
        with patch("pltguard.cli.clear.questionary.select") as select:
            select.return_value.ask.return_value = False
            assert clear_plts([populated.dependencies], console=_quiet()) is False
        assert populated.dependencies.exists()

    def test_confirmed_prompt_removes(self, populated: PltLocations) -> None:
        with patch("pltguard.cli.clear.questionary.select") as select:
            select.return_value.ask.return_value = True
            assert clear_plts([populated.dependencies], console=_quiet()) is True
        assert not populated.dependencies.exists()


class TestClearCommand:
    def test_given_project_when_clear_yes_then_dependencies_removed(
        self, tmp_path: Path, fake_host: Any, cache_dir: Path
    ) -> None:
        # Given
        (tmp_path / "mix.exs").write_text("")
        (tmp_path / ".pltguard").mkdir()
        (tmp_path / ".pltguard" / "config.yaml").write_text(f"plt:\n  cache_dir: {cache_dir}\n")
        config = PltGuardConfig(plt=PltConfig(cache_dir=str(cache_dir)))
        locations = resolve_locations(config, fake_host)
        for path in locations.all():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"plt")

        # When
        with patch("pltguard.cli.clear.MixHost", return_value=fake_host):
            result = runner.invoke(cli, ["clear", str(tmp_path), "--yes"])

        # Then
        assert result.exit_code == 0, result.output
        assert not locations.dependencies.exists()
        assert locations.platform.exists()
        assert locations.language_core.exists()
