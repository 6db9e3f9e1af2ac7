"""Mix host - runtime facts from `elixir`, project layout from the filesystem.

Runtime versions and library directories come from a single ``elixir -e``
call that prints an Erlang term. Project paths are read from the build
directory and ``mix.lock`` without starting Mix.
"""

from __future__ import annotations

import os
import re
import subprocess
from functools import cached_property
from pathlib import Path
from typing import Any

from pltguard.config.constants import ELIXIR_CORE_APPS, ERLANG_CORE_APPS
from pltguard.config.models import PltGuardConfig
from pltguard.core.errors import HostError
from pltguard.core.logging import get_logger
from pltguard.core.progress import status
from pltguard.engine.terms import TermSyntaxError, parse_term
from pltguard.plt.fingerprint import VersionInfo

log = get_logger("host.mix")

OUTPUT_MARKER = "%%pltguard "

_LOCK_ENTRY_RE = re.compile(r'^\s*"([^"]+)"\s*:', re.MULTILINE)
_APP_NAME_RE = re.compile(r"\bapp:\s*:([a-z][A-Za-z0-9_]*)")

_RUNTIME_SCRIPT = """\
lib = fn app -> {app, :code.lib_dir(app)} end
info = {
  String.to_charlist(System.otp_release()),
  :erlang.system_info(:version),
  String.to_charlist(System.version()),
  Enum.map(%(platform)s, lib),
  Enum.map(%(language)s, lib)
}
:io.format("%(marker)s~0tp~n", [info])
"""


def _atom_list(names: tuple[str, ...]) -> str:
    return "[" + ", ".join(f":{name}" for name in names) + "]"


def render_runtime_script(
    platform_apps: tuple[str, ...] = ERLANG_CORE_APPS,
    language_apps: tuple[str, ...] = ELIXIR_CORE_APPS,
) -> str:
    return _RUNTIME_SCRIPT % {
        "platform": _atom_list(platform_apps),
        "language": _atom_list(language_apps),
        "marker": OUTPUT_MARKER,
    }


def locked_dependencies(lock_content: bytes) -> list[str]:
    """Dependency names listed in a mix.lock file, in file order."""
    return _LOCK_ENTRY_RE.findall(lock_content.decode("utf-8", errors="replace"))


def _resolve_lib_dirs(entries: Any, *, component: str) -> list[Path]:
    paths: list[Path] = []
    for app, lib_dir in entries:
        if isinstance(lib_dir, str):
            paths.append(Path(lib_dir))
            continue
        log.warning("lib_dir_missing", app=str(app), component=component)
        status(
            f"Could not find library directory for application {app}. "
            "It will not be included in the PLT.",
            style="warning",
        )
    return paths


class MixHost:
    """:class:`~pltguard.host.base.HostToolchain` for a Mix project."""

    def __init__(self, project_root: Path, config: PltGuardConfig) -> None:
        self._root = project_root
        self._config = config

    @cached_property
    def _runtime(self) -> tuple[Any, ...]:
        executable = self._config.engine.elixir_executable
        cmd = [executable, "-e", render_runtime_script()]
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=self._root,
                check=False,
            )
        except FileNotFoundError:
            raise HostError.not_found(executable) from None

        if proc.returncode != 0:
            raise HostError.command_failed(cmd, proc.returncode, proc.stderr)

        for line in proc.stdout.splitlines():
            if not line.startswith(OUTPUT_MARKER):
                continue
            try:
                info = parse_term(line[len(OUTPUT_MARKER) :])
            except TermSyntaxError as e:
                raise HostError.command_failed(cmd, proc.returncode, str(e)) from e
            if isinstance(info, tuple) and len(info) == 5:
                log.debug("runtime_info", otp=info[0], erts=info[1], elixir=info[2])
                return info
        raise HostError.command_failed(cmd, proc.returncode, "no runtime information printed")

    def versions(self) -> VersionInfo:
        otp_release, erts_version, elixir_version, _, _ = self._runtime
        return VersionInfo(
            otp_release=str(otp_release),
            erts_version=str(erts_version),
            elixir_version=str(elixir_version),
        )

    def platform_paths(self) -> list[Path]:
        return _resolve_lib_dirs(self._runtime[3], component="platform")

    def language_core_paths(self) -> list[Path]:
        return _resolve_lib_dirs(self._runtime[4], component="language_core")

    def build_path(self) -> Path:
        return self._config.project.resolve_build_path(self._root)

    def lock_content(self) -> bytes:
        lockfile = self._root / self._config.project.lockfile
        if not lockfile.exists():
            return b""
        return lockfile.read_bytes()

    def dependency_paths(self) -> list[Path]:
        """Compiled ``ebin`` directories of every dependency.

        Locked dependencies come first, in lock order. Path and git
        dependencies missing from the lock are picked up from the build
        directory. Umbrella children and the project app are never
        dependencies.
        """
        lib = self.build_path() / "lib"
        if self._is_umbrella():
            project_apps = set(self._umbrella_apps())
        else:
            project_apps = {self._app_name()}

        locked = locked_dependencies(self.lock_content())
        compiled = sorted(p.name for p in lib.iterdir() if p.is_dir()) if lib.is_dir() else []
        unlocked = [name for name in compiled if name not in locked]

        paths: list[Path] = []
        for dep in [*locked, *unlocked]:
            if dep in project_apps:
                continue
            ebin = lib / dep / "ebin"
            if ebin.is_dir():
                paths.append(ebin)
            else:
                # Not compiled for this environment (e.g. only: :test)
                log.debug("dependency_not_compiled", dep=dep, path=str(ebin))
        return paths

    def application_paths(self) -> list[Path]:
        lib = self.build_path() / "lib"
        if self._is_umbrella():
            return [lib / app for app in self._umbrella_apps()]
        return [lib / self._app_name()]

    def compile(self) -> None:
        executable = self._config.engine.mix_executable
        env = {**os.environ, "MIX_ENV": self._config.project.mix_env}
        log.info("compile_start", mix_env=self._config.project.mix_env)
        try:
            # Output is not captured so compiler diagnostics reach the terminal.
            proc = subprocess.run([executable, "compile"], cwd=self._root, env=env, check=False)
        except FileNotFoundError:
            raise HostError.not_found(executable) from None
        if proc.returncode != 0:
            raise HostError.compile_failed(proc.returncode)

    def _is_umbrella(self) -> bool:
        if self._config.project.umbrella is not None:
            return self._config.project.umbrella
        return (self._root / "apps").is_dir()

    def _umbrella_apps(self) -> list[str]:
        apps_dir = self._root / "apps"
        if not self._is_umbrella() or not apps_dir.is_dir():
            return []
        return sorted(p.name for p in apps_dir.iterdir() if (p / "mix.exs").is_file())

    def _app_name(self) -> str:
        if self._config.project.app:
            return self._config.project.app
        mix_exs = self._root / "mix.exs"
        if not mix_exs.is_file():
            raise HostError.project_invalid(str(self._root), "mix.exs not found")
        match = _APP_NAME_RE.search(mix_exs.read_text(encoding="utf-8"))
        if match is None:
            raise HostError.project_invalid(
                str(self._root), "could not read the app name from mix.exs; set project.app"
            )
        return match.group(1)
