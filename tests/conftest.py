"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides fakes for the engine and host collaborators.
"""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of pltguard modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("pltguard"):
        del sys.modules[module_name]

from pltguard.diagnostics.models import DiagnosticRecord  # noqa: E402
from pltguard.engine.terms import Atom  # noqa: E402
from pltguard.plt.fingerprint import VersionInfo  # noqa: E402


class FakeEngine:
    """Records every call; builds write a placeholder PLT file."""

    def __init__(
        self,
        *,
        analysis: Sequence[DiagnosticRecord] = (),
        check_findings: dict[Path, list[DiagnosticRecord]] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.calls: list[tuple[str, object]] = []
        self._analysis = list(analysis)
        self._check_findings = check_findings or {}
        self._fail_on = fail_on

    def _maybe_fail(self, operation: str) -> None:
        if self._fail_on == operation:
            from pltguard.core.errors import EngineError

            raise EngineError.failure(operation, "boom")

    def build(
        self, output: Path, paths: Sequence[Path], predecessors: Sequence[Path]
    ) -> list[DiagnosticRecord]:
        self.calls.append(("build", (output, list(paths), list(predecessors))))
        self._maybe_fail("build")
        output.write_bytes(b"plt")
        return []

    def check(self, database: Path) -> list[DiagnosticRecord]:
        self.calls.append(("check", database))
        self._maybe_fail("check")
        return list(self._check_findings.get(database, []))

    def analyze(
        self, databases: Sequence[Path], paths: Sequence[Path], warnings: Sequence[str]
    ) -> list[DiagnosticRecord]:
        self.calls.append(("analyze", (list(databases), list(paths), list(warnings))))
        self._maybe_fail("analyze")
        return list(self._analysis)


class FakeHost:
    """Host with fixed versions and paths under a temporary directory."""

    def __init__(self, root: Path, *, lock: bytes = b"%{}", elixir: str = "1.16.0") -> None:
        self.root = root
        self.lock = lock
        self.elixir = elixir
        self.compiled = 0

    def versions(self) -> VersionInfo:
        return VersionInfo(otp_release="26", erts_version="14.2.1", elixir_version=self.elixir)

    def platform_paths(self) -> list[Path]:
        return [self.root / "otp" / "kernel", self.root / "otp" / "stdlib"]

    def language_core_paths(self) -> list[Path]:
        return [self.root / "elixir" / "elixir"]

    def dependency_paths(self) -> list[Path]:
        return [self.root / "_build" / "dev" / "lib" / "jason" / "ebin"]

    def application_paths(self) -> list[Path]:
        return [self.root / "_build" / "dev" / "lib" / "my_app"]

    def lock_content(self) -> bytes:
        return self.lock

    def build_path(self) -> Path:
        return self.root / "_build" / "dev"

    def compile(self) -> None:
        self.compiled += 1


def make_record(
    tag: str = "warn_matching",
    file: str = "lib/a.ex",
    line: int = 1,
    detail: object = None,
    message: str | None = None,
) -> DiagnosticRecord:
    if detail is None:
        detail = (Atom("pattern_match"), ["pattern {ok, _}", "error"])
    return DiagnosticRecord(
        tag=Atom(tag), location=(file, line), detail=detail, message=message
    )


@pytest.fixture
def fake_host(tmp_path: Path) -> FakeHost:
    return FakeHost(tmp_path)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def record_factory() -> Callable[..., DiagnosticRecord]:
    """Factory for warning records (tag, file, line, detail, message)."""
    return make_record


@pytest.fixture
def engine_factory() -> type[FakeEngine]:
    return FakeEngine
