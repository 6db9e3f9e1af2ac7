"""Host toolchain interface."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pltguard.plt.fingerprint import VersionInfo


class HostToolchain(Protocol):
    """Facts about the installed runtimes and the project being analyzed.

    Implementations never modify the project, except for ``compile``,
    which delegates to the project's own build tool.
    """

    def versions(self) -> VersionInfo: ...

    def platform_paths(self) -> list[Path]:
        """Library directories of the runtime's own applications."""
        ...

    def language_core_paths(self) -> list[Path]:
        """Library directories of the language's standard applications."""
        ...

    def dependency_paths(self) -> list[Path]:
        """Compiled code of the project's resolved dependencies."""
        ...

    def application_paths(self) -> list[Path]:
        """Compiled code of the project itself (all child apps for umbrellas)."""
        ...

    def lock_content(self) -> bytes: ...

    def build_path(self) -> Path: ...

    def compile(self) -> None: ...
