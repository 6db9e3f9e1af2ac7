"""Host module - runtime and project facts from the build tooling."""

from pltguard.host.base import HostToolchain
from pltguard.host.mix import MixHost, locked_dependencies

__all__ = ["HostToolchain", "MixHost", "locked_dependencies"]
