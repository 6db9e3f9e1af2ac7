"""PLT fingerprints - stable cache keys and file locations per tier.

Keys are pure functions of version strings and lockfile bytes. The same
inputs always give the same key, which is what lets a PLT built by one
invocation be reused by the next. Upgrading Erlang or Elixir, or changing
the lockfile, yields a new key and therefore a new file; the old file is
left in place.
"""

from __future__ import annotations

import base64
import hashlib
from dataclasses import dataclass
from pathlib import Path

from pltguard.config.constants import DEPS_PLT_PREFIX, PLT_SUFFIX


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Installed runtime versions reported by the host."""

    otp_release: str  # "26"
    erts_version: str  # "14.2.1"
    elixir_version: str  # "1.16.0"


@dataclass(frozen=True, slots=True)
class Fingerprints:
    platform: str
    language_core: str
    dependencies: str


def platform_key(versions: VersionInfo) -> str:
    return f"erlang-{versions.otp_release}-erts-{versions.erts_version}"


def language_core_key(versions: VersionInfo) -> str:
    # Includes the platform versions: Elixir's PLT embeds ERTS types.
    return f"elixir-{versions.elixir_version}-{platform_key(versions)}"


def dependencies_key(lock_content: bytes, language_key: str) -> str:
    """Digest of the lockfile plus the language key, safe for file names."""
    digest = hashlib.md5(lock_content + language_key.encode("utf-8"), usedforsecurity=False)
    return base64.urlsafe_b64encode(digest.digest()).decode("ascii").rstrip("=")


def derive(versions: VersionInfo, lock_content: bytes) -> Fingerprints:
    language = language_core_key(versions)
    return Fingerprints(
        platform=platform_key(versions),
        language_core=language,
        dependencies=dependencies_key(lock_content, language),
    )


@dataclass(frozen=True, slots=True)
class PltLocations:
    """Where each tier's PLT lives."""

    platform: Path
    language_core: Path
    dependencies: Path

    def all(self) -> list[Path]:
        return [self.platform, self.language_core, self.dependencies]


def plt_locations(fingerprints: Fingerprints, cache_dir: Path, build_path: Path) -> PltLocations:
    """Shared PLTs go to the user cache, the dependencies PLT to the build dir."""
    return PltLocations(
        platform=cache_dir / f"{fingerprints.platform}{PLT_SUFFIX}",
        language_core=cache_dir / f"{fingerprints.language_core}{PLT_SUFFIX}",
        dependencies=build_path / f"{DEPS_PLT_PREFIX}{fingerprints.dependencies}{PLT_SUFFIX}",
    )
