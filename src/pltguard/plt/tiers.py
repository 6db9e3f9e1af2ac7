"""PLT tiers - build, check or reuse each analysis database in order.

For efficiency the PLT is split in three: one for Erlang/OTP, one for
Elixir and one for the project's dependencies. They have different
lifetimes. Erlang and Elixir do not change between builds of a project
and are expensive to analyze, so their PLTs are shared from the user
cache. Dependencies change with the lockfile.

Each tier is seeded with the PLTs of the tiers before it, so tiers are
processed strictly one after another.

If checking an existing PLT reports problems, the PLT is NOT rebuilt;
remove it (``pltguard clear``) to force a rebuild.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pltguard.core.errors import InternalError
from pltguard.core.formatting import format_duration
from pltguard.core.logging import get_logger
from pltguard.core.progress import spinner, status
from pltguard.diagnostics.classify import classify
from pltguard.diagnostics.models import ClassifiedResult, DiagnosticRecord
from pltguard.diagnostics.report import ResultReporter
from pltguard.engine.base import AnalysisEngine
from pltguard.host.base import HostToolchain
from pltguard.plt.fingerprint import Fingerprints, PltLocations

log = get_logger("plt.tiers")


class TierKind(Enum):
    """PLT tiers in dependency order."""

    PLATFORM = "platform"
    LANGUAGE_CORE = "language_core"
    PROJECT_DEPENDENCIES = "dependencies"

    @property
    def order(self) -> int:
        return list(TierKind).index(self)


class TierAction(Enum):
    VALIDATE = "validate"
    SKIP = "skip"
    BUILD = "build"


@dataclass
class Tier:
    """One PLT and how to produce it."""

    kind: TierKind
    label: str  # "Erlang/OTP", "Elixir", "dependencies"
    key: str
    database: Path
    # Only called when the PLT has to be built
    paths: Callable[[], Sequence[Path]]
    predecessors: tuple[Path, ...] = ()


@dataclass
class TierOutcome:
    tier: Tier
    action: TierAction
    result: ClassifiedResult = field(default_factory=ClassifiedResult)
    duration_seconds: float = 0.0


def decide_action(exists: bool, check: bool) -> TierAction:
    """Existence decides first; the check flag only matters for existing PLTs."""
    if not exists:
        return TierAction.BUILD
    return TierAction.VALIDATE if check else TierAction.SKIP


def plan_tiers(
    fingerprints: Fingerprints,
    locations: PltLocations,
    host: HostToolchain,
) -> list[Tier]:
    """The three tiers, each seeded with the PLT of the tier before it."""
    return [
        Tier(
            kind=TierKind.PLATFORM,
            label="Erlang/OTP",
            key=fingerprints.platform,
            database=locations.platform,
            paths=host.platform_paths,
        ),
        Tier(
            kind=TierKind.LANGUAGE_CORE,
            label="Elixir",
            key=fingerprints.language_core,
            database=locations.language_core,
            paths=host.language_core_paths,
            predecessors=(locations.platform,),
        ),
        Tier(
            kind=TierKind.PROJECT_DEPENDENCIES,
            label="dependencies",
            key=fingerprints.dependencies,
            database=locations.dependencies,
            paths=host.dependency_paths,
            predecessors=(locations.language_core,),
        ),
    ]


class TierOrchestrator:
    """Runs the check-or-build decision for each tier.

    Engine failures propagate immediately as
    :class:`~pltguard.core.errors.EngineError`; later tiers are not touched.
    """

    def __init__(
        self,
        engine: AnalysisEngine,
        *,
        check: bool = True,
        reporter: ResultReporter | None = None,
    ) -> None:
        self._engine = engine
        self._check = check
        self._reporter = reporter or ResultReporter()

    def ensure_all(self, tiers: Sequence[Tier]) -> list[TierOutcome]:
        kinds = [t.kind.order for t in tiers]
        if kinds != sorted(kinds):
            raise InternalError.unexpected(
                "tiers out of dependency order", tiers=[t.kind.value for t in tiers]
            )
        return [self.ensure(tier) for tier in tiers]

    def ensure(self, tier: Tier) -> TierOutcome:
        for predecessor in tier.predecessors:
            if not predecessor.exists():
                raise InternalError.missing_database(tier.label, str(predecessor))

        action = decide_action(tier.database.exists(), self._check)
        log.debug("tier_action", tier=tier.kind.value, action=action.value, plt=str(tier.database))

        start = time.monotonic()
        if action is TierAction.BUILD:
            result = self._build(tier)
        elif action is TierAction.VALIDATE:
            result = self._validate(tier)
        else:
            result = ClassifiedResult()

        return TierOutcome(
            tier=tier,
            action=action,
            result=result,
            duration_seconds=time.monotonic() - start,
        )

    def _build(self, tier: Tier) -> ClassifiedResult:
        status(f"Building {tier.label} PLT: {tier.database}")
        tier.database.parent.mkdir(parents=True, exist_ok=True)
        paths = list(tier.paths())
        log.info("tier_build_start", tier=tier.kind.value, paths=len(paths))

        start = time.monotonic()
        with spinner(f"Analyzing {len(paths)} {tier.label} paths"):
            records = self._engine.build(tier.database, paths, tier.predecessors)
        elapsed = time.monotonic() - start

        log.info("tier_build_done", tier=tier.kind.value, elapsed_s=round(elapsed, 3))
        status(f"Built {tier.label} PLT in {format_duration(elapsed)}", style="success")
        return self._findings(records)

    def _validate(self, tier: Tier) -> ClassifiedResult:
        status(f"Checking {tier.label} PLT: {tier.database}")
        with spinner(f"Checking {tier.label} PLT"):
            records = self._engine.check(tier.database)

        result = self._findings(records)
        if result.failed:
            log.warning("tier_check_findings", tier=tier.kind.value, count=len(result.failed))
            status(
                f"{tier.label} PLT may be stale; remove {tier.database} to force a rebuild",
                style="warning",
            )
        return result

    def _findings(self, records: Sequence[DiagnosticRecord]) -> ClassifiedResult:
        # Build/check findings are shown but never ignored and never fail the run.
        result = classify(records, ())
        self._reporter.print_findings(result)
        return result
