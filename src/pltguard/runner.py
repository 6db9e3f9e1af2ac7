"""Analysis runner - the whole pipeline for one invocation.

compile (optional) -> PLT tiers in order -> success typing analysis ->
classification against the ignore list -> report -> exit code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pltguard.config.models import PltGuardConfig
from pltguard.core.logging import get_logger, set_run_id
from pltguard.core.progress import spinner, status
from pltguard.diagnostics.classify import classify
from pltguard.diagnostics.models import ClassifiedResult
from pltguard.diagnostics.patterns import compile_ignore_list
from pltguard.diagnostics.report import ResultReporter
from pltguard.engine.base import AnalysisEngine
from pltguard.host.base import HostToolchain
from pltguard.plt.fingerprint import Fingerprints, PltLocations, derive, plt_locations
from pltguard.plt.tiers import TierOrchestrator, TierOutcome, plan_tiers

log = get_logger("runner")


@dataclass
class RunOptions:
    """Per-invocation switches (CLI flags override config defaults)."""

    check: bool = True
    compile: bool = True
    debug: bool = False


@dataclass
class RunResult:
    result: ClassifiedResult
    exit_code: int
    tiers: list[TierOutcome] = field(default_factory=list)


def resolve_locations(
    config: PltGuardConfig, host: HostToolchain, fingerprints: Fingerprints | None = None
) -> PltLocations:
    """PLT paths for the current runtime versions and lockfile."""
    if fingerprints is None:
        fingerprints = derive(host.versions(), host.lock_content())
    return plt_locations(fingerprints, Path(config.plt.cache_dir), host.build_path())


class AnalysisRunner:
    """Wires host, engine, tier orchestration and reporting together."""

    def __init__(
        self,
        config: PltGuardConfig,
        host: HostToolchain,
        engine: AnalysisEngine,
        reporter: ResultReporter | None = None,
    ) -> None:
        self._config = config
        self._host = host
        self._engine = engine
        self._reporter = reporter

    def run(self, options: RunOptions) -> RunResult:
        """Run the pipeline.

        Raises:
            EngineError: Dialyzer could not complete a build, check or analysis.
            HostError: Compilation or a host query failed.
        """
        run_id = set_run_id()
        log.info("run_start", run_id=run_id, check=options.check, compile=options.compile)
        reporter = self._reporter or ResultReporter(debug=options.debug)

        if options.compile:
            status("Compiling project...")
            self._host.compile()

        fingerprints = derive(self._host.versions(), self._host.lock_content())
        locations = resolve_locations(self._config, self._host, fingerprints)
        log.debug(
            "plt_locations",
            platform=str(locations.platform),
            language_core=str(locations.language_core),
            dependencies=str(locations.dependencies),
        )

        orchestrator = TierOrchestrator(self._engine, check=options.check, reporter=reporter)
        outcomes = orchestrator.ensure_all(plan_tiers(fingerprints, locations, self._host))

        patterns = compile_ignore_list(self._config.analysis.ignored_warnings)
        status("Running analysis...")
        with spinner("Running success typing analysis"):
            records = self._engine.analyze(
                locations.all(),
                self._host.application_paths(),
                self._config.analysis.warnings,
            )

        result = classify(records, patterns)
        code = reporter.report(result)
        log.info("run_done", ignored=len(result.ignored), failed=len(result.failed), exit_code=code)
        return RunResult(result=result, exit_code=code, tiers=outcomes)
