"""PLT module - fingerprints and tier orchestration."""

from pltguard.plt.fingerprint import (
    Fingerprints,
    PltLocations,
    VersionInfo,
    derive,
    plt_locations,
)
from pltguard.plt.tiers import (
    Tier,
    TierAction,
    TierKind,
    TierOrchestrator,
    TierOutcome,
    decide_action,
    plan_tiers,
)

__all__ = [
    "Fingerprints",
    "PltLocations",
    "Tier",
    "TierAction",
    "TierKind",
    "TierOrchestrator",
    "TierOutcome",
    "VersionInfo",
    "decide_action",
    "derive",
    "plan_tiers",
    "plt_locations",
]
