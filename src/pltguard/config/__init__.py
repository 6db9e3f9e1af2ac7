"""Config module exports."""

from pltguard.config.loader import load_config
from pltguard.config.models import (
    AnalysisConfig,
    LoggingConfig,
    PltConfig,
    PltGuardConfig,
    ProjectConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "LoggingConfig",
    "PltConfig",
    "PltGuardConfig",
    "ProjectConfig",
]
