"""Core module exports."""

from pltguard.core.errors import (
    ConfigError,
    EngineError,
    ErrorCode,
    HostError,
    InternalError,
    PltGuardError,
)
from pltguard.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from pltguard.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "EngineError",
    "ErrorCode",
    "HostError",
    "InternalError",
    "PltGuardError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
    "status",
]
