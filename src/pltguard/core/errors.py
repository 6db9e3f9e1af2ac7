"""pltguard error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Engine (structural analysis failures)
- 4xxx: Host tooling
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Engine (3xxx)
    ENGINE_FAILURE = 3001
    ENGINE_NOT_FOUND = 3002
    ENGINE_BAD_OUTPUT = 3003

    # Host (4xxx)
    HOST_NOT_FOUND = 4001
    HOST_COMMAND_FAILED = 4002
    HOST_COMPILE_FAILED = 4003
    HOST_PROJECT_INVALID = 4004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_MISSING_DATABASE = 9002


@dataclass(frozen=True)
class PltGuardError(Exception):
    """Base error with structured context.

    Raise one of the subclasses. Fields are frozen, but the exception
    machinery still has to set ``__traceback__`` when an error leaves a
    context manager, which only works on subclasses of a frozen dataclass.
    """

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'ENGINE_FAILURE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PltGuardError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class EngineError(PltGuardError):
    """Structural failure of the analysis engine.

    Distinct from ordinary warnings: the engine could not complete a
    build, check or analysis call at all. Always fatal for the run.
    """

    @classmethod
    def failure(cls, operation: str, reason: str) -> "EngineError":
        return cls(
            code=ErrorCode.ENGINE_FAILURE,
            message=f"Dialyzer {operation} failed: {reason}",
            details={"operation": operation, "reason": reason},
        )

    @classmethod
    def not_found(cls, executable: str) -> "EngineError":
        return cls(
            code=ErrorCode.ENGINE_NOT_FOUND,
            message=f"Executable not found: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def bad_output(cls, operation: str, line: str, reason: str) -> "EngineError":
        return cls(
            code=ErrorCode.ENGINE_BAD_OUTPUT,
            message=f"Could not decode Dialyzer {operation} output: {reason}",
            details={"operation": operation, "line": line, "reason": reason},
        )


class HostError(PltGuardError):
    """Errors from the host build tooling (elixir, mix)."""

    @classmethod
    def not_found(cls, executable: str) -> "HostError":
        return cls(
            code=ErrorCode.HOST_NOT_FOUND,
            message=f"Executable not found: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def command_failed(cls, command: list[str], returncode: int, stderr: str) -> "HostError":
        return cls(
            code=ErrorCode.HOST_COMMAND_FAILED,
            message=f"Command {' '.join(command[:2])} exited with status {returncode}",
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def compile_failed(cls, returncode: int) -> "HostError":
        return cls(
            code=ErrorCode.HOST_COMPILE_FAILED,
            message=f"Project compilation failed (exit status {returncode})",
            details={"returncode": returncode},
        )

    @classmethod
    def project_invalid(cls, path: str, reason: str) -> "HostError":
        return cls(
            code=ErrorCode.HOST_PROJECT_INVALID,
            message=f"Cannot use Mix project at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(PltGuardError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def missing_database(cls, tier: str, path: str) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_MISSING_DATABASE,
            message=f"Cannot process {tier} PLT: predecessor PLT {path} does not exist",
            details={"tier": tier, "path": path},
        )
