"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PLTGUARD__SECTION__KEY)
3. Project YAML (.pltguard/config.yaml)
4. Global YAML (~/.config/pltguard/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PLTGUARD__<SECTION>__<KEY>=<VALUE>

Examples:
    PLTGUARD__LOGGING__LEVEL=DEBUG
    PLTGUARD__PLT__CHECK=false
    PLTGUARD__PROJECT__MIX_ENV=test
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from pltguard.config.constants import DEFAULT_CACHE_DIR, DEFAULT_WARNINGS
from pltguard.diagnostics.patterns import compile_pattern

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PLTGUARD__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Status lines are printed regardless of this setting.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class AnalysisConfig(BaseModel):
    """Success typing analysis configuration.

    Env vars:
        PLTGUARD__ANALYSIS__WARNINGS: JSON list of Dialyzer warning options
    """

    warnings: list[str] = Field(
        default_factory=lambda: list(DEFAULT_WARNINGS),
        description="Dialyzer warning options passed to the analysis pass "
        "(equivalent to -W<name> on the command line).",
    )
    ignored_warnings: list[Any] = Field(
        default_factory=list,
        description="Match patterns of warnings that must not fail the run. "
        'Each is [tag, [file, line], [kind, args]] with "_" as wildcard.',
    )

    @field_validator("ignored_warnings")
    @classmethod
    def validate_ignored_warnings(cls, v: list[Any]) -> list[Any]:
        for index, raw in enumerate(v):
            if not isinstance(raw, list) or len(raw) != 3:
                raise ValueError(
                    f"Pattern #{index} must be a list of [tag, location, detail], got {raw!r}"
                )
            compile_pattern(raw)
        return v


class PltConfig(BaseModel):
    """PLT cache configuration.

    Env vars:
        PLTGUARD__PLT__CACHE_DIR: Directory for the shared Erlang and Elixir PLTs
        PLTGUARD__PLT__CHECK: Check existing PLTs before analysis
    """

    cache_dir: str = Field(
        default=DEFAULT_CACHE_DIR,
        validate_default=True,
        description="Directory holding the Erlang/OTP and Elixir PLTs. "
        "Shared across projects; files are named after the installed versions.",
    )
    check: bool = Field(
        default=True,
        description="Check existing PLTs for consistency. Disable to save time "
        "when the PLTs are known to be current.",
    )

    @field_validator("cache_dir")
    @classmethod
    def expand_cache_dir(cls, v: str) -> str:
        return str(Path(v).expanduser())


class ProjectConfig(BaseModel):
    """Mix project configuration.

    Env vars:
        PLTGUARD__PROJECT__MIX_ENV: Mix environment (default: dev)
        PLTGUARD__PROJECT__COMPILE: Compile the project before analysis
    """

    mix_env: str = Field(default="dev", description="MIX_ENV used for compilation and paths.")
    build_path: str | None = Field(
        default=None,
        description="Build directory. Default: _build/<mix_env> under the project root.",
    )
    lockfile: str = Field(default="mix.lock", description="Dependency lockfile name.")
    app: str | None = Field(
        default=None,
        description="OTP application name. Default: read from the app: key in mix.exs.",
    )
    umbrella: bool | None = Field(
        default=None,
        description="Treat the project as an umbrella. Default: true when apps/ exists.",
    )
    compile: bool = Field(default=True, description="Run mix compile before analysis.")

    def resolve_build_path(self, project_root: Path) -> Path:
        if self.build_path:
            path = Path(self.build_path).expanduser()
            return path if path.is_absolute() else project_root / path
        return project_root / "_build" / self.mix_env


class EngineConfig(BaseModel):
    """External executables.

    Env vars:
        PLTGUARD__ENGINE__ERL_EXECUTABLE: erl used to run Dialyzer
        PLTGUARD__ENGINE__ELIXIR_EXECUTABLE: elixir used to query versions
        PLTGUARD__ENGINE__MIX_EXECUTABLE: mix used to compile
    """

    erl_executable: str = "erl"
    elixir_executable: str = "elixir"
    mix_executable: str = "mix"


class DebugConfig(BaseModel):
    """Debug configuration.

    Env vars:
        PLTGUARD__DEBUG__ENABLED: Print raw ignored/failed warning terms
    """

    enabled: bool = Field(
        default=False,
        description="Print the raw warning terms after analysis. "
        "Useful for writing ignore patterns.",
    )


class PltGuardConfig(BaseModel):
    """Root configuration for pltguard."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    plt: PltConfig = Field(default_factory=PltConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
