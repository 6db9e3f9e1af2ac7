"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (PLTGUARD__SECTION__KEY)
3. Project config (.pltguard/config.yaml)
4. Global config (~/.config/pltguard/config.yaml)
5. Built-in defaults (lowest priority)
"""

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from pltguard.config.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from pltguard.config.models import (
    AnalysisConfig,
    DebugConfig,
    EngineConfig,
    LoggingConfig,
    PltConfig,
    PltGuardConfig,
    ProjectConfig,
)
from pltguard.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/pltguard/config.yaml").expanduser()

_BOOL_TAG = "tag:yaml.org,2002:bool"


class _ConfigLoader(yaml.SafeLoader):
    """SafeLoader reading only true/false as booleans.

    YAML 1.1 also turns yes/no/on/off into booleans, which would make
    atoms with those names unreachable in ignore patterns. Boolean
    settings still accept them, as pydantic coerces the strings.
    """


_ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ConfigLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")
)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.load(f, Loader=_ConfigLoader) or {}  # noqa: S506
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class PltGuardSettings(BaseSettings):
        """Root config. Env vars: PLTGUARD__LOGGING__LEVEL, PLTGUARD__PLT__CHECK, etc."""

        model_config = SettingsConfigDict(
            env_prefix="PLTGUARD__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        analysis: AnalysisConfig = AnalysisConfig()
        plt: PltConfig = PltConfig()
        project: ProjectConfig = ProjectConfig()
        engine: EngineConfig = EngineConfig()
        debug: DebugConfig = DebugConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return PltGuardSettings


def load_config(project_root: Path | None = None, **kwargs: Any) -> PltGuardConfig:
    """Load config: defaults < global config < project config < env vars < kwargs.

    Args:
        project_root: Mix project root to load config from.
                      Defaults to current working directory.
        **kwargs: Override values (highest precedence), keyed by section.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    project_root = project_root or Path.cwd()

    yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)
    project_config = _load_yaml(project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME)
    if project_config:
        yaml_config = _deep_merge(yaml_config, project_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return PltGuardConfig.model_validate(settings.model_dump())
