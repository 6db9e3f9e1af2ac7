"""CLI utilities."""

from pathlib import Path

import click

from pltguard.config.loader import load_config
from pltguard.config.models import PltGuardConfig
from pltguard.core.errors import ConfigError
from pltguard.core.logging import configure_logging


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the Mix project root from the given path.

    Walks up the directory tree looking for a mix.exs file.
    If start_path is None, uses the current working directory.

    Raises:
        click.ClickException: If not inside a Mix project
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        if (current / "mix.exs").is_file():
            return current
        current = current.parent

    if (current / "mix.exs").is_file():
        return current

    raise click.ClickException(
        f"Not inside a Mix project: {start_path}\n"
        "pltguard must be run from a directory containing mix.exs (or below one)."
    )


def load_project_config(ctx: click.Context, project_root: Path) -> PltGuardConfig:
    """Load config for the project and apply it to logging.

    The group-level --verbose flag forces DEBUG regardless of config.
    """
    try:
        config = load_config(project_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return config
