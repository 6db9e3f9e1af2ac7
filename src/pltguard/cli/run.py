"""pltguard run command - build/check PLTs and run the analysis."""

from pathlib import Path

import click

from pltguard.cli.utils import find_project_root, load_project_config
from pltguard.core.errors import PltGuardError
from pltguard.core.logging import get_log_file_path, get_logger
from pltguard.engine.dialyzer import DialyzerEngine
from pltguard.host.mix import MixHost
from pltguard.runner import AnalysisRunner, RunOptions

log = get_logger("cli.run")


@click.command()
@click.argument("path", default=None, required=False, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--check/--no-check",
    default=None,
    help="Check existing PLTs before analysis (default: true, or plt.check from config)",
)
@click.option(
    "--compile/--no-compile",
    "compile_",
    default=None,
    help="Compile the project first (default: true, or project.compile from config)",
)
@click.option("--debug", is_flag=True, help="Print raw warning terms for writing ignore patterns")
@click.pass_context
def run_command(
    ctx: click.Context,
    path: Path | None,
    check: bool | None,
    compile_: bool | None,
    debug: bool,
) -> None:
    """Run Dialyzer on a Mix project.

    Builds or checks the Erlang/OTP, Elixir and dependencies PLTs, then
    analyzes the project. Exits non-zero when warnings remain that are not
    matched by analysis.ignored_warnings.

    PATH is the project root. If not specified, walks up from the current
    directory to find mix.exs.
    """
    project_root = find_project_root(path)
    config = load_project_config(ctx, project_root)

    options = RunOptions(
        check=config.plt.check if check is None else check,
        compile=config.project.compile if compile_ is None else compile_,
        debug=debug or config.debug.enabled,
    )

    runner = AnalysisRunner(
        config,
        MixHost(project_root, config),
        DialyzerEngine(config.engine.erl_executable),
    )
    try:
        result = runner.run(options)
    except PltGuardError as e:
        log.error("run_failed", error=e.error_name, details=e.details)
        message = str(e)
        if log_path := get_log_file_path():
            message += f"\nSee {log_path} for details."
        raise click.ClickException(message) from e

    ctx.exit(result.exit_code)
