"""pltguard clear command - remove PLTs so they are rebuilt on the next run.

A PLT that fails its check is never rebuilt automatically. This command is
the explicit way to discard it.
"""

from pathlib import Path

import click
import questionary
from rich.console import Console

from pltguard.cli.utils import find_project_root, load_project_config
from pltguard.config.constants import DEPS_PLT_PREFIX, PLT_SUFFIX
from pltguard.config.models import PltGuardConfig
from pltguard.core.errors import PltGuardError
from pltguard.core.progress import get_console
from pltguard.host.base import HostToolchain
from pltguard.host.mix import MixHost
from pltguard.runner import resolve_locations


def collect_targets(
    config: PltGuardConfig,
    host: HostToolchain,
    *,
    include_shared: bool = False,
    include_orphans: bool = False,
) -> list[Path]:
    """PLT files that exist and would be removed."""
    locations = resolve_locations(config, host)
    candidates = [locations.dependencies]
    if include_shared:
        candidates = [locations.platform, locations.language_core, *candidates]
    if include_orphans:
        build_path = host.build_path()
        if build_path.is_dir():
            candidates.extend(
                sorted(
                    p
                    for p in build_path.glob(f"{DEPS_PLT_PREFIX}*{PLT_SUFFIX}")
                    if p != locations.dependencies
                )
            )
    return [p for p in candidates if p.exists()]


def clear_plts(targets: list[Path], *, yes: bool = False, console: Console | None = None) -> bool:
    """Delete the given PLT files.

    Returns True if everything was removed, False if cancelled, nothing to
    clear, or a removal failed.
    """
    console = console or get_console()

    if not targets:
        console.print("[yellow]Nothing to clear[/yellow] - no PLT files found")
        return False

    console.print("\n[bold]The following PLTs will be deleted:[/bold]\n")
    for target in targets:
        console.print(f"  [cyan]•[/cyan] {target}", highlight=False)
    console.print()

    if not yes:
        answer = questionary.select(
            "They will be rebuilt on the next run, which can take several minutes. Continue?",
            choices=[
                questionary.Choice("No, keep them", value=False),
                questionary.Choice("Yes, delete", value=True),
            ],
        ).ask()

        if not answer:
            console.print("[dim]Cancelled[/dim]")
            return False

    failed = False
    for target in targets:
        try:
            target.unlink()
            console.print(f"  [green]✓[/green] Removed {target}", highlight=False)
        except OSError as e:
            failed = True
            console.print(f"  [red]✗[/red] Failed to remove {target}: {e}", highlight=False)

    return not failed


@click.command()
@click.argument("path", default=None, required=False, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--all", "include_shared", is_flag=True, help="Also remove the Erlang and Elixir PLTs"
)
@click.option(
    "--orphans",
    "include_orphans",
    is_flag=True,
    help="Also remove dependencies PLTs left over from earlier lockfiles",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def clear_command(
    ctx: click.Context,
    path: Path | None,
    include_shared: bool,
    include_orphans: bool,
    yes: bool,
) -> None:
    """Remove PLTs so the next run rebuilds them.

    By default only the dependencies PLT for the current lockfile is
    removed. Use this when a PLT check reports problems.

    PATH is the project root. If not specified, walks up from the current
    directory to find mix.exs.
    """
    project_root = find_project_root(path)
    config = load_project_config(ctx, project_root)

    try:
        targets = collect_targets(
            config,
            MixHost(project_root, config),
            include_shared=include_shared,
            include_orphans=include_orphans,
        )
    except PltGuardError as e:
        raise click.ClickException(str(e)) from e

    if not clear_plts(targets, yes=yes):
        if not yes or not targets:
            return  # Cancelled or nothing to clear
        raise click.ClickException("Failed to remove some PLT files")
