"""pltguard CLI - pltguard command."""

import click

from pltguard.cli.clear import clear_command
from pltguard.cli.run import run_command
from pltguard.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="pltguard")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """pltguard - Dialyzer for Mix projects with layered PLT caching."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(run_command, name="run")
cli.add_command(clear_command, name="clear")


if __name__ == "__main__":
    cli()
