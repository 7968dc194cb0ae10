"""tillctl entry point: global options, then the till commands."""

from __future__ import annotations

from pathlib import Path

import click

from tillctl import __version__
from tillctl.commands import register_commands
from tillctl.commands._base import TillGroup
from tillctl.commands._context import AppContext
from tillctl.config.settings import TillSettings

_ROOT_EXAMPLES = """\
  tillctl init ./stall --name market-stall
  tillctl catalog list --category Scarves
  tillctl sell SC-WS-M:3 --discount 10
  tillctl --root ./stall history summary
  tillctl --json --actor Sam sell BE-CB-Kids:1"""


@click.group(cls=TillGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="tillctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only IDs or SKUs.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and operation timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this tillctl.toml.")
@click.option(
    "--root",
    "till_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Till directory (default: nearest till at or above the working directory).",
)
@click.option("--actor", default=None, help="Employee or customer name recorded on sales.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    till_root: Path | None,
    actor: str | None,
) -> None:
    """tillctl: point-of-sale till for a pop-up shop."""
    settings = TillSettings.from_cli(
        config_path=config_path,
        till_root=till_root.resolve() if till_root is not None else None,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        actor=actor,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
