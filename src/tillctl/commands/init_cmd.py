"""Command: till initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from tillctl.commands._base import TillCommand

if TYPE_CHECKING:
    from tillctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  tillctl init
  tillctl init /path/to/stall --name market-stall
  tillctl init . --force"""


@click.command("init", cls=TillCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Till name (default: directory name).")
@click.option("--force", is_flag=True, help="Overwrite config and reset stock levels.")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None, force: bool) -> None:
    """Initialize a till directory with config and default stock."""
    from tillctl.services.init import InitService

    app.emit(InitService.init_till(Path(path).resolve(), name=name, force=force))
