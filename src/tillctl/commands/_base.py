"""Click base classes for till commands.

Every till command carries a block of sample invocations. ``--help`` stays
short and points at ``--examples``, which prints the block and exits
before the till (stock file, journal) is opened.
"""

from __future__ import annotations

from typing import Any

import click

EXAMPLES_HINT = "Run with --examples to see sample invocations."


def _examples_callback(examples: str) -> Any:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Sample invocations of '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return show


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag and a help epilog pointing at it."""

    params: list[click.Parameter]
    epilog: str | None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        if not self.epilog:
            self.epilog = EXAMPLES_HINT
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_examples_callback(examples),
                help="Show sample invocations and exit.",
            )
        )


class TillCommand(_ExamplesMixin, click.Command):
    """A till command that accepts ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class TillGroup(_ExamplesMixin, click.Group):
    """A till command group; subcommands default to :class:`TillCommand`."""

    command_class = TillCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
