"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Till initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tillctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from tillctl.config.settings import TillSettings
    from tillctl.infrastructure.till import Till
    from tillctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The till is lazily
    initialized on first use so ``--help`` and ``--examples`` never
    read the stock file or the journal.
    """

    def __init__(self, settings: TillSettings) -> None:
        self.settings = settings
        self._till: Till | None = None

        # Configure structured logging
        from tillctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            till_name=settings.till.name,
        )

        # Enable telemetry context var when verbose
        if settings.verbose:
            from tillctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def till(self) -> Till:
        """The till instance (created lazily on first access).

        Saved stock levels are applied on creation; problems loading the
        stock file or the journal become warnings on the next emitted result.
        """
        if self._till is None:
            from tillctl.infrastructure.till import Till
            from tillctl.services.catalog import CatalogService

            self._till = Till(self.settings)
            loaded = CatalogService(self._till).load_stock()
            self._till.warnings.extend(loaded.warnings)
        return self._till

    def _with_startup_warnings(self, result: ServiceResult) -> ServiceResult:
        if self._till is None or not self._till.warnings:
            return result
        warnings = [*self._till.warnings, *result.warnings]
        self._till.warnings.clear()
        return result.model_copy(update={"warnings": warnings})

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        result = self._with_startup_warnings(result)
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            raise SystemExit(1)
