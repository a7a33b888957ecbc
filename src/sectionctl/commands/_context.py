"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the store, validator, resolver, and services
exactly once and hands them out by reference; nothing reaches for a
global application object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sectionctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sectionctl.config.settings import SectionSettings
    from sectionctl.infrastructure.store import Store
    from sectionctl.services.result import ServiceResult
    from sectionctl.services.sections import SectionService
    from sectionctl.services.system import SystemService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is lazily initialized on first use so ``--help`` and
    ``--version`` never touch the database.
    """

    def __init__(self, settings: SectionSettings) -> None:
        self.settings = settings
        self._store: Store | None = None
        self._sections: SectionService | None = None

        from sectionctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from sectionctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> Store:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from sectionctl.infrastructure.store import Store

            self._store = Store(self.settings)
            self._store.init_plugins()
        return self._store

    @property
    def sections(self) -> SectionService:
        """The section service, wired with one validator and one resolver."""
        if self._sections is None:
            from sectionctl.domain.urls import LocaleFormatResolver
            from sectionctl.domain.validation import ConfigValidator
            from sectionctl.services.sections import SectionService

            store = self.store
            self._sections = SectionService(
                store,
                validator=ConfigValidator(store.locales),
                resolver=LocaleFormatResolver(store.locales),
            )
        return self._sections

    @property
    def system(self) -> SystemService:
        from sectionctl.services.system import SystemService

        return SystemService(self.store)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Dispose of the store's connections, if one was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None
            self._sections = None
