"""AppContext: the object passed to every command via ``@click.pass_obj``.

It holds the resolved settings, builds services from them, and turns a
ServiceResult into output plus an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cinemaweb.config.logging import configure_logging
from cinemaweb.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cinemaweb.config.settings import CinemaSettings
    from cinemaweb.services.base import BaseService
    from cinemaweb.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: CinemaSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output(self) -> OutputSettings:
        s = self.settings
        return OutputSettings(json_output=s.json_output, quiet=s.quiet, verbose=s.verbose)

    def service[S: BaseService](self, service_cls: type[S]) -> S:
        """Instantiate a service bound to these settings."""
        return service_cls(self.settings)

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Successful output goes to stdout. Failures and (outside JSON mode,
        where they are part of the payload) warnings go to stderr.
        """
        output = self.output
        text = format_result(result, settings=output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if output.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
