from __future__ import annotations

from typing import Annotated

import typer

from lanotify.utils.logging import setup_logging

from . import config as config_cmd
from .run import register as register_run
from .scan import register as register_scan

app = typer.Typer(
    help="lanotify - get notified when devices join or leave your network",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config", help="Show or create the config file")

register_run(app)
register_scan(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default: $LOGLEVEL or INFO)",
        ),
    ] = None,
) -> None:
    """lanotify CLI."""
    try:
        setup_logging(log_level)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"lanotify version {get_version('lanotify')}")
        raise typer.Exit()
