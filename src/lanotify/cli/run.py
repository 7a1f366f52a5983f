from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console

from lanotify.core.scanner import scan_network
from lanotify.daemon import Daemon
from lanotify.utils.redaction import Redactor

from .common import load_settings_or_exit

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    @app.command()
    def run(
        once: bool = typer.Option(
            False, "--once", help="Scan once, print the device table and exit"
        ),
        interval: float | None = typer.Option(
            None, "--interval", min=1, help="Seconds between scans (overrides config)"
        ),
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact IP and MAC addresses in output",
        ),
    ) -> None:
        """Watch the local network and notify on connects and disconnects."""
        settings = load_settings_or_exit()
        if interval is not None:
            settings = settings.model_copy(
                update={"scanning": settings.scanning.model_copy(update={"interval": interval})}
            )
        logger.info(
            "Scan settings: interval=%.0fs, window=%d, %d named devices",
            settings.scanning.interval,
            settings.classifier.capacity,
            len(settings.devices),
        )

        daemon = Daemon(
            settings,
            scanner=scan_network,
            console=Console(),
            redactor=Redactor(enabled=redact),
        )

        if once:
            if not asyncio.run(daemon.start()):
                raise typer.Exit(1)
            return

        try:
            asyncio.run(daemon.run())
        except KeyboardInterrupt:
            typer.echo("Stopped.")
