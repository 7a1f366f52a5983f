from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from lanotify.core.scanner import ScanError, scan_network
from lanotify.report import build_scan_table
from lanotify.utils.redaction import Redactor

from .common import load_settings_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def scan(
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact IP and MAC addresses in output",
        ),
    ) -> None:
        """Scan the local network once and list the devices found."""
        console = Console()
        settings = load_settings_or_exit()

        console.print(f"Scanning local network with {settings.scanning.command}...")
        try:
            devices = asyncio.run(scan_network(settings.scanning))
        except ScanError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        if not devices:
            console.print("No devices found.")
            return

        redactor = Redactor(enabled=redact)
        console.print(build_scan_table(devices, settings.devices, redactor))
        console.print(f"\n[green]Found {len(devices)} device(s)[/green]")
