from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from rich.console import Console

from lanotify.config import ScanningConfig, Settings
from lanotify.core.registry import DeviceRegistry
from lanotify.core.scanner import ScanError, scan_network
from lanotify.models import Device, NotificationEvent
from lanotify.notifications import NotificationDispatcher
from lanotify.report import build_status_table
from lanotify.utils.redaction import Redactor

logger = logging.getLogger(__name__)

Scanner = Callable[[ScanningConfig], Awaitable[list[Device]]]


class Daemon:
    """Scan, reconcile, notify, report, sleep; forever."""

    def __init__(
        self,
        settings: Settings,
        scanner: Scanner = scan_network,
        dispatcher: NotificationDispatcher | None = None,
        console: Console | None = None,
        redactor: Redactor | None = None,
    ) -> None:
        self.settings = settings
        self.registry = DeviceRegistry(settings.classifier)
        self._scanner = scanner
        self._dispatcher = dispatcher or NotificationDispatcher(
            settings.notifications, settings.devices
        )
        self._console = console or Console()
        self._redactor = redactor or Redactor(enabled=False)

    async def _scan(self) -> list[Device] | None:
        try:
            return await self._scanner(self.settings.scanning)
        except ScanError as exc:
            logger.error("Network scan failed, skipping this round: %s", exc)
            return None

    def report(self) -> None:
        self._console.print(
            build_status_table(self.registry, self.settings.devices, self._redactor)
        )

    async def start(self) -> bool:
        """Seed the registry from an initial scan; returns False if the scan failed."""
        devices = await self._scan()
        if devices is None:
            return False
        self.registry.seed(devices)
        self.report()
        return True

    async def run_cycle(self) -> list[NotificationEvent]:
        devices = await self._scan()
        if devices is None:
            return []

        events = self.registry.reconcile(devices)
        if events:
            await self._dispatcher.deliver(events)
        self.report()
        return events

    async def run(self, cycles: int | None = None) -> None:
        """Run ``cycles`` scan rounds after startup, forever when ``None``.

        A failed initial scan is retried every interval; each retry uses up
        one of the ``cycles``.
        """
        interval = self.settings.scanning.interval
        done = 0
        # keep retrying the initial scan so devices present at startup stay quiet
        while not await self.start():
            if cycles is not None and done >= cycles:
                logger.error("Giving up: initial scan never succeeded")
                return
            done += 1
            await asyncio.sleep(interval)

        while cycles is None or done < cycles:
            logger.debug("Waiting %.0fs until next scan...", interval)
            await asyncio.sleep(interval)
            await self.run_cycle()
            done += 1
