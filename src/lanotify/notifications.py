"""Delivery of connectivity alerts (desktop popups and webhooks)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

from lanotify.config import NotificationConfig
from lanotify.models import NotificationEvent

logger = logging.getLogger(__name__)

NOTIFY_SEND = "notify-send"


class NotificationError(RuntimeError):
    """An alert could not be delivered."""


@dataclass(frozen=True)
class Alert:
    title: str
    body: str
    name: str
    event: NotificationEvent


def format_alert(event: NotificationEvent, name: str) -> Alert:
    device = event.device
    status = "connected" if event.became_online else "disconnected"
    return Alert(
        title=f"Device {name} {status}",
        body=f"Device {name} with IP {device.ip} and MAC {device.mac} is {status}",
        name=name,
        event=event,
    )


class Notifier(Protocol):
    name: str

    async def send(self, alert: Alert) -> None: ...


class DesktopNotifier:
    name = "desktop"

    def __init__(self, command: str = NOTIFY_SEND) -> None:
        self._command = command

    async def send(self, alert: Alert) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                self._command,
                alert.title,
                alert.body,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise NotificationError(f"Failed to execute {self._command!r}: {exc}") from exc

        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise NotificationError(
                f"{self._command} exited with status {proc.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )


class WebhookNotifier:
    name = "webhook"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def payload(alert: Alert) -> dict[str, object]:
        device = alert.event.device
        return {
            "title": alert.title,
            "body": alert.body,
            "name": alert.name,
            "mac": device.mac,
            "ip": str(device.ip),
            "vendor": device.vendor,
            "online": alert.event.became_online,
        }

    async def send(self, alert: Alert) -> None:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            r = await client.post(self._url, json=self.payload(alert))
            r.raise_for_status()


def build_notifiers(config: NotificationConfig) -> list[Notifier]:
    notifiers: list[Notifier] = []
    if config.desktop:
        notifiers.append(DesktopNotifier())
    if config.webhook_url:
        notifiers.append(WebhookNotifier(str(config.webhook_url), timeout=config.webhook_timeout))
    return notifiers


class NotificationDispatcher:
    """Turns notification events into alerts and fans them out to notifiers.

    Events for devices without a configured name are dropped unless
    ``notify_unknown`` is set. Delivery errors are logged, never raised:
    the registry has already committed the new belief by the time we get here.
    """

    def __init__(
        self,
        config: NotificationConfig,
        names: Mapping[str, str],
        notifiers: Sequence[Notifier] | None = None,
    ) -> None:
        self._config = config
        self._names = names
        self._notifiers = list(build_notifiers(config) if notifiers is None else notifiers)

    def alert_for(self, event: NotificationEvent) -> Alert | None:
        device = event.device
        name = self._names.get(device.mac)
        if name is None:
            if not self._config.notify_unknown:
                logger.debug("Not notifying about unknown device %s", device.mac)
                return None
            name = device.vendor or device.mac
        return format_alert(event, name)

    async def _send(self, notifier: Notifier, alert: Alert) -> bool:
        try:
            await notifier.send(alert)
        except (NotificationError, httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.error("Failed to send %s notification '%s': %s", notifier.name, alert.title, exc)
            return False
        logger.debug("Sent %s notification '%s'", notifier.name, alert.title)
        return True

    async def deliver(self, events: Sequence[NotificationEvent]) -> int:
        """Send every event to every notifier; returns the number of successful sends."""
        alerts = [alert for alert in map(self.alert_for, events) if alert is not None]
        if not alerts or not self._notifiers:
            return 0
        results = await asyncio.gather(
            *(self._send(notifier, alert) for alert in alerts for notifier in self._notifiers)
        )
        return sum(results)
