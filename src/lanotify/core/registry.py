from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime

from lanotify.config import ClassifierConfig
from lanotify.models import Device, NotificationEvent

from .classifier import DEFAULT_CONFIG, classify
from .window import SampleWindow

logger = logging.getLogger(__name__)


@dataclass
class DeviceState:
    device: Device
    last_seen: datetime
    is_connected: bool
    history: SampleWindow


def _unique_by_mac(observed: Sequence[Device]) -> dict[str, Device]:
    devices: dict[str, Device] = {}
    for device in observed:
        if device.mac in devices:
            logger.debug("Duplicate response from %s in one scan", device.mac)
        devices[device.mac] = device
    return devices


class DeviceRegistry:
    """Connectivity belief for every device ever seen on the network.

    Devices are never removed; a device that leaves keeps accumulating
    ``False`` samples.
    """

    def __init__(self, config: ClassifierConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._states: dict[str, DeviceState] = {}

    @property
    def config(self) -> ClassifierConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, mac: object) -> bool:
        return mac in self._states

    def __iter__(self) -> Iterator[DeviceState]:
        return iter(self._states.values())

    def get(self, mac: str) -> DeviceState | None:
        return self._states.get(mac)

    def _new_state(self, device: Device, now: datetime) -> DeviceState:
        return DeviceState(
            device=device,
            last_seen=now,
            is_connected=True,
            history=SampleWindow(self._config.capacity, [True]),
        )

    def _observe(self, observed: dict[str, Device], now: datetime) -> list[Device]:
        """Record this round's samples, returning the devices seen for the first time."""
        new_devices: list[Device] = []
        for mac, device in observed.items():
            state = self._states.get(mac)
            if state is None:
                self._states[mac] = self._new_state(device, now)
                new_devices.append(device)
                continue
            state.device = device
            state.last_seen = now
            state.history.push(True)

        for mac, state in self._states.items():
            if mac not in observed:
                state.history.push(False)
        return new_devices

    def seed(self, observed: Sequence[Device], now: datetime | None = None) -> None:
        """Register the devices present at startup without announcing them."""
        now = now or datetime.now().astimezone()
        new_devices = self._observe(_unique_by_mac(observed), now)
        logger.info("Initialized with %d devices (%d new)", len(self), len(new_devices))

    def reconcile(
        self, observed: Sequence[Device], now: datetime | None = None
    ) -> list[NotificationEvent]:
        """Apply one scan round and return the resulting connectivity flips.

        A device seen for the first time is announced immediately. Every other
        device is re-classified and reported only when its belief changes, so
        each device yields at most one event per call.
        """
        now = now or datetime.now().astimezone()
        seen = _unique_by_mac(observed)
        new_devices = self._observe(seen, now)

        events = [NotificationEvent(device=device, became_online=True) for device in new_devices]
        for device in new_devices:
            logger.info("New device connected: %s", device)

        fresh = {device.mac for device in new_devices}
        for mac, state in self._states.items():
            if mac in fresh:
                continue
            belief = classify(state.history, state.is_connected, self._config)
            if belief == state.is_connected:
                continue
            state.is_connected = belief
            logger.info(
                "Device %s: %s",
                "connected" if belief else "disconnected",
                state.device,
            )
            events.append(NotificationEvent(device=state.device, became_online=belief))

        return events
