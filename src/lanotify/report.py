from __future__ import annotations

from collections.abc import Iterable, Mapping

from rich.table import Table

from lanotify.core.registry import DeviceRegistry, DeviceState
from lanotify.models import Device
from lanotify.utils.redaction import Redactor

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN = "(unknown)"


def _sort_key(names: Mapping[str, str]):
    # named devices first, alphabetically, then the rest by MAC
    def key(item: DeviceState | Device) -> tuple[bool, str, str]:
        mac = item.device.mac if isinstance(item, DeviceState) else item.mac
        name = names.get(mac)
        return (name is None, name or "", mac)

    return key


def build_status_table(
    registry: DeviceRegistry,
    names: Mapping[str, str],
    redactor: Redactor | None = None,
) -> Table:
    redactor = redactor or Redactor(enabled=False)

    table = Table(title=f"Status of {len(registry)} devices")
    table.add_column("")
    table.add_column("Activity", style="dim")
    table.add_column("Last seen")
    table.add_column("MAC Address")
    table.add_column("IP", style="cyan")
    table.add_column("Vendor")
    table.add_column("Name", style="yellow")

    for state in sorted(registry, key=_sort_key(names)):
        device = state.device
        table.add_row(
            "✅" if state.is_connected else "❌",
            state.history.render(),
            state.last_seen.strftime(TIME_FORMAT),
            redactor.redact_mac(device.mac),
            redactor.redact_ip(str(device.ip)),
            device.vendor,
            names.get(device.mac, UNKNOWN),
        )
    return table


def build_scan_table(
    devices: Iterable[Device],
    names: Mapping[str, str],
    redactor: Redactor | None = None,
) -> Table:
    redactor = redactor or Redactor(enabled=False)

    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("MAC Address")
    table.add_column("Vendor")
    table.add_column("Name", style="yellow")

    for device in sorted(devices, key=_sort_key(names)):
        table.add_row(
            redactor.redact_ip(str(device.ip)),
            redactor.redact_mac(device.mac),
            device.vendor,
            names.get(device.mac, UNKNOWN),
        )
    return table
