from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from lanotify.config import ScanningConfig
from lanotify.models import Device

logger = logging.getLogger(__name__)

# arp-scan expands the \t escapes itself
ARP_SCAN_FORMAT = "${ip}\\t${mac}\\t${vendor}"


class ScanError(RuntimeError):
    """The scan could not be performed at all."""


def build_command(config: ScanningConfig) -> list[str]:
    cmd = [config.command, "--localnet", "--plain", f"--format={ARP_SCAN_FORMAT}"]
    if config.interface:
        cmd.append(f"--interface={config.interface}")
    return cmd


def _parse_line(line: str) -> Device:
    fields = line.split("\t")
    if len(fields) < 3:
        raise ValueError(f"expected ip, mac and vendor, got {len(fields)} field(s)")
    ip, mac, vendor = fields[0], fields[1], "\t".join(fields[2:])
    return Device(mac=mac.strip(), ip=ip.strip(), vendor=vendor.strip())


def parse_arp_scan_output(output: str) -> list[Device]:
    """Parse ``ip<TAB>mac<TAB>vendor`` lines, skipping malformed ones."""
    devices: list[Device] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        try:
            devices.append(_parse_line(line))
        except (ValueError, ValidationError) as exc:
            logger.warning("Skipping malformed scan line %r: %s", line, exc)
    return devices


async def scan_network(config: ScanningConfig) -> list[Device]:
    cmd = build_command(config)
    logger.debug("Starting network scan: %s", " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ScanError(f"Failed to execute {config.command!r}: {exc}") from exc

    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        message = stderr.decode(errors="replace").strip()
        raise ScanError(f"{config.command} exited with status {proc.returncode}: {message}")

    devices = parse_arp_scan_output(stdout.decode(errors="replace"))
    logger.debug("Scan complete: found %d devices", len(devices))
    return devices
