from __future__ import annotations

from .classifier import Regime, classify, select_regime
from .registry import DeviceRegistry, DeviceState
from .scanner import ScanError, parse_arp_scan_output, scan_network
from .window import SampleWindow

__all__ = [
    "DeviceRegistry",
    "DeviceState",
    "Regime",
    "SampleWindow",
    "ScanError",
    "classify",
    "parse_arp_scan_output",
    "scan_network",
    "select_regime",
]
