"""lanotify - desktop and webhook alerts when devices join or leave the local network."""

from __future__ import annotations

from importlib.metadata import version

from .config import ClassifierConfig, NotificationConfig, ScanningConfig, Settings, get_settings
from .core import DeviceRegistry, DeviceState, Regime, SampleWindow, classify
from .models import Device, NotificationEvent

__all__ = [
    "ClassifierConfig",
    "Device",
    "DeviceRegistry",
    "DeviceState",
    "NotificationConfig",
    "NotificationEvent",
    "Regime",
    "SampleWindow",
    "ScanningConfig",
    "Settings",
    "__version__",
    "classify",
    "get_settings",
]

__version__ = version("lanotify")
