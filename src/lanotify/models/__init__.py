"""Data models for lanotify."""

from lanotify.models.device import (
    Device,
    MacAddress,
    NotificationEvent,
    parse_mac,
)

__all__ = [
    "Device",
    "MacAddress",
    "NotificationEvent",
    "parse_mac",
]
