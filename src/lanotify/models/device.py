"""Device models."""

from __future__ import annotations

import re
from ipaddress import IPv4Address
from typing import Annotated

from pydantic import AfterValidator, BaseModel

_MAC_PATTERN = re.compile(r"^[0-9a-f]{2}(:[0-9a-f]{2}){5}$")


def parse_mac(value: str) -> str:
    """Validate a colon separated MAC address and return it lower-cased.

    Only the canonical 17 character form (``aa:bb:cc:dd:ee:ff``) is accepted.
    """
    candidate = value.lower()
    if not _MAC_PATTERN.match(candidate):
        raise ValueError(f"invalid MAC address: {value!r}")
    return candidate


MacAddress = Annotated[str, AfterValidator(parse_mac)]


class Device(BaseModel):
    """A host answering a network scan."""

    model_config = {"frozen": True, "extra": "forbid"}

    mac: MacAddress
    ip: IPv4Address
    vendor: str = ""

    def __str__(self) -> str:
        return f"{self.mac}\t{self.ip}\t{self.vendor}"


class NotificationEvent(BaseModel):
    """Connectivity flip of one device."""

    model_config = {"frozen": True, "extra": "forbid"}

    device: Device
    became_online: bool
