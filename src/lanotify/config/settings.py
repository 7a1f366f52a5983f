from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, HttpUrl, ValidationError, model_validator

from lanotify.models.device import MacAddress

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "LANOTIFY_CONFIG"


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    interval: float = Field(default=60.0, gt=0)
    command: str = "arp-scan"
    interface: str | None = None


class ClassifierConfig(BaseModel):
    """Tuning knobs of the presence classifier.

    ``capacity`` is the number of scan rounds remembered per device and
    ``recent_window`` the size of the "recent" sub-window compared against
    the full-window base rate. The two rate breakpoints split devices into
    sparse, intermittent and always-on regimes.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    capacity: int = Field(default=30, ge=2)
    recent_window: int = Field(default=10, ge=1)
    sparse_max_rate: float = Field(default=0.3, ge=0, le=1)
    always_on_min_rate: float = Field(default=0.8, ge=0, le=1)
    deviation_threshold: float = Field(default=-0.6, lt=0)
    recent_rate_floor: float = Field(default=0.3, ge=0, le=1)
    epsilon: float = Field(default=0.01, gt=0)

    @model_validator(mode="after")
    def _check_breakpoints(self) -> ClassifierConfig:
        if self.recent_window >= self.capacity:
            raise ValueError("recent_window must be smaller than capacity")
        if self.sparse_max_rate >= self.always_on_min_rate:
            raise ValueError("sparse_max_rate must be smaller than always_on_min_rate")
        return self


class NotificationConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    desktop: bool = True
    webhook_url: HttpUrl | None = None
    webhook_timeout: float = Field(default=10.0, gt=0)
    notify_unknown: bool = False


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    scanning: ScanningConfig = Field(default_factory=ScanningConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    devices: dict[MacAddress, str] = Field(default_factory=dict)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def _toml_string(value: str) -> str:
    return json.dumps(value)


def _toml_bool(value: bool) -> str:
    return "true" if value else "false"


def render_settings_toml(settings: Settings) -> str:
    scanning = settings.scanning
    classifier = settings.classifier
    notifications = settings.notifications

    lines = [
        "# lanotify configuration",
        "",
        "[scanning]",
        f"interval = {scanning.interval}",
        f"command = {_toml_string(scanning.command)}",
    ]
    if scanning.interface:
        lines.append(f"interface = {_toml_string(scanning.interface)}")

    lines += [
        "",
        "[classifier]",
        f"capacity = {classifier.capacity}",
        f"recent_window = {classifier.recent_window}",
        f"sparse_max_rate = {classifier.sparse_max_rate}",
        f"always_on_min_rate = {classifier.always_on_min_rate}",
        f"deviation_threshold = {classifier.deviation_threshold}",
        f"recent_rate_floor = {classifier.recent_rate_floor}",
        f"epsilon = {classifier.epsilon}",
        "",
        "[notifications]",
        f"desktop = {_toml_bool(notifications.desktop)}",
    ]
    if notifications.webhook_url:
        lines.append(f"webhook_url = {_toml_string(str(notifications.webhook_url))}")
    lines += [
        f"webhook_timeout = {notifications.webhook_timeout}",
        f"notify_unknown = {_toml_bool(notifications.notify_unknown)}",
        "",
        "# MAC address -> display name",
        "[devices]",
    ]
    for mac, name in sorted(settings.devices.items()):
        lines.append(f"{_toml_string(mac)} = {_toml_string(name)}")

    lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
