from __future__ import annotations

import pytest
from typer.testing import CliRunner

import lanotify.cli.run as run_cmd
import lanotify.cli.scan as scan_cmd
from lanotify import __version__
from lanotify.cli import app
from lanotify.config import ScanningConfig, Settings, get_settings, write_settings
from lanotify.core.scanner import ScanError
from lanotify.models import Device

runner = CliRunner()
WIDE = {"COLUMNS": "200"}

PHONE = Device(mac="aa:bb:cc:dd:ee:01", ip="192.168.1.10", vendor="Apple, Inc.")


@pytest.fixture
def config_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    write_settings(Settings(devices={PHONE.mac: "Alice's phone"}), path)
    monkeypatch.setenv("LANOTIFY_CONFIG", str(path))
    get_settings.cache_clear()
    return path


async def _fake_scan_network(_config: ScanningConfig) -> list[Device]:
    return [PHONE]


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"lanotify version {__version__}" in result.stdout


def test_config_show_defaults():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "Config source: defaults" in result.stdout
    assert "[classifier]" in result.stdout


def test_config_init_writes_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "new" / "config.toml"
    monkeypatch.setenv("LANOTIFY_CONFIG", str(path))

    result = runner.invoke(app, ["config", "init"])

    assert result.exit_code == 0
    assert path.exists()

    again = runner.invoke(app, ["config", "init"])
    assert "Config already exists" in again.stdout


def test_invalid_config_exits_with_error(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    path.write_text("[classifier]\ncapacity = 5\nrecent_window = 10\n")
    monkeypatch.setenv("LANOTIFY_CONFIG", str(path))

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 1


def test_scan_lists_named_devices(config_file, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(scan_cmd, "scan_network", _fake_scan_network)

    result = runner.invoke(app, ["scan"], env=WIDE)

    assert result.exit_code == 0
    assert "Alice's phone" in result.stdout
    assert "Found 1 device(s)" in result.stdout


def test_scan_redacts_addresses(config_file, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(scan_cmd, "scan_network", _fake_scan_network)

    result = runner.invoke(app, ["scan", "--redact"], env=WIDE)

    assert result.exit_code == 0
    assert "x.x.x.10" in result.stdout
    assert "aa:bb:cc:xx:xx:01" in result.stdout


def test_scan_failure(config_file, monkeypatch: pytest.MonkeyPatch):
    async def _failing_scan(_config: ScanningConfig) -> list[Device]:
        raise ScanError("arp-scan exited with status 1: You need to be root")

    monkeypatch.setattr(scan_cmd, "scan_network", _failing_scan)

    result = runner.invoke(app, ["scan"], env=WIDE)

    assert result.exit_code == 1


def test_run_once_prints_status(config_file, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(run_cmd, "scan_network", _fake_scan_network)

    result = runner.invoke(app, ["run", "--once"], env=WIDE)

    assert result.exit_code == 0
    assert "Alice's phone" in result.stdout


def test_unknown_log_level_exits_with_error():
    result = runner.invoke(app, ["--log-level", "chatty", "config", "show"])

    assert result.exit_code == 1


def test_config_path(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    monkeypatch.setenv("LANOTIFY_CONFIG", str(path))

    result = runner.invoke(app, ["config", "path"])

    assert result.exit_code == 0
    assert "using defaults" in result.stdout
