import subprocess

import pytest

from src.core import device_discovery
from src.core.device_discovery import (
    AttachedDevice,
    is_valid_serial,
    parse_adb_devices,
    resolve_udid,
)

ADB_OUTPUT = """List of devices attached
emulator-5554          device product:sdk_gphone64 model:sdk_gphone64_x86_64 transport_id:1
R58M123ABC             unauthorized usb:1-1 transport_id:2

"""


class TestParseAdbDevices:
    def test_parses_serial_and_state(self):
        assert parse_adb_devices(ADB_OUTPUT) == [
            AttachedDevice("emulator-5554", "device"),
            AttachedDevice("R58M123ABC", "unauthorized"),
        ]

    def test_only_device_state_is_ready(self):
        ready, unauthorized = parse_adb_devices(ADB_OUTPUT)
        assert ready.is_ready
        assert not unauthorized.is_ready

    def test_header_only(self):
        assert parse_adb_devices("List of devices attached\n") == []


class TestIsValidSerial:
    @pytest.mark.parametrize("serial", ["emulator-5554", "192.168.1.10:5555", "R58M123ABC"])
    def test_valid(self, serial):
        assert is_valid_serial(serial)

    @pytest.mark.parametrize("serial", ["", "dev; rm -rf /", "a" * 256])
    def test_invalid(self, serial):
        assert not is_valid_serial(serial)


class TestResolveUdid:
    def test_configured_wins(self, monkeypatch):
        monkeypatch.setattr(device_discovery, "list_devices", lambda: [])
        assert resolve_udid(" abc ") == "abc"

    def test_single_ready_device(self, monkeypatch):
        monkeypatch.setattr(
            device_discovery,
            "list_devices",
            lambda: [AttachedDevice("emulator-5554", "device"), AttachedDevice("X1", "offline")],
        )
        assert resolve_udid() == "emulator-5554"

    def test_several_devices(self, monkeypatch):
        monkeypatch.setattr(
            device_discovery,
            "list_devices",
            lambda: [AttachedDevice("a", "device"), AttachedDevice("b", "device")],
        )
        assert resolve_udid() is None

    def test_discovery_disabled_never_runs_adb(self, monkeypatch):
        def fail():
            raise AssertionError("adb must not be queried")

        monkeypatch.setattr(device_discovery, "list_devices", fail)
        assert resolve_udid(None, discover=False) is None
        assert resolve_udid("abc", discover=False) == "abc"


class TestListDevices:
    def test_adb_missing(self, monkeypatch):
        def fake_run(*args, **kwargs):
            raise FileNotFoundError("adb")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert device_discovery.list_devices() == []

    def test_adb_timeout(self, monkeypatch):
        def fake_run(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd="adb", timeout=10)

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert device_discovery.list_devices() == []

    def test_adb_output(self, monkeypatch):
        def fake_run(args, **kwargs):
            assert args == ["adb", "devices", "-l"]
            return subprocess.CompletedProcess(args, 0, stdout=ADB_OUTPUT, stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert len(device_discovery.list_devices()) == 2
