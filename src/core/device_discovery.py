"""Attached-device discovery via ADB.

Used when an Android config names no udid and the Appium server is local: if
exactly one device is attached its serial is pinned into the capabilities.
"""
import logging
import re
import subprocess
from typing import List, NamedTuple, Optional

logger = logging.getLogger(__name__)

# Serials end up in capabilities, so only plain adb serial characters pass
SERIAL_PATTERN = re.compile(r"^[a-zA-Z0-9._:-]{1,255}$")
ADB_TIMEOUT_SECONDS = 10


class AttachedDevice(NamedTuple):
    """One line of `adb devices`."""

    serial: str
    state: str  # "device", "offline", "unauthorized"

    @property
    def is_ready(self) -> bool:
        return self.state == "device"


def is_valid_serial(serial: str) -> bool:
    return bool(serial) and SERIAL_PATTERN.match(serial) is not None


def parse_adb_devices(output: str) -> List[AttachedDevice]:
    """Parse `adb devices -l` output into (serial, state) pairs."""
    devices = []
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 2:
            devices.append(AttachedDevice(parts[0], parts[1]))
    return devices


def list_devices() -> List[AttachedDevice]:
    """List devices attached to the local ADB server; empty when adb is unusable."""
    try:
        result = subprocess.run(
            ["adb", "devices", "-l"],
            capture_output=True,
            text=True,
            timeout=ADB_TIMEOUT_SECONDS,
        )
    except subprocess.TimeoutExpired:
        logger.warning("adb devices timed out; leaving device selection to the server")
        return []
    except FileNotFoundError:
        logger.warning("adb not found in PATH; leaving device selection to the server")
        return []
    return parse_adb_devices(result.stdout)


def resolve_udid(configured: Optional[str] = None, discover: bool = True) -> Optional[str]:
    """Return the configured udid, or the serial of the only attached device.

    Args:
        configured: udid from config, used as-is when non-blank
        discover: Ask the local adb when nothing is configured. Only meaningful
            when the Appium server runs on this machine.

    Returns:
        A udid, or None to let the automation server pick a device
    """
    if configured and configured.strip():
        return configured.strip()
    if not discover:
        return None

    ready = [d for d in list_devices() if d.is_ready]
    if len(ready) == 1 and is_valid_serial(ready[0].serial):
        logger.info(f"Using the only attached device: {ready[0].serial}")
        return ready[0].serial
    if len(ready) > 1:
        logger.warning(
            f"{len(ready)} devices attached and no udid configured; "
            "leaving device selection to the server"
        )
    return None
