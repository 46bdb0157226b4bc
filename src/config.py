"""Device configuration loading.

Resolution order (highest priority first):
    1. HARNESS_* environment variables
    2. Values from configs/<platform>-config.yaml
    3. DeviceConfig defaults
"""
import logging
import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[1] / "configs"
SUPPORTED_PLATFORMS = ("android", "ios")

# env var -> DeviceConfig field
ENV_OVERRIDES = {
    "HARNESS_DEVICE_NAME": "device_name",
    "HARNESS_UDID": "udid",
    "HARNESS_APP_PATH": "app_path",
    "HARNESS_APPIUM_SERVER_URL": "appium_server_url",
    "HARNESS_PLATFORM_VERSION": "platform_version",
}


@dataclass
class DeviceConfig:
    """Device and environment settings for one test run."""

    platform: str = "android"
    platform_version: Optional[str] = None
    device_name: Optional[str] = None
    udid: Optional[str] = None

    # Android-only
    app_package: Optional[str] = None
    app_activity: Optional[str] = None

    # iOS-only
    bundle_id: Optional[str] = None

    app_path: Optional[str] = None
    appium_server_url: str = "http://127.0.0.1:4723"
    automation_name: Optional[str] = None
    new_command_timeout: int = 300
    auto_grant_permissions: bool = False
    auto_accept_alerts: bool = False
    no_reset: bool = False
    full_reset: bool = False
    deep_link_scheme: str = "wizzair"

    # iOS extras (milliseconds)
    wda_launch_timeout: int = 120000
    wda_connection_timeout: int = 120000

    @property
    def is_android(self) -> bool:
        return self.platform.lower() == "android"

    @property
    def is_ios(self) -> bool:
        return self.platform.lower() == "ios"

    @property
    def app_id(self) -> Optional[str]:
        """Package name on Android, bundle id on iOS."""
        return self.app_package if self.is_android else self.bundle_id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeviceConfig":
        """Build from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        ignored = sorted(set(data) - known)
        if ignored:
            logger.debug(f"Ignoring unknown config keys: {ignored}")
        return cls(**{k: v for k, v in data.items() if k in known})


def _resolve_platform(platform: Optional[str]) -> str:
    resolved = (platform or os.environ.get("HARNESS_PLATFORM") or "android").lower()
    if resolved not in SUPPORTED_PLATFORMS:
        raise ConfigError(resolved, f"platform must be one of {SUPPORTED_PLATFORMS}")
    return resolved


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError(str(path), "config file not found")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a mapping at top level")
    return data


def _apply_env_overrides(cfg: DeviceConfig) -> None:
    for env_key, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value is not None and value.strip():
            setattr(cfg, field_name, value.strip())


def load_config(
    platform: Optional[str] = None,
    config_dir: Optional[Path] = None,
) -> DeviceConfig:
    """Load device configuration for a platform.

    Args:
        platform: "android" or "ios" (default: HARNESS_PLATFORM, then android)
        config_dir: Directory holding <platform>-config.yaml

    Returns:
        Resolved DeviceConfig

    Raises:
        ConfigError: Unsupported platform, missing or malformed file
    """
    resolved = _resolve_platform(platform)
    path = Path(config_dir or DEFAULT_CONFIG_DIR) / f"{resolved}-config.yaml"
    logger.info(f"Loading device config from: {path}")

    data = _load_yaml(path)
    data.setdefault("platform", resolved)
    cfg = DeviceConfig.from_dict(data)
    _apply_env_overrides(cfg)

    logger.info(
        f"Active config: platform={cfg.platform}, device={cfg.device_name}, "
        f"automationName={cfg.automation_name}"
    )
    return cfg


# Global singleton
_config: Optional[DeviceConfig] = None
_config_lock = threading.Lock()


def get_config() -> DeviceConfig:
    """Get the process-wide DeviceConfig, loading it on first call."""
    global _config
    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    with _config_lock:
        _config = None
