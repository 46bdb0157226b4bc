"""Appium-backed automation session.

AppiumSession is the only place the harness talks to the remote automation
server. Everything above it (waits, context switching, list search) sees the
small surface defined here.
"""
import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from appium import webdriver
from appium.options.android import UiAutomator2Options
from appium.options.ios import XCUITestOptions
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.actions import interaction
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.common.actions.pointer_input import PointerInput

from .device_discovery import resolve_udid
from .exceptions import SessionConnectionError

logger = logging.getLogger(__name__)

Locator = Tuple[str, str]


class Platform(Enum):
    """Platform kind of a session."""

    ANDROID = "android"
    IOS = "ios"

    @classmethod
    def parse(cls, value: str) -> "Platform":
        return cls(value.strip().lower())


class AppiumSession:
    """One live connection to the automation server.

    Owned by exactly one worker (see SessionRegistry). close() is idempotent.
    """

    def __init__(self, driver, platform: Platform):
        self.driver = driver
        self.platform = platform
        self._alive = True

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def session_id(self) -> Optional[str]:
        return getattr(self.driver, "session_id", None)

    # === Elements ===

    def find_elements(self, locator: Locator) -> List[Any]:
        """Find elements for a (by, value) locator. Never returns None."""
        by, value = locator
        return list(self.driver.find_elements(by, value) or [])

    # === Surfaces (Appium contexts) ===

    def get_active_surfaces(self) -> List[str]:
        return list(self.driver.contexts or [])

    def get_active_surface(self) -> Optional[str]:
        return self.driver.current_context

    def switch_surface(self, identifier: str) -> None:
        self.driver.switch_to.context(identifier)

    # === Screen ===

    def window_size(self) -> Tuple[int, int]:
        size = self.driver.get_window_size()
        return size["width"], size["height"]

    def swipe(self, start_x: int, start_y: int, end_x: int, end_y: int, duration_ms: int = 600) -> None:
        """W3C touch swipe; the finger travels from start to end over duration_ms.

        There is no hold after touch-down: on Android a held press turns into a
        long-click on whatever is under the finger.
        """
        actions = ActionChains(self.driver)
        actions.w3c_actions = ActionBuilder(
            self.driver,
            mouse=PointerInput(interaction.POINTER_TOUCH, "finger"),
            duration=duration_ms,
        )
        pointer = actions.w3c_actions.pointer_action
        pointer.move_to_location(start_x, start_y)
        pointer.pointer_down()
        pointer.move_to_location(end_x, end_y)
        pointer.release()
        actions.perform()

    def page_source(self) -> str:
        return self.driver.page_source

    def screenshot_png(self) -> bytes:
        return self.driver.get_screenshot_as_png()

    def execute_script(self, script: str, args: Optional[Dict[str, Any]] = None) -> Any:
        if args is None:
            return self.driver.execute_script(script)
        return self.driver.execute_script(script, args)

    # === Lifecycle ===

    def close(self) -> None:
        """Quit the remote session. Repeated calls are no-ops."""
        if not self._alive:
            return
        self._alive = False
        logger.info(f"Quitting session {self.session_id}")
        self.driver.quit()

    def __repr__(self) -> str:
        return f"AppiumSession(platform={self.platform.value}, id={self.session_id}, alive={self._alive})"


LOCAL_HOSTS = ("127.0.0.1", "localhost", "::1")


def is_local_server(url: str) -> bool:
    """True when the Appium server runs on this machine and sees its adb devices."""
    return urlparse(url or "").hostname in LOCAL_HOSTS


def _apply_automation_name(options, configured: Optional[str]) -> None:
    # The options class already names its driver; setting it again adds a second key
    if configured and configured.lower() != (options.automation_name or "").lower():
        options.automation_name = configured


def _build_android_options(config) -> UiAutomator2Options:
    options = UiAutomator2Options()
    if config.platform_version:
        options.platform_version = config.platform_version
    if config.device_name:
        options.device_name = config.device_name
    _apply_automation_name(options, config.automation_name)
    options.new_command_timeout = timedelta(seconds=config.new_command_timeout)
    options.no_reset = config.no_reset
    options.full_reset = config.full_reset
    options.auto_grant_permissions = config.auto_grant_permissions

    udid = resolve_udid(config.udid, discover=is_local_server(config.appium_server_url))
    if udid:
        options.udid = udid

    # Install the build if one is given, otherwise launch the installed app
    if config.app_path and config.app_path.strip():
        options.app = config.app_path
    else:
        if config.app_package:
            options.app_package = config.app_package
        if config.app_activity:
            options.app_activity = config.app_activity
    return options


def _build_ios_options(config) -> XCUITestOptions:
    options = XCUITestOptions()
    if config.platform_version:
        options.platform_version = config.platform_version
    if config.device_name:
        options.device_name = config.device_name
    _apply_automation_name(options, config.automation_name)
    options.new_command_timeout = timedelta(seconds=config.new_command_timeout)
    options.no_reset = config.no_reset
    options.full_reset = config.full_reset
    options.auto_accept_alerts = config.auto_accept_alerts
    options.wda_launch_timeout = timedelta(milliseconds=config.wda_launch_timeout)
    options.wda_connection_timeout = timedelta(milliseconds=config.wda_connection_timeout)

    if config.udid and config.udid.strip():
        options.udid = config.udid.strip()

    if config.app_path and config.app_path.strip():
        options.app = config.app_path
    elif config.bundle_id:
        options.bundle_id = config.bundle_id
    return options


def build_options(config):
    """Build platform-specific Appium options from a DeviceConfig."""
    if config.is_android:
        return _build_android_options(config)
    if config.is_ios:
        return _build_ios_options(config)
    raise ValueError(f"Unsupported platform: {config.platform}")


def _validate_server_url(url: str) -> str:
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise SessionConnectionError(url or "<empty>", "invalid Appium server URL")
    return url


def new_session(config) -> AppiumSession:
    """Create a platform-specific session from a DeviceConfig.

    Raises:
        SessionConnectionError: Bad server URL or the server refused the session
    """
    server_url = _validate_server_url(config.appium_server_url)
    platform = Platform.parse(config.platform)
    options = build_options(config)

    logger.info(
        f"Creating {platform.value} session: device={config.device_name}, "
        f"platformVersion={config.platform_version}, server={server_url}"
    )
    try:
        driver = webdriver.Remote(command_executor=server_url, options=options)
    except Exception as e:
        logger.error(f"Failed to create session: {e}")
        raise SessionConnectionError(server_url, str(e)) from e

    session = AppiumSession(driver, platform)
    logger.info(f"Session created: {session.session_id}")
    return session
