from datetime import timedelta

import pytest
from appium.options.android import UiAutomator2Options
from appium.options.ios import XCUITestOptions

from src.config import DeviceConfig
from src.core import AppiumSession, Platform, build_options, new_session
from src.core import device_discovery
from src.core import session as session_module
from src.core.device_discovery import AttachedDevice
from src.core.exceptions import SessionConnectionError
from src.core.session import is_local_server


@pytest.fixture(autouse=True)
def no_adb(monkeypatch):
    monkeypatch.setattr(device_discovery, "list_devices", lambda: [])


class DummyDriver:
    session_id = "abc-123"

    def __init__(self):
        self.quits = 0
        self.contexts = ["NATIVE_APP", "WEBVIEW_1"]
        self.current_context = "NATIVE_APP"

    def quit(self):
        self.quits += 1

    def find_elements(self, by, value):
        return None

    def get_window_size(self):
        return {"width": 1080, "height": 2400}


class TestBuildOptions:
    def test_android_installed_app(self):
        cfg = DeviceConfig(
            platform="android",
            device_name="Pixel 7",
            app_package="com.example",
            app_activity=".Main",
            auto_grant_permissions=True,
        )
        options = build_options(cfg)

        assert isinstance(options, UiAutomator2Options)
        assert options.automation_name.lower() == "uiautomator2"
        assert options.app_package == "com.example"
        assert options.app_activity == ".Main"
        assert options.auto_grant_permissions is True
        assert options.new_command_timeout == timedelta(seconds=300)

    def test_configured_automation_name_sent_once(self):
        options = build_options(DeviceConfig(platform="android", automation_name="UiAutomator2"))
        keys = [k for k in options.to_capabilities() if k.endswith("automationName")]

        assert len(keys) == 1

    def test_other_automation_name_reaches_the_server(self):
        options = build_options(DeviceConfig(platform="android", automation_name="Espresso"))
        payload = options.to_w3c()["capabilities"]["alwaysMatch"]

        assert payload["appium:automationName"] == "Espresso"
        assert "automationName" not in payload

    def test_local_server_pins_only_attached_device(self, monkeypatch):
        monkeypatch.setattr(device_discovery, "list_devices", lambda: [AttachedDevice("emulator-5554", "device")])
        options = build_options(DeviceConfig(platform="android", appium_server_url="http://localhost:4723"))

        assert options.udid == "emulator-5554"

    def test_remote_server_leaves_device_choice_to_server(self, monkeypatch):
        monkeypatch.setattr(device_discovery, "list_devices", lambda: [AttachedDevice("emulator-5554", "device")])
        options = build_options(
            DeviceConfig(platform="android", appium_server_url="http://grid.example.com:4723")
        )

        assert options.udid is None

    def test_android_app_path_wins(self):
        cfg = DeviceConfig(platform="android", app_path="/tmp/app.apk", app_package="com.example")
        options = build_options(cfg)

        assert options.app == "/tmp/app.apk"
        assert options.app_package is None

    def test_ios(self):
        cfg = DeviceConfig(platform="ios", bundle_id="com.example.ios", udid="  ", wda_launch_timeout=60000)
        options = build_options(cfg)

        assert isinstance(options, XCUITestOptions)
        assert options.automation_name == "XCUITest"
        assert options.bundle_id == "com.example.ios"
        assert options.udid is None
        assert options.wda_launch_timeout == timedelta(seconds=60)

    def test_unsupported_platform(self):
        with pytest.raises(ValueError):
            build_options(DeviceConfig(platform="symbian"))


class TestNewSession:
    def test_creates_session(self, monkeypatch):
        captured = {}

        def fake_remote(command_executor, options):
            captured["url"] = command_executor
            captured["options"] = options
            return DummyDriver()

        monkeypatch.setattr(session_module.webdriver, "Remote", fake_remote)

        session = new_session(DeviceConfig(platform="ios", bundle_id="com.example.ios"))

        assert session.platform is Platform.IOS
        assert session.session_id == "abc-123"
        assert captured["url"] == "http://127.0.0.1:4723"
        assert isinstance(captured["options"], XCUITestOptions)

    def test_driver_failure_wrapped(self, monkeypatch):
        def fake_remote(command_executor, options):
            raise ConnectionRefusedError("connection refused")

        monkeypatch.setattr(session_module.webdriver, "Remote", fake_remote)

        with pytest.raises(SessionConnectionError) as exc_info:
            new_session(DeviceConfig(app_package="com.example"))
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.parametrize("url", ["", "127.0.0.1:4723", "ftp://host:21", "http://"])
    def test_invalid_server_url(self, url):
        with pytest.raises(SessionConnectionError):
            new_session(DeviceConfig(appium_server_url=url))


class TestAppiumSession:
    def test_surfaces_and_elements(self):
        session = AppiumSession(DummyDriver(), Platform.ANDROID)

        assert session.find_elements(("id", "x")) == []
        assert session.get_active_surfaces() == ["NATIVE_APP", "WEBVIEW_1"]
        assert session.get_active_surface() == "NATIVE_APP"
        assert session.window_size() == (1080, 2400)

    def test_swipe_is_one_timed_touch_move(self):
        executed = []

        class RecordingDriver(DummyDriver):
            def execute(self, command, params=None):
                executed.append(params)
                return {"value": None}

        AppiumSession(RecordingDriver(), Platform.ANDROID).swipe(540, 1800, 540, 600, duration_ms=600)

        (finger,) = [d for d in executed[0]["actions"] if d["type"] == "pointer"]
        actions = finger["actions"]
        assert finger["parameters"]["pointerType"] == "touch"
        assert [a["type"] for a in actions] == ["pointerMove", "pointerDown", "pointerMove", "pointerUp"]
        assert (actions[0]["x"], actions[0]["y"]) == (540, 1800)
        assert (actions[2]["x"], actions[2]["y"]) == (540, 600)
        assert actions[2]["duration"] == 600

    def test_close_is_idempotent(self):
        driver = DummyDriver()
        session = AppiumSession(driver, Platform.ANDROID)
        session.close()
        session.close()

        assert driver.quits == 1
        assert not session.is_alive


def test_is_local_server():
    assert is_local_server("http://127.0.0.1:4723")
    assert is_local_server("http://[::1]:4723/wd/hub")
    assert not is_local_server("http://grid.example.com:4723")
    assert not is_local_server("")


def test_platform_parse():
    assert Platform.parse(" Android ") is Platform.ANDROID
    with pytest.raises(ValueError):
        Platform.parse("web")
