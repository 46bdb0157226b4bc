"""Support tools for the mobile UI harness.

Gestures, screenshots, app lifecycle and deep links, all operating on an
explicitly passed session.
"""
from .scroll import scroll_down, scroll_up, scroll_advance, scroll_to_text_android
from .screenshot import attach_screenshot, attach_page_source
from .app_state import background_app, terminate_app, activate_app, app_state
from .deep_link import build_flight_link, open_url, open_flight

__all__ = [
    # Scroll tools
    "scroll_down",
    "scroll_up",
    "scroll_advance",
    "scroll_to_text_android",
    # Report tools
    "attach_screenshot",
    "attach_page_source",
    # App lifecycle tools
    "background_app",
    "terminate_app",
    "activate_app",
    "app_state",
    # Deep link tools
    "build_flight_link",
    "open_url",
    "open_flight",
]
