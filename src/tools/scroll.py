"""Scroll gestures.

Uses W3C touch actions (supported by both UiAutomator2 and XCUITest). The
Android-only UiScrollable helper is faster when the target text is known.
"""
import logging

from appium.webdriver.common.appiumby import AppiumBy

from ..core import ListAdvance
from ._errors import translate_driver_errors

logger = logging.getLogger(__name__)

# Fraction of screen height used for the swipe gesture
SCROLL_START_RATIO = 0.75
SCROLL_END_RATIO = 0.25
SWIPE_DURATION_MS = 600


def _swipe_vertical(session, direction: str) -> bool:
    try:
        width, height = session.window_size()
        mid_x = width // 2
        low = int(height * SCROLL_START_RATIO)
        high = int(height * SCROLL_END_RATIO)

        if direction == "down":
            start_y, end_y = low, high
        elif direction == "up":
            start_y, end_y = high, low
        else:
            raise ValueError(f"Invalid direction: {direction}. Use 'up' or 'down'")

        session.swipe(mid_x, start_y, mid_x, end_y, duration_ms=SWIPE_DURATION_MS)
        logger.debug(f"Swipe performed: ({mid_x},{start_y}) -> ({mid_x},{end_y})")
        return True
    except ValueError:
        raise
    except Exception as e:
        logger.warning(f"Scroll gesture failed: {e}")
        return False


def scroll_down(session) -> bool:
    """Swipe from ~75% to ~25% of the screen height.

    Returns:
        True if the swipe was performed, False if the gesture failed
    """
    return _swipe_vertical(session, "down")


def scroll_up(session) -> bool:
    """Swipe from ~25% to ~75% of the screen height."""
    return _swipe_vertical(session, "up")


def scroll_advance(session) -> ListAdvance:
    """Advance a list by one swipe.

    The list is considered exhausted when the swipe fails or the screen
    hierarchy is unchanged afterwards.
    """
    before = session.page_source()
    if not scroll_down(session):
        return ListAdvance.NO_FURTHER_CONTENT
    if session.page_source() == before:
        logger.debug("Page source unchanged after swipe; end of list")
        return ListAdvance.NO_FURTHER_CONTENT
    return ListAdvance.ADVANCED


@translate_driver_errors("UiScrollable scroll failed")
def scroll_to_text_android(session, text: str):
    """Android only: let UiAutomator2 scroll a scrollable view to some text.

    Returns:
        The element carrying the text
    """
    logger.debug(f"UiAutomator2 scroll to text: {text!r}")
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    selector = (
        "new UiScrollable(new UiSelector().scrollable(true))"
        f'.scrollIntoView(new UiSelector().text("{escaped}"))'
    )
    return session.driver.find_element(AppiumBy.ANDROID_UIAUTOMATOR, selector)
