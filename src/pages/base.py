"""Shared screen helpers.

Screens are plain classes holding a session; the only contract they share is
is_loaded(). Interaction helpers are module functions built on the wait engine
so every tap and read waits for the element instead of sleeping.
"""
import logging
from contextlib import contextmanager
from typing import Protocol

from selenium.common.exceptions import StaleElementReferenceException

from ..core.exceptions import StaleReferenceError
from ..core.wait import DEFAULT_TIMEOUT, describe_locator, wait_for_clickable, wait_for_visible

logger = logging.getLogger(__name__)


class Screen(Protocol):
    """Anything that can tell whether its screen is showing."""

    def is_loaded(self) -> bool:
        ...


@contextmanager
def _live_element(locator):
    # The node can be recycled between the wait and the interaction
    try:
        yield
    except StaleElementReferenceException as e:
        raise StaleReferenceError(describe_locator(locator)) from e


def tap(session, locator, timeout: float = DEFAULT_TIMEOUT):
    """Wait until clickable, then click. Returns the element.

    Raises:
        WaitTimeoutError: Never became clickable
        StaleReferenceError: Node was recycled before the click landed
    """
    element = wait_for_clickable(session, locator, timeout)
    with _live_element(locator):
        element.click()
    return element


def type_text(session, locator, text: str, timeout: float = DEFAULT_TIMEOUT):
    """Wait until clickable, clear, then type."""
    element = wait_for_clickable(session, locator, timeout)
    with _live_element(locator):
        element.clear()
        element.send_keys(text)
    logger.debug(f"Typed <{len(text)} chars> into {locator[1]!r}")
    return element


def read_text(session, locator, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Wait until visible, then return the element text."""
    element = wait_for_visible(session, locator, timeout)
    with _live_element(locator):
        return element.text
