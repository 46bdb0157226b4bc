"""Polling wait engine.

Every wait in the harness goes through wait_for(): evaluate the condition
now, then every poll_interval until it is truthy or the timeout elapses.
There are no fixed sleeps and no unbounded waits.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Tuple

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException

from .exceptions import StaleReferenceError, WaitTimeoutError

logger = logging.getLogger(__name__)

# Default timeouts (seconds)
DEFAULT_TIMEOUT = 30.0
SHORT_TIMEOUT = 10.0
LONG_TIMEOUT = 60.0
POLL_INTERVAL = 0.5

# Errors meaning "the element isn't there (yet)"; anything else is a real failure
ABSENCE_ERRORS = (NoSuchElementException, StaleElementReferenceException, StaleReferenceError)

# Patched by tests
_clock = time.monotonic
_sleep = time.sleep


class ElementState(Enum):
    """Element states an element wait can target."""

    VISIBLE = "visible"
    CLICKABLE = "clickable"
    INVISIBLE = "invisible"


def _validate_polling(timeout: float, poll_interval: float) -> None:
    """Validate polling configuration."""
    if timeout <= 0:
        raise ValueError("timeout must be greater than 0")
    if poll_interval <= 0:
        raise ValueError("poll_interval must be greater than 0")
    if poll_interval >= timeout:
        raise ValueError(
            f"poll_interval ({poll_interval}) must be less than timeout ({timeout})"
        )


@dataclass(frozen=True)
class WaitSpec:
    """A condition to poll with its bounds.

    The condition may return any value; a truthy result ends the wait and is
    handed back to the caller.
    """

    condition: Callable[[], Any]
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = POLL_INTERVAL
    description: str = "condition"

    def __post_init__(self):
        _validate_polling(self.timeout, self.poll_interval)


def fit_poll_interval(timeout: float, poll_interval: float) -> float:
    # Short convenience timeouts still get at least two polls
    if timeout > 0 and poll_interval >= timeout:
        return timeout / 2
    return poll_interval


def _evaluate(condition: Callable[[], Any]) -> Tuple[bool, Any]:
    """Run one poll. Absence errors count as not satisfied; others propagate."""
    try:
        value = condition()
    except ABSENCE_ERRORS as e:
        logger.debug(f"Not yet present: {e.__class__.__name__}")
        return False, None
    return bool(value), value


def wait_for(spec: WaitSpec) -> Any:
    """Poll spec.condition until it is truthy.

    Args:
        spec: Condition and bounds

    Returns:
        The condition's truthy result

    Raises:
        WaitTimeoutError: Condition still false after spec.timeout
    """
    start = _clock()
    polls = 0
    while True:
        satisfied, value = _evaluate(spec.condition)
        polls += 1
        elapsed = _clock() - start
        if satisfied:
            logger.debug(f"Satisfied after {polls} polls ({elapsed:.2f}s): {spec.description}")
            return value

        remaining = spec.timeout - elapsed
        if remaining <= 0:
            logger.debug(f"Gave up after {polls} polls ({elapsed:.2f}s): {spec.description}")
            raise WaitTimeoutError(spec.description, spec.timeout, polls)
        _sleep(min(spec.poll_interval, remaining))


def until(
    condition: Callable[[], Any],
    timeout: float = DEFAULT_TIMEOUT,
    description: str = "condition",
    poll_interval: float = POLL_INTERVAL,
) -> Any:
    """Shorthand for wait_for(WaitSpec(...)).

    Example:
        >>> until(lambda: session.get_active_surface() == "NATIVE_APP", 10, "native context")
    """
    logger.debug(f"Waiting up to {timeout}s for: {description}")
    return wait_for(WaitSpec(condition, timeout, fit_poll_interval(timeout, poll_interval), description))


def describe_locator(locator) -> str:
    try:
        by, value = locator
    except (TypeError, ValueError):
        return repr(locator)
    return f"{by}={value!r}"


def _first_displayed(session, locator, require_enabled: bool = False):
    for element in session.find_elements(locator):
        if element.is_displayed() and (not require_enabled or element.is_enabled()):
            return element
    return None


def _none_displayed(session, locator) -> bool:
    for element in session.find_elements(locator):
        try:
            if element.is_displayed():
                return False
        except ABSENCE_ERRORS:
            continue  # node is gone, which counts as invisible
    return True


def wait_for_element_state(
    session,
    locator,
    state: ElementState,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = POLL_INTERVAL,
):
    """Wait for the element behind a locator to reach a state.

    Every poll re-queries the session, so recycled nodes are never reused.

    Args:
        session: Session exposing find_elements()
        locator: (by, value) tuple
        state: VISIBLE, CLICKABLE or INVISIBLE
        timeout: Maximum wait time in seconds
        poll_interval: Time between checks

    Returns:
        VISIBLE / CLICKABLE: the matching element
        INVISIBLE: True, or False if it was still visible at the timeout

    Raises:
        WaitTimeoutError: VISIBLE / CLICKABLE not reached in time
    """
    state = ElementState(state)
    description = f"{describe_locator(locator)} to be {state.value}"

    if state is ElementState.VISIBLE:
        condition = lambda: _first_displayed(session, locator)
    elif state is ElementState.CLICKABLE:
        condition = lambda: _first_displayed(session, locator, require_enabled=True)
    else:
        condition = lambda: _none_displayed(session, locator)

    spec = WaitSpec(condition, timeout, fit_poll_interval(timeout, poll_interval), description)
    if state is not ElementState.INVISIBLE:
        return wait_for(spec)

    try:
        return wait_for(spec)
    except WaitTimeoutError:
        logger.info(f"Still visible after {timeout}s: {describe_locator(locator)}")
        return False


def is_visible_within(session, locator, timeout: float = SHORT_TIMEOUT) -> bool:
    """Check whether an element shows up within timeout. Never raises.

    Use for optional UI such as interstitials and permission prompts.
    """
    try:
        return wait_for_element_state(session, locator, ElementState.VISIBLE, timeout) is not None
    except Exception as e:
        logger.debug(f"Not visible within {timeout}s: {describe_locator(locator)} ({e})")
        return False


def wait_for_clickable(session, locator, timeout: float = DEFAULT_TIMEOUT):
    """Wait until an element is displayed and enabled; returns it."""
    return wait_for_element_state(session, locator, ElementState.CLICKABLE, timeout)


def wait_for_visible(session, locator, timeout: float = DEFAULT_TIMEOUT):
    """Wait until an element is displayed; returns it."""
    return wait_for_element_state(session, locator, ElementState.VISIBLE, timeout)


def wait_for_invisible(session, locator, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Wait until no element behind the locator is displayed."""
    return wait_for_element_state(session, locator, ElementState.INVISIBLE, timeout)
