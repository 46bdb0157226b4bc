"""Driver error translation for support tools.

Tools call the Appium driver directly. A failed driver call reaches the test
as SessionConnectionError naming the action; harness errors, argument
errors and missing elements keep their own type.
"""
import logging
from functools import wraps

from selenium.common.exceptions import NoSuchElementException, WebDriverException

from ..core import HarnessError, SessionConnectionError

# Bad arguments and "not found" are the caller's to handle
PASS_THROUGH = (HarnessError, NoSuchElementException, ValueError, TypeError)


def translate_driver_errors(action: str):
    """Decorate a tool so WebDriverException becomes SessionConnectionError.

    Args:
        action: What the tool was doing, e.g. "Failed to open deep link"
    """

    def decorator(func):
        logger = logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PASS_THROUGH:
                raise
            except WebDriverException as exc:
                reason = exc.msg or exc.__class__.__name__
                logger.error(f"{action} ({func.__name__}): {reason}")
                raise SessionConnectionError(action, reason) from exc

        return wrapper

    return decorator
