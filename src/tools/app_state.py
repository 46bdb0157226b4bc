"""App lifecycle control: background, terminate, activate.

Provides the Appium 2 app-management calls used by resume and cold-start
scenarios.
"""
import logging
from typing import Any, Dict

from ._errors import translate_driver_errors

logger = logging.getLogger(__name__)


def _require_app_id(config) -> str:
    app_id = config.app_id
    if not app_id:
        key = "app_package" if config.is_android else "bundle_id"
        raise ValueError(f"Config has no {key}; cannot address the app")
    return app_id


@translate_driver_errors("Failed to background app")
def background_app(session, seconds: int) -> Dict[str, Any]:
    """Send the app to the background and bring it back after `seconds`.

    Returns:
        Dictionary with success status and seconds spent in background
    """
    if seconds < 0:
        raise ValueError("seconds must be >= 0")
    logger.info(f"Sending app to background for {seconds} seconds")
    session.driver.background_app(seconds)
    logger.info(f"App resumed after {seconds} seconds in background")
    return {"success": True, "seconds": seconds}


@translate_driver_errors("Failed to terminate app")
def terminate_app(session, config) -> Dict[str, Any]:
    """Terminate the configured app."""
    app_id = _require_app_id(config)
    terminated = session.driver.terminate_app(app_id)
    logger.info(f"App terminated: {app_id}")
    return {"success": bool(terminated), "app_id": app_id}


@translate_driver_errors("Failed to activate app")
def activate_app(session, config) -> Dict[str, Any]:
    """Bring the configured app to the foreground."""
    app_id = _require_app_id(config)
    session.driver.activate_app(app_id)
    logger.info(f"App activated: {app_id}")
    return {"success": True, "app_id": app_id}


@translate_driver_errors("Failed to query app state")
def app_state(session, config) -> int:
    """Return Appium's app state code (4 = running in foreground)."""
    return session.driver.query_app_state(_require_app_id(config))
