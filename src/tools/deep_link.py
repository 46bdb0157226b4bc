"""Open the app through deep links.

Android: `mobile: deepLink` (wraps `am start -d <url>`).
iOS: launch Safari and navigate to the URL; XCUITest hands off to the app.

Deep link format: <scheme>://flights/<origin>/<destination>/<date>
"""
import logging
import re
from typing import Any, Dict

from ..core import Platform
from ._errors import translate_driver_errors

logger = logging.getLogger(__name__)

IATA_PATTERN = re.compile(r"^[A-Z]{3}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SAFARI_BUNDLE_ID = "com.apple.mobilesafari"


def build_flight_link(scheme: str, origin: str, destination: str, date: str) -> str:
    """Build a flight deep link.

    Args:
        scheme: URL scheme, e.g. "wizzair"
        origin: IATA code, e.g. "LTN"
        destination: IATA code, e.g. "BCN"
        date: ISO date, e.g. "2025-07-15"
    """
    origin = origin.strip().upper()
    destination = destination.strip().upper()
    if not IATA_PATTERN.match(origin) or not IATA_PATTERN.match(destination):
        raise ValueError(f"Invalid IATA codes: {origin!r} -> {destination!r}")
    if not DATE_PATTERN.match(date):
        raise ValueError(f"Date must be YYYY-MM-DD: {date!r}")
    return f"{scheme}://flights/{origin}/{destination}/{date}"


@translate_driver_errors("Failed to open deep link")
def open_url(session, url: str, app_package: str = None) -> Dict[str, Any]:
    """Open a deep link URL on the session's platform."""
    logger.info(f"Opening deep link: {url}")

    if session.platform is Platform.ANDROID:
        if not app_package:
            raise ValueError("app_package is required to open deep links on Android")
        session.execute_script("mobile: deepLink", {"url": url, "package": app_package})
    else:
        session.execute_script("mobile: launchApp", {"bundleId": SAFARI_BUNDLE_ID, "arguments": []})
        session.driver.get(url)

    return {"success": True, "url": url}


def open_flight(session, config, origin: str, destination: str, date: str) -> Dict[str, Any]:
    """Deep link straight to a flight using the configured scheme."""
    url = build_flight_link(config.deep_link_scheme, origin, destination, date)
    return open_url(session, url, app_package=config.app_package)
