"""Screenshot capture for allure reports."""
import logging
from typing import Optional

import allure

logger = logging.getLogger(__name__)


def attach_screenshot(session, name: str) -> bool:
    """Capture a screenshot and attach it to the current allure report.

    Never raises: a failed capture must not mask the failure being reported.

    Args:
        session: Session to capture (may be None)
        name: Label shown in the report

    Returns:
        True if the screenshot was attached
    """
    if session is None:
        logger.debug(f"No session; skipping screenshot {name!r}")
        return False
    try:
        png = session.screenshot_png()
        allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)
        logger.debug(f"Screenshot attached: {name}")
        return True
    except Exception as e:
        logger.warning(f"Failed to capture screenshot {name!r}: {e}")
        return False


def attach_page_source(session, name: str) -> Optional[str]:
    """Attach the current UI hierarchy as XML; returns it, or None on failure."""
    if session is None:
        return None
    try:
        source = session.page_source()
        allure.attach(source, name=name, attachment_type=allure.attachment_type.XML)
        return source
    except Exception as e:
        logger.warning(f"Failed to capture page source {name!r}: {e}")
        return None
