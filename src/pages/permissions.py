"""System permission dialogs shown on first launch or mid-flow."""
import logging

from appium.webdriver.common.appiumby import AppiumBy
from selenium.common.exceptions import WebDriverException

from ..core import Platform

logger = logging.getLogger(__name__)

ANDROID_ALLOW_TEXTS = (
    "Allow",
    "Allow all the time",
    "Only this time",
    "While using the app",
    "Allow only while using the app",
    "OK",
    "GOT IT",
)

IOS_ALLOW_TEXTS = ("Allow", "Allow While Using App", "OK", "Continue")


class PermissionHandler:
    def __init__(self, session):
        self.session = session

    def accept_all(self, max_attempts: int = 5) -> int:
        """Accept chained permission dialogs until none is left.

        Returns:
            Number of dialogs accepted
        """
        handled = 0
        for attempt in range(max_attempts):
            if not self._accept_one():
                break
            handled += 1
            logger.info(f"Permission dialog accepted (attempt {attempt + 1})")
        return handled

    def _accept_one(self) -> bool:
        if self.session.platform is Platform.ANDROID:
            return self._tap_first("//android.widget.Button[@text='{}']", ANDROID_ALLOW_TEXTS)
        if self._tap_first("//XCUIElementTypeButton[@name='{}']", IOS_ALLOW_TEXTS):
            return True
        return self._accept_ios_alert()

    def _tap_first(self, xpath_template: str, texts) -> bool:
        for text in texts:
            buttons = self.session.find_elements((AppiumBy.XPATH, xpath_template.format(text)))
            if buttons:
                logger.info(f"Tapping permission button: {text!r}")
                buttons[0].click()
                return True
        return False

    def _accept_ios_alert(self) -> bool:
        try:
            self.session.driver.switch_to.alert.accept()
        except WebDriverException:
            return False
        logger.info("Accepted iOS alert via switch_to.alert")
        return True
