"""Payment step.

The card form is rendered inside a WebView: the screen switches to the web
context, fills the form with CSS selectors and always returns to native.
"""
import logging

from appium.webdriver.common.appiumby import AppiumBy
from selenium.webdriver.common.by import By

from ..core.context import ContextSwitchController
from ..core.wait import DEFAULT_TIMEOUT, is_visible_within, until, wait_for_visible
from .base import tap

logger = logging.getLogger(__name__)

PAYMENT_SCREEN = (AppiumBy.ACCESSIBILITY_ID, "Payment screen")
BOOKING_CONFIRMATION = (AppiumBy.ACCESSIBILITY_ID, "Booking confirmation")

# WebView selectors
CARD_NUMBER = (By.CSS_SELECTOR, "input[data-cy='card-number']")
CARD_EXPIRY = (By.CSS_SELECTOR, "input[data-cy='card-expiry']")
CARD_CVV = (By.CSS_SELECTOR, "input[data-cy='card-cvv']")
CARD_HOLDER = (By.CSS_SELECTOR, "input[data-cy='card-holder']")
PAY_BUTTON = (By.CSS_SELECTOR, "button[data-cy='pay-button']")
SUCCESS_MESSAGE = (By.CSS_SELECTOR, "[data-cy='payment-success']")

WEBVIEW_TIMEOUT = 30.0


class PaymentScreen:
    def __init__(self, session, webview_timeout: float = WEBVIEW_TIMEOUT):
        self.session = session
        self.webview_timeout = webview_timeout
        self.contexts = ContextSwitchController(session)

    def is_loaded(self) -> bool:
        return is_visible_within(self.session, PAYMENT_SCREEN)

    def _fill(self, locator, value: str) -> None:
        field = wait_for_visible(self.session, locator, DEFAULT_TIMEOUT)
        field.clear()
        field.send_keys(value)

    def complete_payment_form(self, card_number: str, expiry: str, cvv: str, card_holder: str):
        """Fill and submit the WebView card form.

        Args:
            card_number: Test card number
            expiry: MM/YY
            cvv: 3-digit CVV
            card_holder: Cardholder name

        Returns:
            self, back in the native context

        Raises:
            NoEmbeddedSurfaceError: The WebView never appeared
            WaitTimeoutError: A field or the success message never appeared
        """
        logger.info("Switching to WebView for payment form")
        with self.contexts.embedded(timeout=self.webview_timeout):
            self._fill(CARD_NUMBER, card_number)
            self._fill(CARD_EXPIRY, expiry)
            self._fill(CARD_CVV, cvv)
            self._fill(CARD_HOLDER, card_holder)

            logger.info("Submitting payment form")
            tap(self.session, PAY_BUTTON)

            until(
                lambda: self.session.find_elements(SUCCESS_MESSAGE),
                self.webview_timeout,
                "Payment success message in WebView",
            )
        return self

    def is_confirmation_displayed(self) -> bool:
        return bool(self.session.find_elements(BOOKING_CONFIRMATION))
