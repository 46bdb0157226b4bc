"""Passenger details step of the booking flow.

The fare can change between search and booking; the app then shows a modal
with the new price that has to be accepted before continuing.
"""
import logging

from appium.webdriver.common.appiumby import AppiumBy

from ..core.wait import SHORT_TIMEOUT, is_visible_within
from .base import read_text, tap, type_text
from .payment import PaymentScreen

logger = logging.getLogger(__name__)

BOOKING_HEADER = (AppiumBy.ACCESSIBILITY_ID, "Booking header")
FIRST_NAME = (AppiumBy.ACCESSIBILITY_ID, "First name")
LAST_NAME = (AppiumBy.ACCESSIBILITY_ID, "Last name")
EMAIL = (AppiumBy.ACCESSIBILITY_ID, "Email")
PHONE = (AppiumBy.ACCESSIBILITY_ID, "Phone number")
CONTINUE_BUTTON = (AppiumBy.ACCESSIBILITY_ID, "Continue to payment")

PRICE_CHANGE_MODAL = (AppiumBy.ACCESSIBILITY_ID, "Price changed modal")
ACCEPT_NEW_PRICE = (AppiumBy.ACCESSIBILITY_ID, "Accept new price")
NEW_PRICE = (AppiumBy.ACCESSIBILITY_ID, "New price amount")


class BookingScreen:
    def __init__(self, session, modal_timeout: float = SHORT_TIMEOUT):
        self.session = session
        self.modal_timeout = modal_timeout

    def is_loaded(self) -> bool:
        return is_visible_within(self.session, BOOKING_HEADER)

    # === Passenger details ===

    def enter_first_name(self, name: str) -> "BookingScreen":
        type_text(self.session, FIRST_NAME, name)
        return self

    def enter_last_name(self, name: str) -> "BookingScreen":
        type_text(self.session, LAST_NAME, name)
        return self

    def enter_email(self, email: str) -> "BookingScreen":
        type_text(self.session, EMAIL, email)
        return self

    def enter_phone(self, phone: str) -> "BookingScreen":
        type_text(self.session, PHONE, phone)
        return self

    def first_name(self) -> str:
        return read_text(self.session, FIRST_NAME)

    def last_name(self) -> str:
        return read_text(self.session, LAST_NAME)

    # === Price change ===

    def is_price_change_modal_visible(self) -> bool:
        return is_visible_within(self.session, PRICE_CHANGE_MODAL, self.modal_timeout)

    def new_price(self) -> str:
        return read_text(self.session, NEW_PRICE)

    def accept_price_change(self) -> "BookingScreen":
        tap(self.session, ACCEPT_NEW_PRICE)
        return self

    def proceed_to_payment(self) -> PaymentScreen:
        """Continue to payment, accepting a changed fare first if one is shown.

        Returns:
            PaymentScreen for the next step
        """
        if self.is_price_change_modal_visible():
            logger.warning(f"Price changed during booking, accepting new price {self.new_price()}")
            self.accept_price_change()
        tap(self.session, CONTINUE_BUTTON)
        return PaymentScreen(self.session)
