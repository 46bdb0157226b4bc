"""Details of a selected flight."""
from appium.webdriver.common.appiumby import AppiumBy

from ..core.wait import is_visible_within
from .base import read_text

DETAILS_HEADER = (AppiumBy.ACCESSIBILITY_ID, "Flight details header")
ROUTE = (AppiumBy.ACCESSIBILITY_ID, "Origin destination route")
DATE = (AppiumBy.ACCESSIBILITY_ID, "Flight date")
PRICE = (AppiumBy.ACCESSIBILITY_ID, "Flight price")


class FlightDetailsScreen:
    def __init__(self, session):
        self.session = session

    def is_loaded(self) -> bool:
        return is_visible_within(self.session, DETAILS_HEADER)

    def route(self) -> str:
        return read_text(self.session, ROUTE)

    def date(self) -> str:
        return read_text(self.session, DATE)

    def price(self) -> str:
        return read_text(self.session, PRICE)
