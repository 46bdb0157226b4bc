"""Flight search form."""
from appium.webdriver.common.appiumby import AppiumBy

from ..core.wait import is_visible_within
from .base import tap, type_text
from .flight_results import FlightResultsScreen

ORIGIN = (AppiumBy.ACCESSIBILITY_ID, "Origin airport")
DESTINATION = (AppiumBy.ACCESSIBILITY_ID, "Destination airport")
DEPARTURE_DATE = (AppiumBy.ACCESSIBILITY_ID, "Departure date")
RETURN_DATE = (AppiumBy.ACCESSIBILITY_ID, "Return date")
PASSENGERS = (AppiumBy.ACCESSIBILITY_ID, "Passengers")
SEARCH_BUTTON = (AppiumBy.ACCESSIBILITY_ID, "Search flights")


def calendar_day(date: str):
    """Calendar cells are labelled with their date, e.g. "2025-07-15"."""
    return (AppiumBy.ACCESSIBILITY_ID, date)


class FlightSearchScreen:
    def __init__(self, session):
        self.session = session

    def is_loaded(self) -> bool:
        return is_visible_within(self.session, SEARCH_BUTTON)

    def enter_origin(self, airport: str) -> "FlightSearchScreen":
        type_text(self.session, ORIGIN, airport)
        return self

    def enter_destination(self, airport: str) -> "FlightSearchScreen":
        type_text(self.session, DESTINATION, airport)
        return self

    def select_departure_date(self, date: str) -> "FlightSearchScreen":
        tap(self.session, DEPARTURE_DATE)
        tap(self.session, calendar_day(date))
        return self

    def select_return_date(self, date: str) -> "FlightSearchScreen":
        tap(self.session, RETURN_DATE)
        tap(self.session, calendar_day(date))
        return self

    def search(self, advance=None) -> FlightResultsScreen:
        """Submit the form and hand over to the results list."""
        tap(self.session, SEARCH_BUTTON)
        if advance is None:
            return FlightResultsScreen(self.session)
        return FlightResultsScreen(self.session, advance=advance)
