"""Flight search results screen.

Results load as the user scrolls, so finding a flight means scanning the
cards on screen, scrolling, and scanning again.
"""
import logging

from appium.webdriver.common.appiumby import AppiumBy

from ..core.list_search import DEFAULT_MAX_ADVANCES, IncrementalListSearch, ItemMatcher
from ..core.wait import SHORT_TIMEOUT, is_visible_within
from ..tools.scroll import scroll_advance
from .base import tap

logger = logging.getLogger(__name__)

RESULTS_CONTAINER = (AppiumBy.ACCESSIBILITY_ID, "Flight results list")
FLIGHT_CARD = (AppiumBy.ACCESSIBILITY_ID, "Flight card")
LOADING_SPINNER = (AppiumBy.ACCESSIBILITY_ID, "Loading flights")


class FlightResultsScreen:
    def __init__(self, session, advance=scroll_advance):
        self.session = session
        self._search = IncrementalListSearch(
            session,
            FLIGHT_CARD,
            advance,
            loading_locator=LOADING_SPINNER,
            loading_timeout=SHORT_TIMEOUT,
        )

    def is_loaded(self) -> bool:
        return is_visible_within(self.session, RESULTS_CONTAINER)

    def visible_flight_count(self) -> int:
        return self._search.count_visible()

    def find_flight_by_time(
        self,
        departure_time: str,
        arrival_time: str,
        max_scrolls: int = DEFAULT_MAX_ADVANCES,
    ):
        """Scroll until the flight card with these times shows up, then tap it.

        The app labels cards "<departure> <arrival>", which gives the direct
        accessibility lookup; the card description is the fallback.

        Raises:
            ListItemNotFoundError: Card not found before the list ended or the
                scroll budget ran out
        """
        logger.info(f"Searching for flight: {departure_time} -> {arrival_time}")
        matcher = ItemMatcher.containing(
            departure_time,
            arrival_time,
            accessibility_id=f"{departure_time} {arrival_time}",
        )
        card = self._search.find_or_raise(matcher, max_scrolls)
        logger.info("Flight found, tapping card")
        card.click()
        return card

    def tap_first_flight(self):
        return tap(self.session, FLIGHT_CARD)
