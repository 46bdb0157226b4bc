"""Incremental search through virtualized, lazily-loaded lists.

Virtualized lists recycle on-screen rows for new logical items while
scrolling, so element handles are never carried across an advance: every
iteration re-queries the session for the rows that exist right now.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from appium.webdriver.common.appiumby import AppiumBy

from .exceptions import ListItemNotFoundError
from .wait import (
    ABSENCE_ERRORS,
    POLL_INTERVAL,
    SHORT_TIMEOUT,
    ElementState,
    describe_locator,
    wait_for_element_state,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ADVANCES = 20


class ListAdvance(Enum):
    """Result of asking the list to load/scroll further."""

    ADVANCED = "advanced"
    NO_FURTHER_CONTENT = "no_further_content"


@dataclass(frozen=True)
class ItemMatcher:
    """Identifies one logical list item.

    A row matches when its `attribute` value contains every term. When
    accessibility_id is set, a direct lookup by it is tried first.
    """

    terms: Tuple[str, ...]
    accessibility_id: Optional[str] = None
    attribute: str = "content-desc"

    @classmethod
    def containing(cls, *terms: str, accessibility_id: Optional[str] = None, attribute: str = "content-desc"):
        return cls(tuple(terms), accessibility_id, attribute)

    def matches(self, signature: Optional[str]) -> bool:
        if not signature:
            return False
        return all(term in signature for term in self.terms)

    def describe(self) -> str:
        if self.accessibility_id:
            return f"{self.accessibility_id!r}"
        return " + ".join(repr(t) for t in self.terms)


@dataclass
class SearchOutcome:
    """What a search found and how much work it took."""

    found: bool
    item: Any = None
    scans: int = 0
    advances: int = 0
    end_of_list: bool = False
    matched_by: Optional[str] = None  # "accessibility_id" or "scan"

    def to_dict(self) -> dict:
        return {
            "found": self.found,
            "scans": self.scans,
            "advances": self.advances,
            "end_of_list": self.end_of_list,
            "matched_by": self.matched_by,
        }


class IncrementalListSearch:
    """Scan-then-advance search over one list.

    Args:
        session: Session exposing find_elements()
        item_locator: Locator of one row (all materialized rows match it)
        advance: Callable taking the session and returning a ListAdvance
        loading_locator: Optional spinner shown while the next batch loads
        loading_timeout: How long to wait for the spinner each iteration
        poll_interval: Poll interval for the spinner wait
    """

    def __init__(
        self,
        session,
        item_locator,
        advance: Callable[[Any], ListAdvance],
        loading_locator=None,
        loading_timeout: float = SHORT_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
    ):
        self.session = session
        self.item_locator = item_locator
        self.advance = advance
        self.loading_locator = loading_locator
        self.loading_timeout = loading_timeout
        self.poll_interval = poll_interval

    def count_visible(self) -> int:
        """Count rows currently materialized. Does not scroll."""
        return len(self.session.find_elements(self.item_locator))

    def _wait_for_loading(self) -> None:
        if self.loading_locator is None:
            return
        cleared = wait_for_element_state(
            self.session,
            self.loading_locator,
            ElementState.INVISIBLE,
            self.loading_timeout,
            self.poll_interval,
        )
        if not cleared:
            logger.debug("Loading indicator still shown; scanning anyway")

    def _scan(self, matcher: ItemMatcher) -> Tuple[Any, Optional[str]]:
        """Look for the item among the rows that exist right now."""
        if matcher.accessibility_id:
            direct = self.session.find_elements((AppiumBy.ACCESSIBILITY_ID, matcher.accessibility_id))
            if direct:
                return direct[0], "accessibility_id"

        for row in self.session.find_elements(self.item_locator):
            try:
                signature = row.get_attribute(matcher.attribute)
            except ABSENCE_ERRORS:
                # Row was recycled mid-scan; the next scan sees its replacement
                continue
            if matcher.matches(signature):
                return row, "scan"
        return None, None

    def find(self, matcher: ItemMatcher, max_advances: int = DEFAULT_MAX_ADVANCES) -> SearchOutcome:
        """Search for an item, advancing the list between scans.

        Args:
            matcher: Item to look for
            max_advances: Maximum number of scan/advance iterations

        Returns:
            SearchOutcome; found is False when the list ended or the bound
            was exhausted
        """
        if max_advances < 1:
            raise ValueError("max_advances must be at least 1")

        logger.info(f"Searching {describe_locator(self.item_locator)} for {matcher.describe()}")
        scans = 0
        advances = 0
        for _ in range(max_advances):
            self._wait_for_loading()

            item, matched_by = self._scan(matcher)
            scans += 1
            if item is not None:
                logger.info(f"Found {matcher.describe()} after {advances} advances (via {matched_by})")
                return SearchOutcome(True, item, scans, advances, matched_by=matched_by)

            logger.debug(f"No match on scan {scans}; advancing list")
            if ListAdvance(self.advance(self.session)) is ListAdvance.NO_FURTHER_CONTENT:
                logger.info(f"End of list reached after {scans} scans; {matcher.describe()} not found")
                return SearchOutcome(False, None, scans, advances, end_of_list=True)
            advances += 1

        logger.info(f"{matcher.describe()} not found within {max_advances} iterations")
        return SearchOutcome(False, None, scans, advances)

    def find_or_raise(self, matcher: ItemMatcher, max_advances: int = DEFAULT_MAX_ADVANCES):
        """Like find(), but return the item or raise.

        Raises:
            ListItemNotFoundError: Search ended without a match
        """
        outcome = self.find(matcher, max_advances)
        if not outcome.found:
            raise ListItemNotFoundError(
                matcher.describe(), outcome.scans, outcome.advances, outcome.end_of_list
            )
        return outcome.item
