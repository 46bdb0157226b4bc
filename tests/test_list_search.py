import pytest

from src.core import IncrementalListSearch, ItemMatcher, ListAdvance
from src.core.exceptions import ListItemNotFoundError
from tests.fakes import FakeElement, FakeSession

ROW = ("accessibility id", "Flight card")
SPINNER = ("accessibility id", "Loading flights")


class PagedList:
    """A list that shows one page of rows at a time and reports its end."""

    def __init__(self, pages, end_detected=True):
        self.pages = pages
        self.index = 0
        self.end_detected = end_detected
        self.advance_calls = 0

    def rows(self):
        return self.pages[self.index]

    def advance(self, session):
        self.advance_calls += 1
        if self.index + 1 >= len(self.pages):
            if self.end_detected:
                return ListAdvance.NO_FURTHER_CONTENT
            return ListAdvance.ADVANCED
        self.index += 1
        return ListAdvance.ADVANCED


def three_pages():
    return PagedList(
        [
            [FakeElement("06:00 08:30 W6 1001"), FakeElement("07:15 09:45 W6 1003")],
            [FakeElement("09:00 11:30 W6 1005"), FakeElement("10:20 12:50 W6 1007")],
            [FakeElement("14:00 16:30 W6 1009"), FakeElement("18:40 21:10 W6 1011")],
        ]
    )


def make_search(paged, **kwargs):
    session = FakeSession(elements={ROW: paged.rows})
    return session, IncrementalListSearch(session, ROW, paged.advance, **kwargs)


class TestIncrementalListSearch:
    def test_target_on_third_page(self, clock):
        paged = three_pages()
        _, search = make_search(paged)

        outcome = search.find(ItemMatcher.containing("14:00", "16:30"), max_advances=10)

        assert outcome.found
        assert outcome.item.desc == "14:00 16:30 W6 1009"
        assert outcome.advances == 2
        assert outcome.scans == 3
        assert outcome.matched_by == "scan"

    def test_target_visible_without_advancing(self, clock):
        paged = three_pages()
        _, search = make_search(paged)

        outcome = search.find(ItemMatcher.containing("07:15"))

        assert outcome.found
        assert outcome.advances == 0
        assert paged.advance_calls == 0

    def test_absent_target_stops_at_end_of_list(self, clock):
        paged = three_pages()
        _, search = make_search(paged)

        outcome = search.find(ItemMatcher.containing("23:00"), max_advances=10)

        assert not outcome.found
        assert outcome.end_of_list
        assert outcome.scans == 3
        assert outcome.advances == 2

    def test_bound_is_respected(self, clock):
        paged = PagedList([[FakeElement("06:00 08:30")]], end_detected=False)
        _, search = make_search(paged)

        outcome = search.find(ItemMatcher.containing("23:00"), max_advances=4)

        assert not outcome.found
        assert not outcome.end_of_list
        assert outcome.scans == 4
        assert paged.advance_calls == 4

    def test_stale_rows_are_skipped(self, clock):
        paged = PagedList(
            [[FakeElement("recycled", stale=True), FakeElement("14:00 16:30")]]
        )
        _, search = make_search(paged)

        outcome = search.find(ItemMatcher.containing("14:00", "16:30"))

        assert outcome.found
        assert outcome.item.desc == "14:00 16:30"

    def test_accessibility_id_fast_path(self, clock):
        paged = three_pages()
        card = FakeElement("14:00 16:30")
        session, search = make_search(paged)
        session.elements[("accessibility id", "14:00 16:30")] = [card]

        outcome = search.find(ItemMatcher.containing("14:00", "16:30", accessibility_id="14:00 16:30"))

        assert outcome.item is card
        assert outcome.matched_by == "accessibility_id"
        assert outcome.scans == 1

    def test_waits_for_loading_indicator(self, clock):
        paged = three_pages()
        spinner = FakeElement("Loading flights")
        session = FakeSession(elements={ROW: paged.rows, SPINNER: [spinner]})
        search = IncrementalListSearch(
            session, ROW, paged.advance, loading_locator=SPINNER, loading_timeout=1.0
        )

        outcome = search.find(ItemMatcher.containing("06:00"))

        # Spinner never clears; the search scans anyway after the timeout
        assert outcome.found
        assert clock.now == pytest.approx(1.0)

    def test_rejects_non_positive_bound(self):
        _, search = make_search(three_pages())
        with pytest.raises(ValueError):
            search.find(ItemMatcher.containing("x"), max_advances=0)

    def test_find_or_raise(self, clock):
        _, search = make_search(three_pages())

        with pytest.raises(ListItemNotFoundError) as exc_info:
            search.find_or_raise(ItemMatcher.containing("23:00"))

        assert exc_info.value.end_of_list
        assert exc_info.value.advances == 2

    def test_count_visible(self):
        _, search = make_search(three_pages())
        assert search.count_visible() == 2


class TestItemMatcher:
    def test_all_terms_required(self):
        matcher = ItemMatcher.containing("06:00", "08:30")
        assert matcher.matches("06:00 08:30 W6 1001")
        assert not matcher.matches("06:00 09:30")
        assert not matcher.matches(None)

    def test_describe(self):
        assert ItemMatcher.containing("a", "b").describe() == "'a' + 'b'"
        assert ItemMatcher.containing("a", accessibility_id="A").describe() == "'A'"
