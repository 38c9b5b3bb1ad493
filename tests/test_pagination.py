"""
Tests for page slicing and the page cursor.
"""

import pytest

from bookconnect.pagination import PageCursor, remaining, show_more_label, slice_for_page

ITEMS = list(range(40))


class TestSliceForPage:

    def test_first_page(self):
        assert slice_for_page(ITEMS, 1, 30) == list(range(30))

    def test_last_page_is_clipped(self):
        assert slice_for_page(ITEMS, 2, 30) == list(range(30, 40))

    def test_past_the_end_is_empty(self):
        assert slice_for_page(ITEMS, 3, 30) == []
        assert slice_for_page([], 1, 30) == []

    @pytest.mark.parametrize("cursor, page_size", [(0, 30), (1, 0), (-1, 10)])
    def test_invalid_arguments(self, cursor, page_size):
        with pytest.raises(ValueError):
            slice_for_page(ITEMS, cursor, page_size)


class TestRemaining:

    def test_counts_unexposed_items(self):
        assert remaining(ITEMS, 1, 30) == 10
        assert remaining(ITEMS, 2, 30) == 0

    def test_never_negative(self):
        assert remaining(ITEMS, 5, 30) == 0
        assert remaining([], 1, 30) == 0

    def test_label(self):
        assert show_more_label(10) == "Show more (10)"
        assert show_more_label(0) == "Show more (0)"


class TestPageCursor:

    def test_starts_at_first_page(self):
        assert PageCursor().pages_rendered == 1

    def test_advance_while_items_remain(self):
        cursor = PageCursor()
        assert cursor.advance(ITEMS, 30) is True
        assert cursor.pages_rendered == 2
        assert cursor.current_slice(ITEMS, 30) == list(range(30, 40))

    def test_does_not_over_advance(self):
        cursor = PageCursor()
        cursor.advance(ITEMS, 30)

        assert cursor.advance(ITEMS, 30) is False
        assert cursor.pages_rendered == 2

    def test_empty_matches_never_advance(self):
        cursor = PageCursor()
        assert cursor.advance([], 30) is False
        assert cursor.pages_rendered == 1

    def test_reset(self):
        cursor = PageCursor(pages_rendered=4)
        cursor.reset()
        assert cursor.pages_rendered == 1

    @pytest.mark.parametrize("count, page_size", [(0, 5), (1, 5), (5, 5), (6, 5), (23, 4)])
    def test_advancing_exposes_every_item_once(self, count, page_size):
        items = list(range(count))
        cursor = PageCursor()
        seen = list(cursor.current_slice(items, page_size))

        while cursor.advance(items, page_size):
            seen.extend(cursor.current_slice(items, page_size))
            # cursor never runs more than one page ahead of what was exposed
            assert cursor.pages_rendered * page_size - len(seen) < page_size

        assert seen == items
