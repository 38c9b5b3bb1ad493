"""Page cursor and slicing for the incremental "show more" list."""

import logging
from dataclasses import dataclass
from typing import Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _check(cursor: int, page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if cursor < 1:
        raise ValueError(f"cursor must be at least 1, got {cursor}")


def slice_for_page(matches: Sequence[T], cursor: int, page_size: int) -> Sequence[T]:
    """
    Return the items of page ``cursor`` (1-based).

    A cursor past the last page yields an empty sequence.
    """
    _check(cursor, page_size)
    return matches[(cursor - 1) * page_size:cursor * page_size]


def remaining(matches: Sequence, cursor: int, page_size: int) -> int:
    """Number of matches not yet exposed after ``cursor`` pages."""
    _check(cursor, page_size)
    return max(0, len(matches) - cursor * page_size)


def show_more_label(count: int) -> str:
    return f"Show more ({count})"


@dataclass
class PageCursor:
    """Count of pages already rendered for the current match set."""
    pages_rendered: int = 1

    def reset(self) -> None:
        self.pages_rendered = 1

    def has_more(self, matches: Sequence, page_size: int) -> bool:
        return remaining(matches, self.pages_rendered, page_size) > 0

    def advance(self, matches: Sequence, page_size: int) -> bool:
        """
        Move to the next page if any matches remain.

        Returns False and leaves the cursor untouched when everything is
        already exposed.
        """
        if not self.has_more(matches, page_size):
            logger.debug(f"Cursor stays at page {self.pages_rendered}: nothing remaining")
            return False
        self.pages_rendered += 1
        logger.debug(f"Cursor advanced to page {self.pages_rendered}")
        return True

    def current_slice(self, matches: Sequence[T], page_size: int) -> Sequence[T]:
        return slice_for_page(matches, self.pages_rendered, page_size)
