"""
Browser controller.

``BrowserController`` owns every piece of mutable browser state: the active
filter, the match set, the page cursor, the rendered list, the selected
book, the theme and the overlay flags. Each method is one complete reaction
to a user action and leaves the state consistent before returning:

    controller = BrowserController(Catalog.sample(), page_size=36)
    controller.start()                          # first page of everything
    controller.submit_search({"title": "dune"}) # recompute, reset, re-render
    controller.show_more()                      # append the next page
    controller.select("some-book-id")           # detail view, or None
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .catalog import Catalog
from .filters import ANY, FilterSpec, MatchSet, compute_matches
from .pagination import PageCursor, remaining, show_more_label
from .renderer import ListView, PreviewItem, render
from .selection import BookDetail, describe, resolve
from .theme import Theme

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 36

OVERLAYS = ("search", "settings", "detail")


@dataclass
class ListUpdate:
    """The result of a list-changing action, as the presentation layer needs it."""
    reset: bool
    items: List[PreviewItem] = field(default_factory=list)
    remaining: int = 0
    label: str = ""
    enabled: bool = False
    empty: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reset": self.reset,
            "items": [item.to_dict() for item in self.items],
            "remaining": self.remaining,
            "label": self.label,
            "enabled": self.enabled,
            "empty": self.empty,
        }


def resolve_page_size(explicit: Optional[int], catalog: Catalog,
                      configured: int = DEFAULT_PAGE_SIZE) -> int:
    """An explicit size wins, then the catalog's own suggestion, then configuration."""
    if explicit is not None:
        return explicit
    if catalog.books_per_page is not None:
        return catalog.books_per_page
    return configured


def dropdown_options(table: Mapping[str, str], first_label: str) -> List[Tuple[str, str]]:
    """Select options for a name table, led by the ``any`` choice."""
    return [(ANY, first_label)] + list(table.items())


class BrowserController:
    """Sequences filtering, pagination, rendering and selection."""

    def __init__(self, catalog: Catalog, page_size: int = DEFAULT_PAGE_SIZE,
                 theme: Theme = Theme.DAY):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.catalog = catalog
        self.page_size = page_size
        self.theme = theme

        self.active_filter: Optional[FilterSpec] = None
        self.match_set: MatchSet = compute_matches(catalog, FilterSpec())
        self.cursor = PageCursor()
        self.view = ListView()
        self.detail: Optional[BookDetail] = None
        self.overlays: Dict[str, bool] = {name: False for name in OVERLAYS}

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def remaining(self) -> int:
        return remaining(self.match_set, self.cursor.pages_rendered, self.page_size)

    @property
    def show_more_label(self) -> str:
        return show_more_label(self.remaining)

    @property
    def show_more_enabled(self) -> bool:
        return self.remaining > 0

    @property
    def empty_state(self) -> bool:
        """True only when a submitted search matched nothing."""
        return self.active_filter is not None and self.match_set.is_empty

    @property
    def rendered_count(self) -> int:
        return len(self.view)

    def genre_options(self) -> List[Tuple[str, str]]:
        return dropdown_options(self.catalog.genres, "All Genres")

    def author_options(self) -> List[Tuple[str, str]]:
        return dropdown_options(self.catalog.authors, "All Authors")

    def snapshot(self) -> ListUpdate:
        """The whole rendered list with the current control state."""
        return self._update(reset=True, items=self.view.items)

    def _update(self, reset: bool, items: List[PreviewItem]) -> ListUpdate:
        return ListUpdate(
            reset=reset,
            items=items,
            remaining=self.remaining,
            label=self.show_more_label,
            enabled=self.show_more_enabled,
            empty=self.empty_state,
        )

    def _render_first_page(self) -> List[PreviewItem]:
        self.cursor.reset()
        self.view.clear()
        page = self.cursor.current_slice(self.match_set, self.page_size)
        return self.view.append(render(page, self.catalog))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def start(self) -> ListUpdate:
        """Render the first page of the full catalog."""
        self.active_filter = None
        self.match_set = compute_matches(self.catalog, FilterSpec())
        items = self._render_first_page()
        logger.debug(f"Started with {len(self.match_set)} books, {len(items)} rendered")
        return self._update(reset=True, items=items)

    def submit_search(self, form: Optional[Mapping[str, Any]]) -> ListUpdate:
        """Apply a new search: recompute matches, reset the cursor, re-render."""
        spec = FilterSpec.from_form(form)
        self.active_filter = spec
        self.match_set = compute_matches(self.catalog, spec)
        items = self._render_first_page()
        self.overlays["search"] = False
        logger.debug(
            f"Search {spec} -> {len(self.match_set)} matches, {len(items)} rendered"
        )
        return self._update(reset=True, items=items)

    def show_more(self) -> ListUpdate:
        """Append the next page; a no-op update when nothing remains."""
        if not self.cursor.advance(self.match_set, self.page_size):
            return self._update(reset=False, items=[])
        page = self.cursor.current_slice(self.match_set, self.page_size)
        items = self.view.append(render(page, self.catalog))
        return self._update(reset=False, items=items)

    def select(self, identifier: Optional[str]) -> Optional[BookDetail]:
        """Show the detail view for a clicked preview; unknown ids change nothing."""
        book = resolve(identifier, self.catalog)
        if book is None:
            return None
        self.detail = describe(book, self.catalog)
        self.overlays["detail"] = True
        logger.debug(f"Selected book {book.id}")
        return self.detail

    def apply_theme(self, value: Optional[str]) -> Theme:
        self.theme = Theme.parse(value)
        self.overlays["settings"] = False
        logger.debug(f"Theme set to {self.theme.value}")
        return self.theme

    def open_overlay(self, name: str) -> None:
        self._check_overlay(name)
        self.overlays[name] = True

    def close_overlay(self, name: str) -> None:
        self._check_overlay(name)
        self.overlays[name] = False

    @staticmethod
    def _check_overlay(name: str) -> None:
        if name not in OVERLAYS:
            raise ValueError(f"Unknown overlay '{name}'. Valid: {', '.join(OVERLAYS)}")
