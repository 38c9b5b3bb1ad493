"""
bookconnect - browse, filter and page through a preloaded book catalog.

Main API:
    from bookconnect import BrowserController, Catalog

    # Load a catalog (JSON or YAML) or use the bundled sample
    catalog = Catalog.load("books.json")

    # Render the first page of everything
    controller = BrowserController(catalog, page_size=36)
    controller.start()

    # Filter, then reveal more of the matches
    controller.submit_search({"title": "dune", "genre": "any", "author": "any"})
    controller.show_more()
    print(controller.show_more_label)

    # Resolve a clicked preview to its detail view
    detail = controller.select(controller.view.ids[0])
"""

from .catalog import Book, Catalog, CatalogError
from .controller import BrowserController, ListUpdate
from .filters import FilterSpec, MatchSet, compute_matches, matches

__version__ = "0.1.0"
__all__ = [
    "Book",
    "BrowserController",
    "Catalog",
    "CatalogError",
    "FilterSpec",
    "ListUpdate",
    "MatchSet",
    "compute_matches",
    "matches",
]
