"""Resolve a clicked preview back to its book and build the detail view."""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .catalog import Book, Catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookDetail:
    """What the detail overlay shows for a selected book."""
    id: str
    title: str
    subtitle: str
    description: str
    image: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def resolve(identifier: Optional[str], catalog: Catalog) -> Optional[Book]:
    """
    Look up a clicked preview identifier in the whole catalog.

    Returns None for a missing or unknown identifier, e.g. a click that
    did not land on a preview.
    """
    if identifier is None:
        return None
    book = catalog.get(str(identifier))
    if book is None:
        logger.debug(f"No book for preview id {identifier!r}")
    return book


def describe(book: Book, catalog: Catalog) -> BookDetail:
    return BookDetail(
        id=book.id,
        title=book.title,
        subtitle=f"{catalog.author_name(book.author)} ({book.year})",
        description=book.description,
        image=book.image,
    )
