"""
Filter evaluation and match set computation.

A search submission produces a fresh ``FilterSpec``; the match set is then
recomputed from scratch over the whole catalog. Nothing here mutates state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Tuple

from .catalog import Book, Catalog

logger = logging.getLogger(__name__)

ANY = "any"


def _choice(value: Any) -> str:
    if value is None:
        return ANY
    text = str(value).strip()
    return text if text else ANY


@dataclass(frozen=True)
class FilterSpec:
    """Title, genre and author constraints of a single search."""
    title_query: str = ""
    genre_id: str = ANY
    author_id: str = ANY

    @classmethod
    def from_form(cls, form: Optional[Mapping[str, Any]]) -> "FilterSpec":
        """
        Build a filter from submitted search form fields.

        Missing, ``None`` or blank ``genre``/``author`` fields mean no
        constraint (``"any"``); a missing ``title`` means an empty query.
        """
        form = form or {}
        title = form.get("title")
        return cls(
            title_query="" if title is None else str(title),
            genre_id=_choice(form.get("genre")),
            author_id=_choice(form.get("author")),
        )

    @property
    def is_unconstrained(self) -> bool:
        return (
            not self.title_query.strip()
            and self.genre_id == ANY
            and self.author_id == ANY
        )


def genre_matches(book: Book, spec: FilterSpec) -> bool:
    return spec.genre_id == ANY or spec.genre_id in book.genres


def title_matches(book: Book, spec: FilterSpec) -> bool:
    if not spec.title_query.strip():
        return True
    return spec.title_query.lower() in book.title.lower()


def author_matches(book: Book, spec: FilterSpec) -> bool:
    return spec.author_id == ANY or spec.author_id == book.author


def matches(book: Book, spec: FilterSpec) -> bool:
    """Return True if the book satisfies the genre, title and author constraints."""
    genre_ok = genre_matches(book, spec)
    title_ok = title_matches(book, spec)
    author_ok = author_matches(book, spec)
    return genre_ok and title_ok and author_ok


@dataclass(frozen=True)
class MatchSet:
    """Books satisfying one filter, in catalog order."""
    spec: FilterSpec
    books: Tuple[Book, ...]

    def __len__(self) -> int:
        return len(self.books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.books)

    def __getitem__(self, index):
        return self.books[index]

    @property
    def is_empty(self) -> bool:
        return len(self.books) < 1


def compute_matches(catalog: Catalog, spec: FilterSpec) -> MatchSet:
    """
    Scan the whole catalog and return the books matching ``spec``.

    The result preserves catalog order and is identical for identical
    inputs. Callers replace their previous match set with it.
    """
    found = tuple(book for book in catalog if matches(book, spec))
    logger.debug(f"Filter {spec} matched {len(found)} of {len(catalog)} books")
    return MatchSet(spec=spec, books=found)
