"""
Catalog store for bookconnect.

The catalog is loaded once at startup and never mutated afterwards. It holds
the ordered book records plus the author and genre name tables that the
browser uses for display and for its dropdowns.

Document format (JSON or YAML):

    {
        "books": [
            {"id": "...", "title": "...", "author": "<author id>",
             "genres": ["<genre id>", ...], "description": "...",
             "image": "https://...", "published": "2018-02-28T00:00:00Z"},
            ...
        ],
        "authors": {"<author id>": "Display Name", ...},
        "genres": {"<genre id>": "Display Name", ...}
    }
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

SAMPLE_CATALOG = Path(__file__).parent / "data" / "sample_catalog.json"


class CatalogError(ValueError):
    """Raised when a catalog document is malformed."""


@dataclass(frozen=True)
class Book:
    """A single immutable book record."""
    id: str
    title: str
    author: str
    genres: Tuple[str, ...]
    description: str
    image: str
    published: datetime

    @property
    def year(self) -> int:
        return self.published.year


def parse_published(value: Any) -> datetime:
    """
    Parse a publication timestamp.

    Accepts ISO-8601 strings (with an optional trailing ``Z``) as well as
    the ``date``/``datetime`` objects that YAML produces for bare timestamps.
    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise CatalogError(f"Invalid published timestamp {value!r}") from e
    else:
        raise CatalogError(f"Invalid published timestamp {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _book_from_dict(entry: Mapping[str, Any], position: int) -> Book:
    if not isinstance(entry, Mapping):
        raise CatalogError(f"Book #{position} is not a mapping")

    for key in ("id", "title", "author"):
        if entry.get(key) in (None, ""):
            raise CatalogError(f"Book #{position} is missing '{key}'")

    genres = entry.get("genres") or []
    if isinstance(genres, str):
        genres = [genres]

    return Book(
        id=str(entry["id"]),
        title=str(entry["title"]),
        author=str(entry["author"]),
        genres=tuple(str(g) for g in genres),
        description=str(entry.get("description") or ""),
        image=str(entry.get("image") or ""),
        published=parse_published(entry.get("published")),
    )


def _name_table(data: Mapping[str, Any], key: str) -> Dict[str, str]:
    table = data.get(key) or {}
    if not isinstance(table, Mapping):
        raise CatalogError(f"'{key}' must be a mapping of id to name")
    return {str(k): str(v) for k, v in table.items()}


def _books_per_page(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise CatalogError(f"Invalid books_per_page: {value!r}")
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise CatalogError(f"Invalid books_per_page: {value!r}")
    if size < 1:
        raise CatalogError(f"books_per_page must be at least 1, got {size}")
    return size


class Catalog:
    """
    Immutable collection of books with author and genre lookup tables.

    Books keep the order they were given in; that order is the order of
    every match set computed from this catalog. The name tables keep their
    insertion order, which is the display order of the filter dropdowns.
    """

    def __init__(
        self,
        books: Iterable[Book],
        authors: Mapping[str, str],
        genres: Mapping[str, str],
        books_per_page: Optional[int] = None,
    ):
        self._books: Tuple[Book, ...] = tuple(books)
        self._by_id: Dict[str, Book] = {}
        for book in self._books:
            if book.id in self._by_id:
                raise CatalogError(f"Duplicate book id '{book.id}'")
            self._by_id[book.id] = book

        self._authors = MappingProxyType(dict(authors))
        self._genres = MappingProxyType(dict(genres))
        self.books_per_page = books_per_page

        logger.debug(
            f"Catalog created with {len(self._books)} books, "
            f"{len(self._authors)} authors, {len(self._genres)} genres"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Catalog":
        """Build a catalog from a parsed catalog document."""
        if not isinstance(data, Mapping):
            raise CatalogError("Catalog document must be a mapping")

        raw_books = data.get("books") or []
        if not isinstance(raw_books, list):
            raise CatalogError("'books' must be a list")

        books = [_book_from_dict(entry, i) for i, entry in enumerate(raw_books)]
        authors = _name_table(data, "authors")
        genres = _name_table(data, "genres")
        books_per_page = _books_per_page(data.get("books_per_page"))

        return cls(books, authors, genres, books_per_page=books_per_page)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Catalog":
        """
        Load a catalog from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            FileNotFoundError: If the file does not exist
            CatalogError: If the suffix is unsupported or the content is malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog not found: {path}")

        suffix = path.suffix.lower()
        with open(path, "r", encoding="utf-8") as f:
            try:
                if suffix == ".json":
                    data = json.load(f)
                elif suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    raise CatalogError(f"Unsupported catalog format: {path.suffix}")
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise CatalogError(f"Could not parse {path}: {e}") from e

        logger.debug(f"Loaded catalog document from {path}")
        return cls.from_dict(data or {})

    @classmethod
    def sample(cls) -> "Catalog":
        """Load the sample catalog bundled with the package."""
        return cls.load(SAMPLE_CATALOG)

    @property
    def books(self) -> Tuple[Book, ...]:
        return self._books

    @property
    def authors(self) -> Mapping[str, str]:
        return self._authors

    @property
    def genres(self) -> Mapping[str, str]:
        return self._genres

    def get(self, book_id: str) -> Optional[Book]:
        return self._by_id.get(book_id)

    def author_name(self, author_id: str) -> str:
        # Unknown ids fall back to the raw id
        return self._authors.get(author_id, author_id)

    def genre_name(self, genre_id: str) -> str:
        return self._genres.get(genre_id, genre_id)

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._by_id
