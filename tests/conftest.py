"""Shared catalog fixtures."""

from datetime import datetime, timezone

import pytest

from bookconnect.catalog import Book, Catalog

AUTHORS = {
    "a0": "Frank Herbert",
    "a1": "Ursula K. Le Guin",
    "a2": "Octavia E. Butler",
    "a3": "Umberto Eco",
}

GENRES = {
    "g0": "Science Fiction",
    "g1": "Fantasy",
    "g2": "Literary",
    "g3": "Historical",
    "g4": "Mystery",
}


def make_book(i: int, title: str = None, author: str = None, genres=None) -> Book:
    return Book(
        id=f"book-{i:02d}",
        title=title or f"Volume {i}",
        author=author or f"a{i % 4}",
        genres=tuple(genres) if genres is not None else (f"g{i % 5}",),
        description=f"Description of volume {i}",
        image=f"https://example.com/covers/{i}.jpg",
        published=datetime(1960 + i, 1, 1, tzinfo=timezone.utc),
    )


def make_catalog(count: int = 40) -> Catalog:
    books = []
    for i in range(count):
        if i == 7:
            books.append(make_book(i, title="Dune", author="a0", genres=["g0", "g1"]))
        else:
            books.append(make_book(i))
    return Catalog(books, AUTHORS, GENRES)


@pytest.fixture
def catalog():
    """Forty books; only book-07 ("Dune") contains 'dune' in its title."""
    return make_catalog(40)


@pytest.fixture
def small_catalog():
    return Catalog(
        [
            make_book(0, title="Dune", author="a0", genres=["g0"]),
            make_book(1, title="Children of Dune", author="a0", genres=["g0", "g2"]),
            make_book(2, title="A Wizard of Earthsea", author="a1", genres=["g1"]),
            make_book(3, title="Kindred", author="a2", genres=["g2", "g3"]),
        ],
        AUTHORS,
        GENRES,
    )
