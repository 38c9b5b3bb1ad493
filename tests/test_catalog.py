"""
Tests for the catalog store: construction, lookups and loading.
"""

import json
from datetime import date, datetime, timezone

import pytest
import yaml

from bookconnect.catalog import Book, Catalog, CatalogError, parse_published

from conftest import AUTHORS, GENRES, make_book


def _document():
    return {
        "books": [
            {
                "id": "b1",
                "title": "Dune",
                "author": "a0",
                "genres": ["g0", "g1"],
                "description": "Desert planet.",
                "image": "https://example.com/dune.jpg",
                "published": "1965-08-01T00:00:00.000Z",
            },
            {
                "id": "b2",
                "title": "Kindred",
                "author": "a2",
                "genres": ["g2"],
                "description": "Time travel.",
                "image": "https://example.com/kindred.jpg",
                "published": "1979-06-01",
            },
        ],
        "authors": AUTHORS,
        "genres": GENRES,
    }


class TestParsePublished:
    """Test publication timestamp parsing."""

    def test_parses_iso_timestamp_with_z_suffix(self):
        result = parse_published("2018-02-28T18:02:30.000Z")
        assert result.year == 2018
        assert result.tzinfo is not None

    def test_parses_plain_date_string(self):
        assert parse_published("1979-06-01").year == 1979

    def test_accepts_date_and_datetime_objects(self):
        assert parse_published(date(2001, 5, 4)).year == 2001
        assert parse_published(datetime(2002, 1, 1)).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "not a date", 1965])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(CatalogError):
            parse_published(value)


class TestCatalog:
    """Test the in-memory catalog."""

    def test_preserves_book_order(self):
        books = [make_book(i) for i in (3, 1, 2)]
        catalog = Catalog(books, AUTHORS, GENRES)
        assert [b.id for b in catalog] == ["book-03", "book-01", "book-02"]

    def test_get_by_id(self, small_catalog):
        assert small_catalog.get("book-02").title == "A Wizard of Earthsea"
        assert small_catalog.get("missing") is None
        assert "book-02" in small_catalog

    def test_duplicate_ids_are_rejected(self):
        with pytest.raises(CatalogError, match="Duplicate"):
            Catalog([make_book(1), make_book(1)], AUTHORS, GENRES)

    def test_name_tables_are_read_only(self, small_catalog):
        with pytest.raises(TypeError):
            small_catalog.authors["a9"] = "Someone"

    def test_name_tables_keep_insertion_order(self, small_catalog):
        assert list(small_catalog.genres) == ["g0", "g1", "g2", "g3", "g4"]

    def test_author_name_falls_back_to_id(self, small_catalog):
        assert small_catalog.author_name("a1") == "Ursula K. Le Guin"
        assert small_catalog.author_name("nobody") == "nobody"

    def test_books_are_immutable(self, small_catalog):
        book = small_catalog.books[0]
        with pytest.raises(AttributeError):
            book.title = "Changed"

    def test_year_comes_from_published(self):
        assert make_book(5).year == 1965


class TestCatalogFromDict:
    """Test building a catalog from a parsed document."""

    def test_builds_books_and_tables(self):
        catalog = Catalog.from_dict(_document())

        assert len(catalog) == 2
        dune = catalog.get("b1")
        assert isinstance(dune, Book)
        assert dune.genres == ("g0", "g1")
        assert dune.year == 1965
        assert catalog.author_name("a2") == "Octavia E. Butler"

    def test_missing_required_field_names_the_record(self):
        data = _document()
        del data["books"][1]["title"]

        with pytest.raises(CatalogError, match="#1.*title"):
            Catalog.from_dict(data)

    def test_optional_fields_default_to_empty(self):
        data = {"books": [{"id": "x", "title": "T", "author": "a0", "published": "2000-01-01"}]}
        book = Catalog.from_dict(data).get("x")
        assert book.genres == ()
        assert book.description == ""
        assert book.image == ""

    def test_books_per_page_is_optional(self):
        data = _document()
        assert Catalog.from_dict(data).books_per_page is None
        data["books_per_page"] = 30
        assert Catalog.from_dict(data).books_per_page == 30

    def test_books_must_be_a_list(self):
        with pytest.raises(CatalogError):
            Catalog.from_dict({"books": {"id": "x"}})

    @pytest.mark.parametrize("key", ["authors", "genres"])
    def test_name_tables_must_be_mappings(self, key):
        data = _document()
        data[key] = ["a0", "a1"]
        with pytest.raises(CatalogError, match=key):
            Catalog.from_dict(data)

    @pytest.mark.parametrize("value", ["thirty", 0, -5, True, [30]])
    def test_invalid_books_per_page(self, value):
        data = _document()
        data["books_per_page"] = value
        with pytest.raises(CatalogError, match="books_per_page"):
            Catalog.from_dict(data)

    def test_books_per_page_accepts_numeric_strings(self):
        data = _document()
        data["books_per_page"] = "12"
        assert Catalog.from_dict(data).books_per_page == 12


class TestCatalogLoad:
    """Test loading catalogs from disk."""

    def test_loads_json(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps(_document()))

        catalog = Catalog.load(path)
        assert [b.id for b in catalog] == ["b1", "b2"]

    def test_loads_yaml_with_native_dates(self, tmp_path):
        path = tmp_path / "books.yaml"
        data = _document()
        data["books"][0]["published"] = date(1965, 8, 1)
        path.write_text(yaml.safe_dump(data))

        catalog = Catalog.load(path)
        assert catalog.get("b1").year == 1965

    def test_missing_file_raises_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Catalog.load(tmp_path / "nope.json")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "books.csv"
        path.write_text("id,title")
        with pytest.raises(CatalogError, match="Unsupported"):
            Catalog.load(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            Catalog.load(path)

    def test_bundled_sample_loads(self):
        catalog = Catalog.sample()
        assert len(catalog) > 0
        assert all(catalog.author_name(b.author) != b.author for b in catalog)
