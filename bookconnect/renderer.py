"""
List rendering.

Projects books into preview items and keeps the rendered list. New pages
are appended after the existing items; a new search clears the list first.
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .catalog import Book, Catalog

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class PreviewItem:
    """Minimal renderable projection of a book."""
    id: str
    title: str
    author: str
    image: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def preview(book: Book, catalog: Catalog) -> PreviewItem:
    return PreviewItem(
        id=book.id,
        title=book.title,
        author=catalog.author_name(book.author),
        image=book.image,
    )


def render(books: Iterable[Book], catalog: Catalog) -> List[PreviewItem]:
    """Render one preview item per book, keeping order."""
    return [preview(book, catalog) for book in books]


class ListView:
    """The rendered preview list."""

    def __init__(self):
        self._items: List[PreviewItem] = []

    def append(self, items: Iterable[PreviewItem]) -> List[PreviewItem]:
        """Append items after those already rendered and return the appended ones."""
        added = list(items)
        if not added:
            return added
        self._items.extend(added)
        logger.debug(f"Appended {len(added)} previews ({len(self._items)} rendered)")
        return added

    def clear(self) -> None:
        self._items = []

    @property
    def items(self) -> List[PreviewItem]:
        return list(self._items)

    @property
    def ids(self) -> List[str]:
        return [item.id for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PreviewItem]:
        return iter(list(self._items))


def create_environment(template_dir: Optional[Path] = None) -> Environment:
    """Create the Jinja2 environment used for the list and page templates."""
    return Environment(
        loader=FileSystemLoader(template_dir or TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


_env: Optional[Environment] = None


def get_environment() -> Environment:
    global _env
    if _env is None:
        _env = create_environment()
    return _env


def render_html(items: Iterable[PreviewItem]) -> str:
    """Render preview items as ``<book-preview>`` elements."""
    template = get_environment().get_template("previews.html")
    return template.render(items=list(items))
