"""
Web server for browsing a bookconnect catalog.

Serves the browser page and a small JSON API that drives it. Every client
gets its own ``BrowserController``, keyed by a session cookie; loading the
page starts a new session, so filters and page position never carry over
from an earlier visit or another tab. Handlers never await, so each request
completes its state transition before the next one is handled.
"""

import logging
import uuid
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from pydantic import BaseModel

from . import __version__
from .catalog import Catalog
from .controller import BrowserController, DEFAULT_PAGE_SIZE, ListUpdate, resolve_page_size
from .renderer import get_environment, render_html
from .selection import BookDetail, describe, resolve
from .theme import Theme, css_variables, preferred_theme

logger = logging.getLogger(__name__)

SESSION_COOKIE = "bookconnect_session"
COLOR_SCHEME_HINT = "Sec-CH-Prefers-Color-Scheme"
MAX_SESSIONS = 1000


# Pydantic models for API
class PreviewResponse(BaseModel):
    id: str
    title: str
    author: str
    image: str


class ListUpdateResponse(BaseModel):
    reset: bool
    items: List[PreviewResponse]
    remaining: int
    label: str
    enabled: bool
    empty: bool


class BookDetailResponse(BaseModel):
    id: str
    title: str
    subtitle: str
    description: str
    image: str


class SelectionResponse(BaseModel):
    detail: Optional[BookDetailResponse] = None


class SearchRequest(BaseModel):
    title: Optional[str] = None
    genre: Optional[str] = None
    author: Optional[str] = None


class SelectRequest(BaseModel):
    preview: Optional[str] = None


class Option(BaseModel):
    value: str
    label: str


class OptionsResponse(BaseModel):
    genres: List[Option]
    authors: List[Option]


class ThemeRequest(BaseModel):
    theme: Optional[str] = None


class ThemeResponse(BaseModel):
    theme: str
    variables: Dict[str, str]


class BrowserSessions:
    """
    Browser controllers by session id, over one shared read-only catalog.

    The oldest session is dropped once ``max_sessions`` is reached.
    """

    def __init__(self, catalog: Catalog, page_size: int = DEFAULT_PAGE_SIZE,
                 theme: Theme = Theme.DAY, auto_theme: bool = False,
                 max_sessions: int = MAX_SESSIONS):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.catalog = catalog
        self.page_size = page_size
        self.theme = theme
        self.auto_theme = auto_theme
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, BrowserController]" = OrderedDict()

    def new(self, theme: Optional[Theme] = None) -> Tuple[str, BrowserController]:
        """Start a session showing the first page of the full catalog."""
        controller = BrowserController(self.catalog, page_size=self.page_size,
                                       theme=theme or self.theme)
        controller.start()
        session_id = uuid.uuid4().hex
        self._controllers[session_id] = controller
        while len(self._controllers) > self.max_sessions:
            expired, _ = self._controllers.popitem(last=False)
            logger.debug(f"Dropped session {expired}")
        return session_id, controller

    def get(self, session_id: Optional[str]) -> Optional[BrowserController]:
        if session_id is None:
            return None
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def __len__(self) -> int:
        return len(self._controllers)


# Global session registry
_sessions: Optional[BrowserSessions] = None


def get_sessions() -> BrowserSessions:
    """Get the current session registry."""
    if _sessions is None:
        raise HTTPException(status_code=500, detail="Catalog not initialized")
    return _sessions


def set_sessions(sessions: Optional[BrowserSessions]):
    """Set the session registry directly (for testing)."""
    global _sessions
    _sessions = sessions


def init_sessions(catalog_path: Optional[Path] = None,
                  page_size: Optional[int] = None,
                  theme: str = "auto",
                  default_page_size: int = DEFAULT_PAGE_SIZE) -> BrowserSessions:
    """
    Load the catalog and prepare per-client sessions over it.

    With ``theme="auto"`` each page load picks day or night from the client's
    preferred color scheme.
    """
    catalog = Catalog.load(catalog_path) if catalog_path else Catalog.sample()
    size = resolve_page_size(page_size, catalog, default_page_size)
    sessions = BrowserSessions(catalog, page_size=size, theme=Theme.parse(theme),
                               auto_theme=theme == "auto")
    set_sessions(sessions)
    logger.info(f"Serving {len(catalog)} books, {size} per page")
    return sessions


def create_app(catalog_path: Optional[Path] = None,
               page_size: Optional[int] = None,
               theme: str = "auto",
               default_page_size: int = DEFAULT_PAGE_SIZE) -> FastAPI:
    """Create FastAPI application with initialized sessions."""
    init_sessions(catalog_path, page_size=page_size, theme=theme,
                  default_page_size=default_page_size)
    return app


app = FastAPI(
    title="bookconnect",
    description="Browse, filter and page through a book catalog",
    version=__version__
)


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")


def get_controller(request: Request, response: Response) -> BrowserController:
    """The caller's controller; a client without a live session gets a new one."""
    sessions = get_sessions()
    controller = sessions.get(request.cookies.get(SESSION_COOKIE))
    if controller is None:
        session_id, controller = sessions.new()
        _set_session_cookie(response, session_id)
    return controller


def _client_theme(request: Request, sessions: BrowserSessions) -> Theme:
    if not sessions.auto_theme:
        return sessions.theme
    hint = request.headers.get(COLOR_SCHEME_HINT, "")
    return preferred_theme(hint.strip('" ').lower() == "dark")


def _list_response(update: ListUpdate) -> ListUpdateResponse:
    return ListUpdateResponse(**update.to_dict())


def _detail_response(detail: BookDetail) -> BookDetailResponse:
    return BookDetailResponse(**detail.to_dict())


def _theme_response(theme: Theme) -> ThemeResponse:
    return ThemeResponse(theme=theme.value, variables=css_variables(theme))


@app.get("/", response_class=HTMLResponse)
async def root(request: Request, response: Response):
    """Serve the browser page in a fresh session."""
    sessions = get_sessions()
    session_id, controller = sessions.new(theme=_client_theme(request, sessions))
    _set_session_cookie(response, session_id)
    response.headers["Accept-CH"] = COLOR_SCHEME_HINT
    response.headers["Vary"] = COLOR_SCHEME_HINT

    template = get_environment().get_template("index.html")
    return template.render(
        previews=Markup(render_html(controller.view.items)),
        genres=controller.genre_options(),
        authors=controller.author_options(),
        label=controller.show_more_label,
        enabled=controller.show_more_enabled,
        empty=controller.empty_state,
        detail=controller.detail,
        overlays=controller.overlays,
        theme=controller.theme.value,
        variables=css_variables(controller.theme),
        auto_theme=sessions.auto_theme,
    )


@app.get("/api/list", response_model=ListUpdateResponse)
async def current_list(controller: BrowserController = Depends(get_controller)):
    """Everything rendered so far, with the show-more state."""
    return _list_response(controller.snapshot())


@app.post("/api/search", response_model=ListUpdateResponse)
async def search(request: SearchRequest,
                 controller: BrowserController = Depends(get_controller)):
    """Apply a new search and return its first page."""
    return _list_response(controller.submit_search({
        "title": request.title,
        "genre": request.genre,
        "author": request.author,
    }))


@app.post("/api/more", response_model=ListUpdateResponse)
async def show_more(controller: BrowserController = Depends(get_controller)):
    """Append the next page of the current matches."""
    return _list_response(controller.show_more())


@app.post("/api/select", response_model=SelectionResponse)
async def select(request: SelectRequest,
                 controller: BrowserController = Depends(get_controller)):
    """Resolve a clicked preview; unknown ids give an empty selection."""
    detail = controller.select(request.preview)
    if detail is None:
        return SelectionResponse(detail=None)
    return SelectionResponse(detail=_detail_response(detail))


@app.get("/api/books/{book_id}", response_model=BookDetailResponse)
async def get_book(book_id: str):
    """Get the detail view of a specific book by ID."""
    catalog = get_sessions().catalog
    book = resolve(book_id, catalog)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return _detail_response(describe(book, catalog))


@app.get("/api/options", response_model=OptionsResponse)
async def options(controller: BrowserController = Depends(get_controller)):
    """Genre and author dropdown options."""
    return OptionsResponse(
        genres=[Option(value=v, label=l) for v, l in controller.genre_options()],
        authors=[Option(value=v, label=l) for v, l in controller.author_options()],
    )


@app.get("/api/theme", response_model=ThemeResponse)
async def get_theme(controller: BrowserController = Depends(get_controller)):
    return _theme_response(controller.theme)


@app.post("/api/theme", response_model=ThemeResponse)
async def set_theme(request: ThemeRequest,
                    controller: BrowserController = Depends(get_controller)):
    return _theme_response(controller.apply_theme(request.theme))
