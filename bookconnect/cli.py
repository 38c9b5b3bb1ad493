import logging
from pathlib import Path
from typing import List, Mapping, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.traceback import install

from .catalog import Catalog
from .controller import BrowserController, ListUpdate, resolve_page_size
from .decorators import handle_catalog_errors
from .filters import ANY
from .renderer import PreviewItem
from .selection import BookDetail

# Initialize Rich Traceback for better error messages
install(show_locals=True)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    bookconnect - browse, filter and page through a book catalog.
    """
    from . import decorators
    from .config import load_config

    cli_config = load_config().cli
    console.no_color = not cli_config.color
    decorators.console.no_color = not cli_config.color

    if verbose or cli_config.verbose:
        logging.getLogger("bookconnect").setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


@app.command()
def about():
    """Display information about bookconnect."""
    console.print("[bold cyan]bookconnect - Book Catalog Browser[/bold cyan]")
    console.print("")
    console.print("Browse a preloaded book catalog with:")
    console.print("  • Title, genre and author filters")
    console.print("  • Page-by-page \"show more\" listing")
    console.print("  • Book detail view")
    console.print("  • Day/night theme in the web interface")
    console.print("")
    console.print("[bold]Commands:[/bold]")
    console.print("  bookconnect list [catalog]              First page of the catalog")
    console.print("  bookconnect search [catalog] -t dune    Filter the catalog")
    console.print("  bookconnect show <id> [catalog]         Book details")
    console.print("  bookconnect options [catalog]           Genres and authors")
    console.print("  bookconnect browse [catalog]            Interactive browser")
    console.print("  bookconnect serve [catalog]             Web interface")
    console.print("  bookconnect config --show               Configuration")
    console.print("")
    console.print("[dim]Without a catalog path the configured default or the bundled sample is used.[/dim]")


# ============================================================================
# Helpers
# ============================================================================

def _open_catalog(catalog_path: Optional[Path]) -> Catalog:
    """Open the given catalog, the configured default, or the bundled sample."""
    from .config import load_config

    if catalog_path is None:
        default_path = load_config().catalog.default_path
        if default_path:
            catalog_path = Path(default_path)

    if catalog_path is None:
        logger.debug("Using bundled sample catalog")
        return Catalog.sample()
    return Catalog.load(catalog_path)


def _page_size(catalog: Catalog, page_size: Optional[int]) -> int:
    from .config import load_config

    return resolve_page_size(page_size, catalog, load_config().browser.page_size)


def _lookup_id(table: Mapping[str, str], value: Optional[str]) -> Optional[str]:
    """Accept either an id or a display name (case-insensitive) for a filter option."""
    if value is None or value == ANY or value in table:
        return value
    wanted = value.strip().lower()
    for key, name in table.items():
        if name.lower() == wanted:
            return key
    return value


def _print_previews(items: List[PreviewItem], start: int, title: str) -> None:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Title", style="green")
    table.add_column("Author", style="blue")

    for offset, item in enumerate(items, start=start):
        table.add_row(str(offset), item.id, item.title, item.author)

    console.print(table)


def _print_update(controller: BrowserController, update: ListUpdate, title: str) -> None:
    if update.empty:
        console.print("[yellow]No results found. Your filters might be too narrow.[/yellow]")
    elif update.items:
        start = controller.rendered_count - len(update.items) + 1
        _print_previews(update.items, start, title)

    if update.enabled:
        console.print(f"\n[dim]{update.label}[/dim]")
    else:
        console.print(f"\n[dim]Showing {controller.rendered_count} of {len(controller.match_set)} books[/dim]")


def _print_detail(detail: BookDetail) -> None:
    body = f"[bold]{detail.subtitle}[/bold]\n\n{detail.description}\n\n[dim]{detail.image}[/dim]"
    console.print(Panel(body, title=detail.title, subtitle=detail.id))


def _advance(controller: BrowserController, pages: int) -> None:
    for _ in range(max(0, pages - 1)):
        if not controller.show_more().items:
            break


# ============================================================================
# Browsing Commands
# ============================================================================

@app.command(name="list")
@handle_catalog_errors
def list_books(
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (.json/.yaml)"),
    pages: int = typer.Option(1, "--pages", "-p", help="Number of pages to show"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Books per page"),
):
    """
    List the catalog page by page.

    Examples:
        bookconnect list
        bookconnect list books.json --pages 2
    """
    catalog = _open_catalog(catalog_path)
    controller = BrowserController(catalog, page_size=_page_size(catalog, page_size))
    controller.start()
    _advance(controller, pages)

    _print_update(controller, controller.snapshot(), "Books")


@app.command()
@handle_catalog_errors
def search(
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (.json/.yaml)"),
    title: str = typer.Option("", "--title", "-t", help="Case-insensitive title substring"),
    genre: str = typer.Option(ANY, "--genre", "-g", help="Genre id or name"),
    author: str = typer.Option(ANY, "--author", "-a", help="Author id or name"),
    pages: int = typer.Option(1, "--pages", "-p", help="Number of pages to show"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Books per page"),
):
    """
    Filter the catalog by title, genre and author.

    Examples:
        bookconnect search --title dune
        bookconnect search books.json --genre "Science Fiction" --author a1
    """
    catalog = _open_catalog(catalog_path)
    controller = BrowserController(catalog, page_size=_page_size(catalog, page_size))
    controller.submit_search({
        "title": title,
        "genre": _lookup_id(catalog.genres, genre),
        "author": _lookup_id(catalog.authors, author),
    })
    _advance(controller, pages)

    _print_update(controller, controller.snapshot(), f"Search Results ({len(controller.match_set)})")


@app.command()
@handle_catalog_errors
def show(
    book_id: str = typer.Argument(..., help="Book ID"),
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (.json/.yaml)"),
):
    """
    Show the details of a single book.

    Example:
        bookconnect show 760b3450-9c48-4fd2-a1d3-8b5d5a8f1b01
    """
    catalog = _open_catalog(catalog_path)
    controller = BrowserController(catalog)
    detail = controller.select(book_id)

    if detail is None:
        console.print(f"[yellow]Book not found: {book_id}[/yellow]")
        raise typer.Exit(code=1)

    _print_detail(detail)


@app.command()
@handle_catalog_errors
def options(
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (.json/.yaml)"),
):
    """List the genre and author filter options."""
    catalog = _open_catalog(catalog_path)
    controller = BrowserController(catalog)

    for title, choices in (("Genres", controller.genre_options()),
                           ("Authors", controller.author_options())):
        table = Table(title=title)
        table.add_column("Value", style="cyan")
        table.add_column("Name", style="green")
        for value, name in choices:
            table.add_row(value, name)
        console.print(table)


@app.command()
@handle_catalog_errors
def browse(
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (.json/.yaml)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Books per page"),
):
    """
    Browse the catalog interactively.

    Commands:
        more                 - Show the next page
        search               - Enter a new title/genre/author filter
        open <# or id>       - Show a book's details
        quit                 - Leave the browser
    """
    catalog = _open_catalog(catalog_path)
    controller = BrowserController(catalog, page_size=_page_size(catalog, page_size))
    _print_update(controller, controller.start(), "Books")

    while True:
        command = Prompt.ask("\n[bold cyan]bookconnect[/bold cyan]", default="more").strip()
        name, _, argument = command.partition(" ")

        if name in ("quit", "exit", "q"):
            break
        elif name == "more":
            update = controller.show_more()
            if not update.items:
                console.print("[dim]No more books.[/dim]")
            else:
                _print_update(controller, update, "Books")
        elif name == "search":
            title = Prompt.ask("Title", default="")
            genre = Prompt.ask("Genre", default=ANY)
            author = Prompt.ask("Author", default=ANY)
            update = controller.submit_search({
                "title": title,
                "genre": _lookup_id(catalog.genres, genre),
                "author": _lookup_id(catalog.authors, author),
            })
            _print_update(controller, update, f"Search Results ({len(controller.match_set)})")
        elif name == "open":
            identifier = argument.strip()
            ids = controller.view.ids
            if identifier.isdigit() and 1 <= int(identifier) <= len(ids):
                identifier = ids[int(identifier) - 1]
            detail = controller.select(identifier)
            if detail is None:
                console.print(f"[yellow]No book for '{identifier}'[/yellow]")
            else:
                _print_detail(detail)
        else:
            console.print("[yellow]Commands: more, search, open <# or id>, quit[/yellow]")


# ============================================================================
# Server and Configuration Commands
# ============================================================================

@app.command()
def serve(
    catalog_path: Optional[Path] = typer.Argument(None, help="Path to catalog (defaults from config)"),
    host: Optional[str] = typer.Option(None, "--host", help="Host to bind to (defaults from config)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind to (defaults from config)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Books per page"),
    no_open: bool = typer.Option(False, "--no-open", help="Don't auto-open browser")
):
    """
    Start the web interface.

    Configuration:
        Default server settings are loaded from ~/.config/bookconnect/config.json
        Command-line options override config file values.

    Examples:
        bookconnect serve
        bookconnect serve books.json --port 8080
    """
    from .config import load_config
    import webbrowser

    config = load_config()

    if catalog_path is None and config.catalog.default_path:
        catalog_path = Path(config.catalog.default_path)

    if catalog_path is not None and not catalog_path.exists():
        console.print(f"[red]Error: Catalog not found: {catalog_path}[/red]")
        raise typer.Exit(code=1)

    server_host = host if host is not None else config.server.host
    server_port = port if port is not None else config.server.port
    auto_open = config.server.auto_open_browser and not no_open

    try:
        import uvicorn
    except ImportError:
        console.print("[red]Error: uvicorn is not installed[/red]")
        console.print("[yellow]Install with: pip install uvicorn[/yellow]")
        raise typer.Exit(code=1)

    try:
        from .server import create_app

        app_instance = create_app(
            catalog_path,
            page_size=page_size,
            theme=config.browser.theme,
            default_page_size=config.browser.page_size,
        )

        console.print("[blue]Starting bookconnect server...[/blue]")
        console.print(f"[blue]Catalog: {catalog_path or 'bundled sample'}[/blue]")
        console.print(f"[green]Server running at http://{server_host}:{server_port}[/green]")
        console.print("[dim]Press Ctrl+C to stop[/dim]")

        if auto_open:
            # Use localhost for browser even if binding to 0.0.0.0
            browser_host = "localhost" if server_host == "0.0.0.0" else server_host
            url = f"http://{browser_host}:{server_port}"
            console.print(f"[dim]Opening browser to {url}...[/dim]")
            webbrowser.open(url)

        uvicorn.run(
            app_instance,
            host=server_host,
            port=server_port,
            log_level="info"
        )

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
    except Exception as e:
        logger.error(f"Error starting server: {e}", exc_info=True)
        console.print(f"[red]Error starting server: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    # Server settings
    set_server_host: Optional[str] = typer.Option(None, "--server-host", help="Set web server host"),
    set_server_port: Optional[int] = typer.Option(None, "--server-port", help="Set web server port"),
    set_auto_open: Optional[bool] = typer.Option(None, "--server-auto-open/--no-server-auto-open", help="Auto-open browser on server start"),
    # Browser settings
    set_page_size: Optional[int] = typer.Option(None, "--page-size", help="Set books per page"),
    set_theme: Optional[str] = typer.Option(None, "--theme", help="Set theme (auto, day, night)"),
    # Catalog settings
    set_catalog_path: Optional[str] = typer.Option(None, "--catalog-path", help="Set default catalog path"),
    # CLI settings
    set_verbose: Optional[bool] = typer.Option(None, "--cli-verbose/--no-cli-verbose", help="Enable verbose output by default"),
    set_color: Optional[bool] = typer.Option(None, "--cli-color/--no-cli-color", help="Enable colored output by default"),
):
    """
    View or edit bookconnect configuration.

    Configuration is stored at ~/.config/bookconnect/config.json
    (or ~/.bookconnect/config.json).

    Examples:
        bookconnect config --show
        bookconnect config --init
        bookconnect config --catalog-path ~/books.json --page-size 30
        bookconnect config --theme night --server-port 9000
    """
    from .config import ensure_config_exists, get_config_path, load_config, update_config

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    changes = []
    if set_server_host is not None:
        changes.append(f"Server host: {set_server_host}")
    if set_server_port is not None:
        changes.append(f"Server port: {set_server_port}")
    if set_auto_open is not None:
        changes.append(f"Server auto-open: {set_auto_open}")
    if set_page_size is not None:
        changes.append(f"Page size: {set_page_size}")
    if set_theme is not None:
        changes.append(f"Theme: {set_theme}")
    if set_catalog_path is not None:
        changes.append(f"Catalog path: {set_catalog_path}")
    if set_verbose is not None:
        changes.append(f"CLI verbose: {set_verbose}")
    if set_color is not None:
        changes.append(f"CLI color: {set_color}")

    if show or not changes:
        cfg = load_config()
        config_path = get_config_path()

        console.print("\n[bold]bookconnect Configuration[/bold]")
        console.print(f"[dim]Location: {config_path}[/dim]\n")

        console.print("[bold cyan]Catalog Settings:[/bold cyan]")
        console.print(f"  Default Path: {cfg.catalog.default_path or '[dim]bundled sample[/dim]'}")

        console.print("\n[bold cyan]Browser Settings:[/bold cyan]")
        console.print(f"  Page Size:   {cfg.browser.page_size}")
        console.print(f"  Theme:       {cfg.browser.theme}")

        console.print("\n[bold cyan]Server Settings:[/bold cyan]")
        console.print(f"  Host:        {cfg.server.host}")
        console.print(f"  Port:        {cfg.server.port}")
        console.print(f"  Auto-open:   {cfg.server.auto_open_browser}")

        console.print("\n[bold cyan]CLI Settings:[/bold cyan]")
        console.print(f"  Verbose:     {cfg.cli.verbose}")
        console.print(f"  Color:       {cfg.cli.color}")
        return

    console.print("[blue]Updating configuration:[/blue]")
    for change in changes:
        console.print(f"  • {change}")

    try:
        update_config(
            server_host=set_server_host,
            server_port=set_server_port,
            server_auto_open=set_auto_open,
            page_size=set_page_size,
            theme=set_theme,
            catalog_default_path=set_catalog_path,
            cli_verbose=set_verbose,
            cli_color=set_color,
        )
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print("[green]✓ Configuration updated![/green]")


if __name__ == "__main__":
    app()
