"""Decorators for bookconnect CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console

from .catalog import CatalogError

logger = logging.getLogger(__name__)
console = Console()


def handle_catalog_errors(func: Callable) -> Callable:
    """
    Decorator to handle common catalog operation errors.

    Centralizes error handling for:
    - FileNotFoundError: Catalog file doesn't exist
    - CatalogError: Catalog document is malformed
    - ValueError: Invalid arguments
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] Catalog or file not found: {e}")
            raise typer.Exit(code=1)
        except PermissionError as e:
            console.print(f"[bold red]Error:[/bold red] Permission denied: {e}")
            raise typer.Exit(code=1)
        except CatalogError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid catalog: {e}")
            raise typer.Exit(code=1)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper
