"""
Configuration management for bookconnect.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/bookconnect/config.json
- Fallback: ~/.bookconnect/config.json
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

THEME_CHOICES = ("auto", "day", "night")


@dataclass
class ServerConfig:
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    auto_open_browser: bool = False


@dataclass
class BrowserConfig:
    """List browsing settings."""
    page_size: int = 36
    theme: str = "auto"


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class CatalogConfig:
    """Catalog-related settings."""
    default_path: Optional[str] = None


@dataclass
class BookConnectConfig:
    """Main bookconnect configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "server": asdict(self.server),
            "browser": asdict(self.browser),
            "cli": asdict(self.cli),
            "catalog": asdict(self.catalog),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BookConnectConfig':
        """Create from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            browser=BrowserConfig(**data.get("browser", {})),
            cli=CLIConfig(**data.get("cli", {})),
            catalog=CatalogConfig(**data.get("catalog", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    1. ~/.config/bookconnect/config.json when ~/.config exists
    2. Fallback: ~/.bookconnect/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "bookconnect"
    else:
        config_dir = Path.home() / ".bookconnect"

    return config_dir / "config.json"


def load_config() -> BookConnectConfig:
    """
    Load configuration from file.

    Returns:
        BookConnectConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return BookConnectConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return BookConnectConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError, AttributeError) as e:
        print(f"Warning: Failed to load config from {config_path}: {e}")
        print("Using default configuration")
        return BookConnectConfig()


def save_config(config: BookConnectConfig) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    print(f"Configuration saved to {config_path}")


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(BookConnectConfig())
        print(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    # Server settings
    server_host: Optional[str] = None,
    server_port: Optional[int] = None,
    server_auto_open: Optional[bool] = None,
    # Browser settings
    page_size: Optional[int] = None,
    theme: Optional[str] = None,
    # CLI settings
    cli_verbose: Optional[bool] = None,
    cli_color: Optional[bool] = None,
    # Catalog settings
    catalog_default_path: Optional[str] = None,
) -> None:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Raises:
        ValueError: If page_size is below 1 or theme is not a known choice
    """
    if page_size is not None and page_size < 1:
        raise ValueError(f"page size must be at least 1, got {page_size}")
    if theme is not None and theme not in THEME_CHOICES:
        raise ValueError(f"theme must be one of {', '.join(THEME_CHOICES)}, got '{theme}'")

    config = load_config()

    if server_host is not None:
        config.server.host = server_host
    if server_port is not None:
        config.server.port = server_port
    if server_auto_open is not None:
        config.server.auto_open_browser = server_auto_open

    if page_size is not None:
        config.browser.page_size = page_size
    if theme is not None:
        config.browser.theme = theme

    if cli_verbose is not None:
        config.cli.verbose = cli_verbose
    if cli_color is not None:
        config.cli.color = cli_color

    if catalog_default_path is not None:
        config.catalog.default_path = catalog_default_path

    save_config(config)
