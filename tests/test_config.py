"""
Tests for configuration and the CLI error decorator.
"""

import json
from unittest.mock import patch

import pytest
import typer

from bookconnect import config
from bookconnect.catalog import CatalogError
from bookconnect.decorators import handle_catalog_errors


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "bookconnect" / "config.json"
    with patch.object(config, "get_config_path", return_value=path):
        yield path


class TestConfigDataclasses:

    def test_default_values(self):
        cfg = config.BookConnectConfig()
        assert cfg.browser.page_size == 36
        assert cfg.browser.theme == "auto"
        assert cfg.server.port == 8000
        assert cfg.catalog.default_path is None

    def test_round_trip_serialization(self):
        original = config.BookConnectConfig()
        original.browser.page_size = 30
        original.catalog.default_path = "/tmp/books.json"

        restored = config.BookConnectConfig.from_dict(original.to_dict())

        assert restored == original

    def test_from_dict_fills_missing_sections(self):
        cfg = config.BookConnectConfig.from_dict({"browser": {"page_size": 12}})
        assert cfg.browser.page_size == 12
        assert cfg.server == config.ServerConfig()


class TestConfigFile:

    def test_config_path_in_user_directory(self):
        path = config.get_config_path()
        assert path.name == "config.json"
        assert "bookconnect" in str(path)

    def test_returns_defaults_when_file_missing(self, config_path):
        assert config.load_config() == config.BookConnectConfig()

    def test_save_then_load(self, config_path):
        cfg = config.BookConnectConfig()
        cfg.server.port = 9000
        config.save_config(cfg)

        assert config_path.exists()
        assert json.loads(config_path.read_text())["server"]["port"] == 9000
        assert config.load_config().server.port == 9000

    def test_handles_invalid_json_gracefully(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")
        assert config.load_config() == config.BookConnectConfig()

    def test_handles_unknown_keys_gracefully(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"browser": {"rows": 3}}))
        assert config.load_config() == config.BookConnectConfig()

    def test_handles_non_mapping_config_gracefully(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps(["browser", "server"]))
        assert config.load_config() == config.BookConnectConfig()

    def test_ensure_config_exists(self, config_path):
        assert config.ensure_config_exists() == config_path
        assert config_path.exists()


class TestUpdateConfig:

    def test_updates_only_given_fields(self, config_path):
        config.update_config(page_size=30, theme="night")
        cfg = config.load_config()

        assert cfg.browser.page_size == 30
        assert cfg.browser.theme == "night"
        assert cfg.server.port == 8000

    def test_rejects_invalid_page_size(self, config_path):
        with pytest.raises(ValueError):
            config.update_config(page_size=0)

    def test_rejects_unknown_theme(self, config_path):
        with pytest.raises(ValueError):
            config.update_config(theme="sepia")


class TestHandleCatalogErrors:

    def test_passes_through_successful_calls(self):
        @handle_catalog_errors
        def ok(x):
            return x * 2

        assert ok(21) == 42

    def test_preserves_function_name(self):
        @handle_catalog_errors
        def my_command():
            pass

        assert my_command.__name__ == "my_command"

    @pytest.mark.parametrize("error, code", [
        (FileNotFoundError("books.json"), 1),
        (CatalogError("Duplicate book id"), 1),
        (ValueError("bad"), 1),
        (RuntimeError("boom"), 1),
        (KeyboardInterrupt(), 130),
    ])
    def test_converts_errors_to_exit_codes(self, error, code):
        @handle_catalog_errors
        def failing():
            raise error

        with pytest.raises(typer.Exit) as exc_info:
            failing()
        assert exc_info.value.exit_code == code

    def test_exit_passes_through(self):
        @handle_catalog_errors
        def exiting():
            raise typer.Exit(code=3)

        with pytest.raises(typer.Exit) as exc_info:
            exiting()
        assert exc_info.value.exit_code == 3
