"""Tests for configuration loading and backend selection.

These tests verify:
- YAML config selection via APP_ENV
- Defaults for optional sections
- Cosmos DB / Blob Storage secrets required only for the cosmosdb backend
- Unknown backends are rejected when the backend is opened
"""

import pytest
import yaml

from laptop_catalog.config import configuration
from laptop_catalog.config.configuration import ConfigurationError, get_environment, load_config
from laptop_catalog.services import open_backend
from laptop_catalog.services import backend as backend_module
from laptop_catalog.services.backend import CatalogBackend
from laptop_catalog.services.product_repository import JsonProductRepository


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config loader at a temporary directory."""
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    configuration.reset_config()
    yield tmp_path
    configuration.reset_config()


def write_config(directory, content, filename="config.yaml"):
    with open(directory / filename, "w") as f:
        yaml.dump(content, f)


class TestLoadConfig:
    """Test load_config()."""

    def test_json_backend_defaults(self, config_dir):
        write_config(config_dir, {"storage": {"backend": "json"}})

        config = load_config()

        assert config.storage.backend == "json"
        assert config.storage.products_path == "data/products.json"
        assert config.storage.uploads_url_prefix == "/uploads"
        assert config.catalog.max_images == 5
        assert config.catalog.default_price_ceiling == 1_000_000
        assert config.logging.level == "INFO"
        assert config.cosmosdb is None
        assert config.blob_storage is None

    def test_app_env_selects_file(self, config_dir, monkeypatch):
        write_config(config_dir, {"logging": {"level": "DEBUG"}}, "config_dev.yaml")
        monkeypatch.setenv("APP_ENV", "dev")

        assert load_config().logging.level == "DEBUG"
        assert get_environment() == "dev"

    def test_missing_file_raises(self, config_dir, monkeypatch):
        monkeypatch.setenv("APP_ENV", "test")

        with pytest.raises(ConfigurationError, match="config_test.yaml"):
            load_config()

    def test_port_env_overrides_yaml(self, config_dir, monkeypatch):
        write_config(config_dir, {"server": {"port": 9000}})
        monkeypatch.setenv("PORT", "8123")

        assert load_config().server.port == 8123

    def test_get_config_is_cached(self, config_dir):
        write_config(config_dir, {})

        assert configuration.get_config() is configuration.get_config()


class TestBackendToggle:
    """Test backend toggle functionality."""

    def test_cosmosdb_without_credentials_raises(self, config_dir, monkeypatch):
        monkeypatch.delenv("COSMOSDB_ENDPOINT", raising=False)
        monkeypatch.delenv("COSMOSDB_KEY", raising=False)
        write_config(config_dir, {"storage": {"backend": "cosmosdb"}})

        with pytest.raises(ConfigurationError, match="COSMOSDB_ENDPOINT"):
            load_config()

    def test_cosmosdb_requires_storage_connection_string(self, config_dir, monkeypatch):
        monkeypatch.setenv("COSMOSDB_ENDPOINT", "https://test.documents.azure.com:443/")
        monkeypatch.setenv("COSMOSDB_KEY", "test-key")
        monkeypatch.delenv("AZURE_STORAGE_CONNECTION_STRING", raising=False)
        write_config(config_dir, {"storage": {"backend": "cosmosdb"}})

        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_CONNECTION_STRING"):
            load_config()

    def test_cosmosdb_config_sections(self, config_dir, monkeypatch):
        monkeypatch.setenv("COSMOSDB_ENDPOINT", "https://test.documents.azure.com:443/")
        monkeypatch.setenv("COSMOSDB_KEY", "test-key")
        monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
        write_config(config_dir, {
            "storage": {"backend": "cosmosdb"},
            "cosmosdb": {"database_name": "shop", "products_container": "laptops"},
            "blob_storage": {"container_name": "laptop-images"},
        })

        config = load_config()

        assert config.cosmosdb.database_name == "shop"
        assert config.cosmosdb.products_container == "laptops"
        assert config.cosmosdb.settings_container == "settings"
        assert config.cosmosdb.partition_key_path == "/id"
        assert config.blob_storage.container_name == "laptop-images"

    @pytest.mark.asyncio
    async def test_invalid_backend_raises_error(self, config_dir):
        write_config(config_dir, {"storage": {"backend": "invalid_backend"}})

        with pytest.raises(ValueError, match="Unknown storage backend"):
            await open_backend(load_config())

    @pytest.mark.asyncio
    async def test_json_backend_opens(self, config_dir):
        write_config(config_dir, {"storage": {"backend": "json", "json": {
            "products_path": str(config_dir / "products.json"),
            "credentials_path": str(config_dir / "auth.json"),
            "uploads_dir": str(config_dir / "uploads"),
        }}})

        backend = await open_backend(load_config())

        assert isinstance(backend, CatalogBackend)
        assert isinstance(backend.products, JsonProductRepository)
        assert await backend.products.list_products() == []
        await backend.close()

    @pytest.mark.asyncio
    async def test_failed_connect_closes_opened_clients(self, config_dir, monkeypatch):
        """A Blob Storage connect failure closes the Cosmos clients already opened."""
        monkeypatch.setenv("COSMOSDB_ENDPOINT", "https://test.documents.azure.com:443/")
        monkeypatch.setenv("COSMOSDB_KEY", "test-key")
        monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
        write_config(config_dir, {"storage": {"backend": "cosmosdb"}})
        events = []

        class RecordingClient:
            def __init__(self, *args, container_name="blob", **kwargs):
                self.name = container_name

            async def __aenter__(self):
                events.append(f"open {self.name}")
                return self

            async def __aexit__(self, exc_type, exc_val, exc_tb):
                events.append(f"close {self.name}")
                return False

        class UnreachableBlobStorage(RecordingClient):
            async def __aenter__(self):
                raise ConnectionError("storage account unreachable")

        monkeypatch.setattr(backend_module, "CosmosDBClient", RecordingClient)
        monkeypatch.setattr(backend_module, "BlobImageStorage", UnreachableBlobStorage)

        with pytest.raises(ConnectionError):
            await open_backend(load_config())

        assert events == ["open products", "open settings", "close settings", "close products"]
