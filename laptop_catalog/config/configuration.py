"""Configuration module for the laptop catalog.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (JSON file backend, local development)
- APP_ENV=test → config_test.yaml (Cosmos DB + Blob Storage backend)
- Default      → config.yaml

Secrets (Cosmos DB key, storage connection string) are loaded from .env.
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


DEFAULT_PRICE_CEILING = 1_000_000
DEFAULT_MAX_IMAGES = 5


def _get_project_root() -> Path:
    """Get the directory holding the config files.

    CONFIG_DIR overrides the default, which is the project root
    (two levels up from laptop_catalog/config/).
    """
    config_dir = os.environ.get("CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


@dataclass(frozen=True)
class StorageConfig:
    """Persistence backend selection and JSON backend paths."""
    backend: str  # "json" or "cosmosdb"
    products_path: str
    credentials_path: str
    uploads_dir: str
    uploads_url_prefix: str


@dataclass(frozen=True)
class CosmosDBConfig:
    """Azure Cosmos DB configuration for products and settings."""
    endpoint: str
    key: str
    database_name: str
    products_container: str
    settings_container: str
    partition_key_path: str


@dataclass(frozen=True)
class BlobStorageConfig:
    """Azure Blob Storage configuration for product images."""
    connection_string: str
    container_name: str


@dataclass(frozen=True)
class CatalogConfig:
    """Catalog rules."""
    max_images: int
    default_price_ceiling: float


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    storage: StorageConfig
    catalog: CatalogConfig
    server: ServerConfig
    logging: LoggingConfig
    cosmosdb: Optional[CosmosDBConfig]  # Only required when storage.backend == "cosmosdb"
    blob_storage: Optional[BlobStorageConfig]  # Same as above


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the YAML config file for non-sensitive settings and .env
    for secrets. Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # Build Storage config
    storage_section = yaml_config.get("storage", {})
    json_section = storage_section.get("json", {})
    storage_backend = storage_section.get("backend", "json")

    storage_config = StorageConfig(
        backend=storage_backend,
        products_path=json_section.get("products_path", "data/products.json"),
        credentials_path=json_section.get("credentials_path", "data/auth.json"),
        uploads_dir=json_section.get("uploads_dir", "data/uploads"),
        uploads_url_prefix=json_section.get("uploads_url_prefix", "/uploads"),
    )

    # Build Catalog config
    catalog_section = yaml_config.get("catalog", {})

    catalog_config = CatalogConfig(
        max_images=int(catalog_section.get("max_images", DEFAULT_MAX_IMAGES)),
        default_price_ceiling=float(
            catalog_section.get("default_price_ceiling", DEFAULT_PRICE_CEILING)
        ),
    )

    # Build Server config
    server_section = yaml_config.get("server", {})

    server_config = ServerConfig(
        host=server_section.get("host", "0.0.0.0"),
        port=int(os.environ.get("PORT", server_section.get("port", 8000))),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    # Build CosmosDB and Blob Storage config (only if backend is cosmosdb)
    cosmosdb_config: Optional[CosmosDBConfig] = None
    blob_storage_config: Optional[BlobStorageConfig] = None
    if storage_backend == "cosmosdb":
        cosmosdb_section = yaml_config.get("cosmosdb", {})
        cosmosdb_config = CosmosDBConfig(
            endpoint=_get_required_env("COSMOSDB_ENDPOINT"),
            key=_get_required_env("COSMOSDB_KEY"),
            database_name=cosmosdb_section.get("database_name", "laptop_catalog"),
            products_container=cosmosdb_section.get("products_container", "products"),
            settings_container=cosmosdb_section.get("settings_container", "settings"),
            partition_key_path=cosmosdb_section.get("partition_key_path", "/id"),
        )

        blob_section = yaml_config.get("blob_storage", {})
        blob_storage_config = BlobStorageConfig(
            connection_string=_get_required_env("AZURE_STORAGE_CONNECTION_STRING"),
            container_name=blob_section.get("container_name", "product-images"),
        )

    return AppConfig(
        storage=storage_config,
        catalog=catalog_config,
        server=server_config,
        logging=logging_config,
        cosmosdb=cosmosdb_config,
        blob_storage=blob_storage_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
