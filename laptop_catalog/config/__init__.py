"""Configuration module."""

from laptop_catalog.config.configuration import (
    DEFAULT_MAX_IMAGES,
    DEFAULT_PRICE_CEILING,
    AppConfig,
    BlobStorageConfig,
    CatalogConfig,
    ConfigurationError,
    CosmosDBConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "DEFAULT_MAX_IMAGES",
    "DEFAULT_PRICE_CEILING",
    "AppConfig",
    "BlobStorageConfig",
    "CatalogConfig",
    "ConfigurationError",
    "CosmosDBConfig",
    "LoggingConfig",
    "ServerConfig",
    "StorageConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
