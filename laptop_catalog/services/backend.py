"""Storage backend assembly.

Backend is selected via config storage.backend:
- "json": products.json + auth.json + local uploads directory
- "cosmosdb": Cosmos DB containers + Azure Blob Storage
"""

import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass

from laptop_catalog.clients import BlobImageStorage, CosmosDBClient, ImageStorage, LocalImageStorage
from laptop_catalog.config import AppConfig
from laptop_catalog.services.credential_store import (
    CosmosCredentialStore,
    CredentialStore,
    JsonCredentialStore,
)
from laptop_catalog.services.product_repository import (
    CosmosProductRepository,
    JsonProductRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("json", "cosmosdb")


@dataclass
class CatalogBackend:
    """The three store collaborators used by the services."""

    products: ProductRepository
    images: ImageStorage
    credentials: CredentialStore

    async def close(self) -> None:
        await self.products.close()
        await self.images.close()
        await self.credentials.close()


def _json_backend(config: AppConfig) -> CatalogBackend:
    storage = config.storage
    return CatalogBackend(
        products=JsonProductRepository(storage.products_path),
        images=LocalImageStorage(storage.uploads_dir, storage.uploads_url_prefix),
        credentials=JsonCredentialStore(storage.credentials_path),
    )


async def _cosmosdb_backend(config: AppConfig) -> CatalogBackend:
    cosmos = config.cosmosdb
    blob = config.blob_storage

    products_client = CosmosDBClient(
        endpoint=cosmos.endpoint,
        key=cosmos.key,
        database_name=cosmos.database_name,
        container_name=cosmos.products_container,
        partition_key_path=cosmos.partition_key_path,
    )
    settings_client = CosmosDBClient(
        endpoint=cosmos.endpoint,
        key=cosmos.key,
        database_name=cosmos.database_name,
        container_name=cosmos.settings_container,
        partition_key_path="/id",
    )
    image_storage = BlobImageStorage(blob.connection_string, blob.container_name)

    # Clients already connected are closed again if a later connect fails
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(products_client)
        await stack.enter_async_context(settings_client)
        await stack.enter_async_context(image_storage)
        stack.pop_all()

    return CatalogBackend(
        products=CosmosProductRepository(products_client),
        images=image_storage,
        credentials=CosmosCredentialStore(settings_client),
    )


async def open_backend(config: AppConfig) -> CatalogBackend:
    """
    Build and connect the configured storage backend.

    Raises:
        ValueError: If storage.backend is not a supported backend.
    """
    backend = config.storage.backend
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unknown storage backend '{backend}'. Expected one of: {', '.join(SUPPORTED_BACKENDS)}"
        )

    logger.info(f"Opening '{backend}' storage backend")
    if backend == "cosmosdb":
        return await _cosmosdb_backend(config)
    return _json_backend(config)
