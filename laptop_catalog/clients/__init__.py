"""Client modules for external services."""

from laptop_catalog.clients.blob_storage_client import BlobImageStorage
from laptop_catalog.clients.cosmosdb_client import CosmosDBClient, strip_system_properties
from laptop_catalog.clients.image_storage import (
    ImageStorage,
    ImageStorageError,
    LocalImageStorage,
    build_object_name,
)
from laptop_catalog.clients.json_file_client import JsonFileClient

__all__ = [
    "BlobImageStorage",
    "CosmosDBClient",
    "ImageStorage",
    "ImageStorageError",
    "JsonFileClient",
    "LocalImageStorage",
    "build_object_name",
    "strip_system_properties",
]
