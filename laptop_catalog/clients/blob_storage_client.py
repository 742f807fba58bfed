"""Azure Blob Storage client for product images."""

import logging
from typing import Optional
from urllib.parse import unquote

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from laptop_catalog.clients.image_storage import (
    ImageStorage,
    ImageStorageError,
    build_object_name,
)
from laptop_catalog.models import InlineImage

logger = logging.getLogger(__name__)


class BlobImageStorage(ImageStorage):
    """Async Blob Storage client with connection management.

    Images are public blobs; the blob URL is the hosted reference.
    Supports async context manager pattern for proper resource cleanup.
    """

    def __init__(self, connection_string: str, container_name: str):
        """Initialize the Blob Storage client.

        Args:
            connection_string: Storage account connection string
            container_name: Container holding the product images
        """
        self._connection_string = connection_string
        self._container_name = container_name

        self._client: Optional[BlobServiceClient] = None
        self._container: Optional[ContainerClient] = None

    async def connect(self) -> None:
        """Open the service client and ensure the container exists."""
        self._client = BlobServiceClient.from_connection_string(self._connection_string)
        await self._client.__aenter__()

        self._container = self._client.get_container_client(self._container_name)
        try:
            await self._container.create_container(public_access="blob")
            logger.info(f"Created blob container {self._container_name}")
        except ResourceExistsError:
            pass

    async def close(self) -> None:
        """Close the Blob Storage connection."""
        if self._client:
            await self._client.close()
            self._client = None
            self._container = None

    async def __aenter__(self) -> "BlobImageStorage":
        await self.connect()
        return self

    def _require_container(self) -> ContainerClient:
        if self._container is None:
            raise RuntimeError("Blob Storage client not connected. Call connect() first.")
        return self._container

    def _blob_name_for(self, reference: str) -> Optional[str]:
        """Blob name for a reference in our container, None otherwise."""
        prefix = f"{self._require_container().url.rstrip('/')}/"
        if not reference.startswith(prefix):
            return None
        return unquote(reference[len(prefix):].split("?", 1)[0])

    async def upload(self, image: InlineImage, product_id: str) -> str:
        container = self._require_container()
        blob_name = build_object_name(image, product_id)
        blob_client = container.get_blob_client(blob_name)

        try:
            await blob_client.upload_blob(
                image.payload,
                overwrite=True,
                content_settings=ContentSettings(content_type=image.mime_type),
            )
        except AzureError as e:
            raise ImageStorageError(f"Failed to upload blob {blob_name}: {e}") from e

        logger.info(f"Uploaded blob {blob_name} ({len(image.payload)} bytes)")
        return blob_client.url

    async def delete(self, reference: str) -> None:
        container = self._require_container()
        blob_name = self._blob_name_for(reference)
        if blob_name is None:
            logger.debug(f"Skipping delete of foreign image reference: {reference}")
            return

        try:
            await container.delete_blob(blob_name)
        except ResourceNotFoundError:
            logger.debug(f"Blob already deleted: {blob_name}")
            return
        except AzureError as e:
            raise ImageStorageError(f"Failed to delete blob {blob_name}: {e}") from e

        logger.info(f"Deleted blob {blob_name}")
