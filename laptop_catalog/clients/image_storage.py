"""Object storage for product images."""

import asyncio
import logging
import random
import time
from abc import ABC, abstractmethod
from pathlib import Path

from laptop_catalog.models import InlineImage

logger = logging.getLogger(__name__)


class ImageStorageError(Exception):
    """Custom exception for image upload/delete failures."""

    pass


def build_object_name(image: InlineImage, product_id: str) -> str:
    """Storage key for a new image: products/<id>/<epoch-ms>-<random>.<ext>."""
    timestamp_ms = int(time.time() * 1000)
    suffix = random.randint(0, 10**9)
    return f"products/{product_id}/{timestamp_ms}-{suffix}.{image.extension}"


class ImageStorage(ABC):
    """Upload-by-content and idempotent delete-by-reference."""

    @abstractmethod
    async def upload(self, image: InlineImage, product_id: str) -> str:
        """Store the image and return its hosted reference.

        Raises:
            ImageStorageError: If the upload fails.
        """

    @abstractmethod
    async def delete(self, reference: str) -> None:
        """Delete a hosted image. Missing objects are not an error.

        Raises:
            ImageStorageError: If the delete fails for any other reason.
        """

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "ImageStorage":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False


class LocalImageStorage(ImageStorage):
    """Images stored as files below a local directory.

    References are ``<url_prefix>/<object name>``; the API serves the
    directory under the same prefix.
    """

    def __init__(self, root_dir: str, url_prefix: str = "/uploads"):
        self._root = Path(root_dir).resolve()
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def root_dir(self) -> Path:
        return self._root

    @property
    def url_prefix(self) -> str:
        return self._url_prefix

    def _path_for(self, reference: str) -> Path | None:
        """Map a reference back to a file path, None if it is not ours."""
        prefix = f"{self._url_prefix}/"
        if not reference.startswith(prefix):
            return None
        path = (self._root / reference[len(prefix):]).resolve()
        if self._root not in path.parents:
            return None
        return path

    async def upload(self, image: InlineImage, product_id: str) -> str:
        object_name = build_object_name(image, product_id)
        path = self._root / object_name

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image.payload)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise ImageStorageError(f"Failed to store image {object_name}: {e}") from e

        logger.info(f"Stored image {object_name} ({len(image.payload)} bytes)")
        return f"{self._url_prefix}/{object_name}"

    async def delete(self, reference: str) -> None:
        path = self._path_for(reference)
        if path is None:
            logger.debug(f"Skipping delete of foreign image reference: {reference}")
            return

        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise ImageStorageError(f"Failed to delete image {reference}: {e}") from e

        logger.info(f"Deleted image {reference}")
