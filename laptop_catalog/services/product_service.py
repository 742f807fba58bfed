"""Product create/update/delete with image handling.

Writes follow one order:
1. Validate the draft (image count).
2. Upload new images (all must succeed).
3. Write the product record.
4. Remove images the product no longer references, best-effort.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from azure.core.exceptions import AzureError

from laptop_catalog.catalog import ImageUploadError, delete_images, reconcile
from laptop_catalog.clients import ImageStorage
from laptop_catalog.config.configuration import DEFAULT_MAX_IMAGES
from laptop_catalog.models import Product, ProductDraft
from laptop_catalog.services.product_repository import (
    ProductNotFoundError,
    ProductRepository,
    ProductStoreError,
)

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to save product to the database."
UPDATE_FAILED_MESSAGE = "Failed to update product in the database."
DELETE_FAILED_MESSAGE = "Failed to delete product."


class ProductValidationError(ValueError):
    """Raised when a draft breaks a catalog rule."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ProductPersistenceError(Exception):
    """Raised when a product write is aborted. Nothing was persisted."""

    pass


def _new_product_id() -> str:
    return uuid.uuid4().hex


class ProductService:
    """Admin operations on product listings."""

    def __init__(
        self,
        repository: ProductRepository,
        image_storage: ImageStorage,
        max_images: int = DEFAULT_MAX_IMAGES,
    ):
        self._repository = repository
        self._image_storage = image_storage
        self._max_images = max_images

    def _check_image_count(self, draft: ProductDraft) -> None:
        if not draft.images:
            raise ProductValidationError("images", "At least one image is required")
        if len(draft.images) > self._max_images:
            raise ProductValidationError(
                "images", f"You can upload a maximum of {self._max_images} images"
            )

    async def list_products(self) -> List[Product]:
        return await self._repository.list_products()

    async def get_product(self, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self._repository.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def create_product(self, draft: ProductDraft) -> Product:
        """
        Upload the draft's images and persist a new product.

        Raises:
            ProductValidationError: If the image count is out of range.
            ProductPersistenceError: If an upload or the record write fails.
        """
        self._check_image_count(draft)
        product_id = _new_product_id()

        try:
            result = await reconcile([], draft.images, self._image_storage, product_id)
        except ImageUploadError as e:
            logger.exception(f"Failed to add product: {e}")
            raise ProductPersistenceError(CREATE_FAILED_MESSAGE) from e

        product = Product(
            id=product_id,
            name=draft.name,
            brand=draft.brand,
            price=draft.price,
            condition=draft.condition,
            images=result.final_refs,
            specs=draft.specs,
            description=draft.description,
            featured=draft.featured,
            new_arrival=draft.new_arrival,
            created_at=datetime.now(timezone.utc),
        )

        try:
            created = await self._repository.create(product)
        except (ProductStoreError, AzureError) as e:
            logger.exception(f"Failed to add product: {e}")
            # The record was never written, so the fresh uploads are orphans
            await delete_images(self._image_storage, result.uploaded)
            raise ProductPersistenceError(CREATE_FAILED_MESSAGE) from e

        return created

    async def update_product(self, product_id: str, draft: ProductDraft) -> Product:
        """
        Reconcile images and replace an existing product.

        Images dropped from the product are deleted after the record write;
        failures there are logged only.

        Raises:
            ProductValidationError: If the image count is out of range.
            ProductNotFoundError: If the product does not exist.
            ProductPersistenceError: If an upload or the record write fails.
        """
        self._check_image_count(draft)

        try:
            existing = await self._repository.get(product_id)
        except (ProductStoreError, AzureError) as e:
            logger.exception(f"Failed to update product: {e}")
            raise ProductPersistenceError(UPDATE_FAILED_MESSAGE) from e
        if existing is None:
            raise ProductNotFoundError(product_id)

        try:
            result = await reconcile(existing.images, draft.images, self._image_storage, product_id)
        except ImageUploadError as e:
            logger.exception(f"Failed to update product: {e}")
            raise ProductPersistenceError(UPDATE_FAILED_MESSAGE) from e

        updated = existing.with_changes(
            name=draft.name,
            brand=draft.brand,
            price=draft.price,
            condition=draft.condition,
            images=result.final_refs,
            specs=draft.specs,
            description=draft.description,
            featured=draft.featured,
            new_arrival=draft.new_arrival,
        )

        try:
            saved = await self._repository.update(updated)
        except ProductNotFoundError:
            # Deleted concurrently
            await delete_images(self._image_storage, result.uploaded)
            raise
        except (ProductStoreError, AzureError) as e:
            logger.exception(f"Failed to update product: {e}")
            await delete_images(self._image_storage, result.uploaded)
            raise ProductPersistenceError(UPDATE_FAILED_MESSAGE) from e

        await delete_images(self._image_storage, result.to_delete)
        return saved

    async def delete_product(self, product_id: str) -> Product:
        """
        Delete a product and then its images, best-effort.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ProductPersistenceError: If the record cannot be deleted.
        """
        try:
            existing = await self._repository.get(product_id)
            if existing is None:
                raise ProductNotFoundError(product_id)
            deleted = await self._repository.delete(product_id)
        except (ProductStoreError, AzureError) as e:
            logger.exception(f"Failed to delete product: {e}")
            raise ProductPersistenceError(DELETE_FAILED_MESSAGE) from e

        if not deleted:
            raise ProductNotFoundError(product_id)

        await delete_images(self._image_storage, existing.images)
        return existing
