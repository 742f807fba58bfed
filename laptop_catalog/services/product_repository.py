"""Product record stores.

Two interchangeable backends:
- JsonProductRepository: a single JSON list file (local development)
- CosmosProductRepository: an Azure Cosmos DB container
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from laptop_catalog.clients import CosmosDBClient, JsonFileClient
from laptop_catalog.models import Product

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Raised when a referenced product does not exist."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ProductStoreError(Exception):
    """Raised when the product store cannot be read or written."""

    pass


def _newest_first(products: List[Product]) -> List[Product]:
    return sorted(products, key=lambda product: product.created_at, reverse=True)


class ProductRepository(ABC):
    """Record store keyed by product id."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Persist a new product."""

    @abstractmethod
    async def get(self, product_id: str) -> Optional[Product]:
        """Point read, None when the product does not exist."""

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Replace a stored product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        """Delete a product. Returns False if it did not exist."""

    @abstractmethod
    async def list_products(self) -> List[Product]:
        """All products, newest first."""

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "ProductRepository":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False


class JsonProductRepository(ProductRepository):
    """Products stored as one JSON list in a file.

    Writes hold a lock for the whole load-modify-save cycle so concurrent
    requests on different products do not overwrite each other.
    """

    def __init__(self, path: str):
        """Initialize the repository.

        Args:
            path: Path to the products JSON file. Created as ``[]`` if missing.
        """
        self._file = JsonFileClient(path, default_factory=list)
        self._write_lock = asyncio.Lock()

    async def _load(self) -> List[Product]:
        try:
            data = await self._file.read()
            return [Product.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise ProductStoreError(f"Failed to read {self._file.path}: {e}") from e

    async def _save(self, products: List[Product]) -> None:
        try:
            await self._file.write([product.to_dict() for product in products])
        except (OSError, TypeError, ValueError) as e:
            raise ProductStoreError(f"Failed to write {self._file.path}: {e}") from e

    async def create(self, product: Product) -> Product:
        async with self._write_lock:
            products = await self._load()
            products.append(product)
            await self._save(products)
        logger.info(f"Created product {product.id} in {self._file.path}")
        return product

    async def get(self, product_id: str) -> Optional[Product]:
        for product in await self._load():
            if product.id == product_id:
                return product
        return None

    async def update(self, product: Product) -> Product:
        async with self._write_lock:
            products = await self._load()
            for index, stored in enumerate(products):
                if stored.id == product.id:
                    products[index] = product
                    await self._save(products)
                    logger.info(f"Updated product {product.id} in {self._file.path}")
                    return product
        raise ProductNotFoundError(product.id)

    async def delete(self, product_id: str) -> bool:
        async with self._write_lock:
            products = await self._load()
            remaining = [product for product in products if product.id != product_id]
            if len(remaining) == len(products):
                return False
            await self._save(remaining)
        logger.info(f"Deleted product {product_id} from {self._file.path}")
        return True

    async def list_products(self) -> List[Product]:
        try:
            return _newest_first(await self._load())
        except ProductStoreError as e:
            # Storefront reads degrade to an empty catalog
            logger.error(f"Error reading products: {e}")
            return []


LIST_PRODUCTS_QUERY = "SELECT * FROM c ORDER BY c.createdAt DESC"


class CosmosProductRepository(ProductRepository):
    """Products stored as documents in a Cosmos DB container.

    The container is partitioned by ``/id``.
    """

    def __init__(self, client: CosmosDBClient):
        self._client = client

    async def create(self, product: Product) -> Product:
        item = await self._client.create_item(product.to_dict())
        logger.info(f"Created product {product.id} in Cosmos DB")
        return Product.from_dict(item)

    async def get(self, product_id: str) -> Optional[Product]:
        try:
            item = await self._client.read_item(product_id, partition_key=product_id)
        except CosmosResourceNotFoundError:
            return None
        return Product.from_dict(item)

    async def update(self, product: Product) -> Product:
        try:
            item = await self._client.replace_item(product.id, product.to_dict())
        except CosmosResourceNotFoundError as e:
            raise ProductNotFoundError(product.id) from e
        logger.info(f"Updated product {product.id} in Cosmos DB")
        return Product.from_dict(item)

    async def delete(self, product_id: str) -> bool:
        try:
            await self._client.delete_item(product_id, partition_key=product_id)
        except CosmosResourceNotFoundError:
            return False
        logger.info(f"Deleted product {product_id} from Cosmos DB")
        return True

    async def list_products(self) -> List[Product]:
        try:
            items = await self._client.query_items(LIST_PRODUCTS_QUERY)
        except CosmosHttpResponseError as e:
            logger.error(f"Error fetching products from Cosmos DB: {e}")
            return []
        return [Product.from_dict(item) for item in items]

    async def close(self) -> None:
        await self._client.close()
