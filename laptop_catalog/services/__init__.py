"""Catalog services and store collaborators."""

from laptop_catalog.services.backend import CatalogBackend, open_backend
from laptop_catalog.services.credential_service import (
    AuthenticationError,
    CredentialService,
    CredentialValidationError,
)
from laptop_catalog.services.credential_store import (
    CosmosCredentialStore,
    CredentialStore,
    CredentialStoreError,
    JsonCredentialStore,
)
from laptop_catalog.services.product_repository import (
    CosmosProductRepository,
    JsonProductRepository,
    ProductNotFoundError,
    ProductRepository,
    ProductStoreError,
)
from laptop_catalog.services.product_service import (
    ProductPersistenceError,
    ProductService,
    ProductValidationError,
)

__all__ = [
    "AuthenticationError",
    "CatalogBackend",
    "CosmosCredentialStore",
    "CosmosProductRepository",
    "CredentialService",
    "CredentialStore",
    "CredentialStoreError",
    "CredentialValidationError",
    "JsonCredentialStore",
    "JsonProductRepository",
    "ProductNotFoundError",
    "ProductPersistenceError",
    "ProductRepository",
    "ProductService",
    "ProductStoreError",
    "ProductValidationError",
    "open_backend",
]
