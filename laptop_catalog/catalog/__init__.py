"""Catalog logic: storefront filtering and image reconciliation."""

from laptop_catalog.catalog.filtering import (
    FilterState,
    featured_products,
    filter_products,
    max_price,
    new_arrivals,
)
from laptop_catalog.catalog.image_reconciliation import (
    ImageUploadError,
    ReconciliationResult,
    delete_images,
    images_to_delete,
    pending_uploads,
    reconcile,
)

__all__ = [
    "FilterState",
    "ImageUploadError",
    "ReconciliationResult",
    "delete_images",
    "featured_products",
    "filter_products",
    "images_to_delete",
    "max_price",
    "new_arrivals",
    "pending_uploads",
    "reconcile",
]
