"""Data models module."""

from laptop_catalog.models.credentials import Credentials
from laptop_catalog.models.image import (
    HostedImage,
    ImageRef,
    InlineImage,
    InvalidImageError,
    parse_image,
)
from laptop_catalog.models.product import (
    CONDITIONS,
    Condition,
    Product,
    ProductDraft,
    ProductSpecs,
)

__all__ = [
    "CONDITIONS",
    "Condition",
    "Credentials",
    "HostedImage",
    "ImageRef",
    "InlineImage",
    "InvalidImageError",
    "Product",
    "ProductDraft",
    "ProductSpecs",
    "parse_image",
]
