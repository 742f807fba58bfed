"""Shared fixtures and fakes for the catalog tests."""

import base64
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from laptop_catalog.clients import ImageStorage, ImageStorageError
from laptop_catalog.models import InlineImage, Product, ProductSpecs

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png"
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def data_uri(payload: bytes = PNG_BYTES, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def make_product(
    product_id: str,
    brand: str = "Dell",
    price: float = 1000,
    condition: str = "New",
    processor: str = "Intel Core i5-1235U",
    ram: str = "8GB DDR4",
    images: list[str] | None = None,
    featured: bool = False,
    new_arrival: bool = False,
    created_at: datetime | None = None,
) -> Product:
    return Product(
        id=product_id,
        name=f"{brand} {product_id}",
        brand=brand,
        price=price,
        condition=condition,
        images=images if images is not None else [f"https://images.test/{product_id}/1.png"],
        specs=ProductSpecs(
            processor=processor,
            ram=ram,
            storage="512GB SSD",
            display="14 inch",
            battery="6 hours",
        ),
        description=f"Test laptop {product_id}",
        featured=featured,
        new_arrival=new_arrival,
        created_at=created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class FakeImageStorage(ImageStorage):
    """In-memory object storage recording every call."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.uploaded: list[str] = []
        self.deleted: list[str] = []
        self.failing_payloads: set[bytes] = set()
        self.failing_deletes: set[str] = set()
        self._counter = itertools.count(1)

    async def upload(self, image: InlineImage, product_id: str) -> str:
        if image.payload in self.failing_payloads:
            raise ImageStorageError("upload refused")
        reference = f"https://images.test/products/{product_id}/{next(self._counter)}.{image.extension}"
        self.objects[reference] = image.payload
        self.uploaded.append(reference)
        return reference

    async def delete(self, reference: str) -> None:
        self.deleted.append(reference)
        if reference in self.failing_deletes:
            raise ImageStorageError("delete refused")
        self.objects.pop(reference, None)


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
def sample_products():
    """Three laptops, newest first."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        make_product("p1", brand="Apple", price=1800, condition="New",
                     processor="Apple M2 Pro", ram="16GB Unified",
                     featured=True, created_at=base + timedelta(days=3)),
        make_product("p2", brand="Dell", price=650, condition="Used",
                     processor="Intel Core i7-8650U", ram="16GB DDR4",
                     new_arrival=True, created_at=base + timedelta(days=2)),
        make_product("p3", brand="Lenovo", price=420, condition="Refurbished",
                     processor="Intel Core i5-8350U", ram="8GB DDR4",
                     created_at=base + timedelta(days=1)),
    ]
