"""Tests for image classification and product serialization."""

from datetime import datetime, timezone

import pytest

from laptop_catalog.models import (
    HostedImage,
    InlineImage,
    InvalidImageError,
    Product,
    parse_image,
)

from conftest import JPEG_BYTES, PNG_BYTES, data_uri, make_product


class TestParseImage:
    """Test classification of submitted image strings."""

    def test_url_is_hosted(self):
        image = parse_image("https://images.test/products/p1/a.png")

        assert image == HostedImage(reference="https://images.test/products/p1/a.png")

    def test_png_data_uri_is_inline(self):
        image = parse_image(data_uri(PNG_BYTES, "image/png"))

        assert isinstance(image, InlineImage)
        assert image.payload == PNG_BYTES
        assert image.mime_type == "image/png"
        assert image.extension == "png"

    @pytest.mark.parametrize("mime_type", ["image/jpeg", "image/jpg"])
    def test_jpeg_data_uris_are_inline(self, mime_type):
        image = parse_image(data_uri(JPEG_BYTES, mime_type))

        assert isinstance(image, InlineImage)
        assert image.extension == mime_type.split("/")[1]

    def test_unsupported_mime_type_is_rejected(self):
        with pytest.raises(InvalidImageError, match="Invalid data URI format"):
            parse_image(data_uri(b"GIF89a", "image/gif"))

    def test_non_base64_data_uri_is_rejected(self):
        with pytest.raises(InvalidImageError):
            parse_image("data:image/png,rawbytes")

    def test_corrupt_base64_is_rejected(self):
        with pytest.raises(InvalidImageError):
            parse_image("data:image/png;base64,@@not-base64@@")

    def test_data_uri_round_trips_payload(self):
        image = InlineImage(payload=PNG_BYTES, mime_type="image/png")

        assert parse_image(data_uri(PNG_BYTES)) == image


class TestProductSerialization:
    """Test the stored JSON shape of products."""

    def test_to_dict_uses_camel_case_keys(self):
        product = make_product("p1", new_arrival=True)

        data = product.to_dict()

        assert data["newArrival"] is True
        assert data["createdAt"] == "2024-01-01T00:00:00+00:00"
        assert data["specs"]["processor"] == "Intel Core i5-1235U"

    def test_from_dict_restores_product(self):
        product = make_product("p1", featured=True)

        assert Product.from_dict(product.to_dict()) == product

    def test_from_dict_accepts_legacy_records(self):
        """Records without flags or createdAt load with defaults."""
        legacy = {
            "id": "legacy-1",
            "name": "ThinkPad T480",
            "brand": "Lenovo",
            "price": "55000",
            "condition": "Used",
            "images": ["https://placehold.co/600x400.png"],
            "specs": {"processor": "i5-8350U", "ram": "8GB"},
            "description": "Business laptop",
        }

        product = Product.from_dict(legacy)

        assert product.price == 55000.0
        assert product.featured is False
        assert product.new_arrival is False
        assert product.specs.storage == ""
        assert product.created_at.year == 1

    @pytest.mark.parametrize(
        "created_at",
        ["2024-05-01T10:00:00", "2024-05-01T10:00:00Z", "2024-05-01T10:00:00+00:00"],
    )
    def test_created_at_is_always_utc_aware(self, created_at):
        data = make_product("p1").to_dict()
        data["createdAt"] = created_at

        product = Product.from_dict(data)

        assert product.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
