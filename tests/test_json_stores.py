"""Tests for the JSON file backend.

These tests verify:
- Product repository CRUD and newest-first listing
- File auto-creation and empty-file handling
- Credential store defaults
- Local image storage upload/delete
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from laptop_catalog.clients import LocalImageStorage
from laptop_catalog.models import Credentials, InlineImage
from laptop_catalog.services import (
    JsonCredentialStore,
    JsonProductRepository,
    ProductNotFoundError,
    ProductStoreError,
)

from conftest import PNG_BYTES, make_product


class TestJsonProductRepository:
    """Test JsonProductRepository against a temporary file."""

    @pytest.fixture
    def products_path(self, tmp_path):
        return tmp_path / "data" / "products.json"

    @pytest.fixture
    def repository(self, products_path):
        return JsonProductRepository(str(products_path))

    @pytest.mark.asyncio
    async def test_missing_file_is_created_empty(self, repository, products_path):
        assert await repository.list_products() == []
        assert json.loads(products_path.read_text()) == []

    @pytest.mark.asyncio
    async def test_empty_file_reads_as_empty_list(self, repository, products_path):
        products_path.parent.mkdir(parents=True)
        products_path.write_text("")

        assert await repository.list_products() == []

    @pytest.mark.asyncio
    async def test_create_and_get(self, repository, products_path):
        product = make_product("p1")

        await repository.create(product)

        assert await repository.get("p1") == product
        assert await repository.get("missing") is None
        stored = json.loads(products_path.read_text())
        assert stored[0]["id"] == "p1"

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, repository):
        base = datetime(2024, 5, 1, tzinfo=timezone.utc)
        for i in range(3):
            await repository.create(make_product(f"p{i}", created_at=base + timedelta(hours=i)))

        products = await repository.list_products()

        assert [p.id for p in products] == ["p2", "p1", "p0"]

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, repository):
        await repository.create(make_product("p1", price=900))

        await repository.update(make_product("p1", price=750))

        assert (await repository.get("p1")).price == 750

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, repository):
        with pytest.raises(ProductNotFoundError):
            await repository.update(make_product("ghost"))

    @pytest.mark.asyncio
    async def test_delete(self, repository):
        await repository.create(make_product("p1"))
        await repository.create(make_product("p2"))

        assert await repository.delete("p1") is True
        assert await repository.delete("p1") is False
        assert [p.id for p in await repository.list_products()] == ["p2"]

    @pytest.mark.asyncio
    async def test_corrupt_file(self, repository, products_path):
        """Listing degrades to empty, writes refuse to overwrite the file."""
        products_path.parent.mkdir(parents=True)
        products_path.write_text("{not json")

        assert await repository.list_products() == []
        with pytest.raises(ProductStoreError):
            await repository.create(make_product("p1"))
        assert products_path.read_text() == "{not json"

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_all_kept(self, repository):
        await asyncio.gather(*(repository.create(make_product(f"p{i}")) for i in range(10)))

        products = await repository.list_products()

        assert sorted(p.id for p in products) == sorted(f"p{i}" for i in range(10))

    @pytest.mark.asyncio
    async def test_concurrent_writes_on_different_products(self, repository):
        for product_id in ("keep", "change", "drop"):
            await repository.create(make_product(product_id, price=500))

        await asyncio.gather(
            repository.update(make_product("change", price=250)),
            repository.delete("drop"),
            repository.create(make_product("added")),
        )

        stored = {p.id: p for p in await repository.list_products()}
        assert set(stored) == {"keep", "change", "added"}
        assert stored["change"].price == 250

    @pytest.mark.asyncio
    async def test_legacy_naive_timestamps_list_with_new_records(self, repository, products_path):
        legacy = make_product("legacy").to_dict()
        legacy["createdAt"] = "2024-05-01T10:00:00"
        zulu = make_product("zulu").to_dict()
        zulu["createdAt"] = "2024-06-01T10:00:00Z"
        products_path.parent.mkdir(parents=True)
        products_path.write_text(json.dumps([legacy, zulu]))

        await repository.create(make_product("fresh", created_at=datetime.now(timezone.utc)))

        assert [p.id for p in await repository.list_products()] == ["fresh", "zulu", "legacy"]

    @pytest.mark.asyncio
    async def test_non_finite_price_is_never_written(self, repository, products_path):
        await repository.create(make_product("p1"))

        with pytest.raises(ProductStoreError):
            await repository.create(make_product("p2", price=float("inf")))

        assert [p.id for p in await repository.list_products()] == ["p1"]
        assert "Infinity" not in products_path.read_text()


class TestJsonCredentialStore:
    """Test JsonCredentialStore."""

    @pytest.mark.asyncio
    async def test_defaults_written_on_first_access(self, tmp_path):
        path = tmp_path / "auth.json"
        store = JsonCredentialStore(str(path))

        credentials = await store.get()

        assert credentials == Credentials(username="admin", password="password")
        assert json.loads(path.read_text()) == {"username": "admin", "password": "password"}

    @pytest.mark.asyncio
    async def test_save_replaces_pair(self, tmp_path):
        store = JsonCredentialStore(str(tmp_path / "auth.json"))

        await store.save(Credentials(username="owner", password="s3cret!"))

        assert await store.get() == Credentials(username="owner", password="s3cret!")

    @pytest.mark.asyncio
    async def test_concurrent_saves_leave_one_complete_pair(self, tmp_path):
        store = JsonCredentialStore(str(tmp_path / "auth.json"))
        pairs = [Credentials(username=f"user{i}", password=f"secret{i}") for i in range(5)]

        await asyncio.gather(*(store.save(pair) for pair in pairs))

        assert await store.get() in pairs

    @pytest.mark.asyncio
    async def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text("[]")
        store = JsonCredentialStore(str(path))

        assert await store.get() == Credentials.default()


class TestLocalImageStorage:
    """Test LocalImageStorage."""

    @pytest.fixture
    def storage(self, tmp_path):
        return LocalImageStorage(str(tmp_path / "uploads"), url_prefix="/uploads")

    @pytest.mark.asyncio
    async def test_upload_writes_file(self, storage):
        reference = await storage.upload(InlineImage(payload=PNG_BYTES, mime_type="image/png"), "p1")

        assert reference.startswith("/uploads/products/p1/")
        assert reference.endswith(".png")
        path = storage.root_dir / reference[len("/uploads/"):]
        assert path.read_bytes() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, storage):
        reference = await storage.upload(InlineImage(payload=PNG_BYTES, mime_type="image/png"), "p1")

        await storage.delete(reference)

        assert not (storage.root_dir / reference[len("/uploads/"):]).exists()

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, storage):
        await storage.delete("/uploads/products/p1/missing.png")

    @pytest.mark.asyncio
    async def test_foreign_references_are_ignored(self, storage, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        await storage.delete("https://placehold.co/600x400.png")
        await storage.delete("/uploads/../keep.txt")

        assert outside.exists()
