"""Product models for catalog records."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, List, Literal

from laptop_catalog.models.image import ImageRef

def parse_timestamp(value: Any) -> datetime:
    """Parse a stored ISO-8601 timestamp as an aware datetime.

    A trailing ``Z`` is accepted and naive values are taken as UTC.
    Missing values sort as oldest.
    """
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


Condition = Literal["New", "Used", "Refurbished"]
CONDITIONS: tuple = ("New", "Used", "Refurbished")


@dataclass(frozen=True)
class ProductSpecs:
    """Free-text hardware specification of a laptop."""

    processor: str
    ram: str
    storage: str
    display: str
    battery: str

    def to_dict(self) -> dict[str, str]:
        return {
            "processor": self.processor,
            "ram": self.ram,
            "storage": self.storage,
            "display": self.display,
            "battery": self.battery,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductSpecs":
        return cls(
            processor=data.get("processor", ""),
            ram=data.get("ram", ""),
            storage=data.get("storage", ""),
            display=data.get("display", ""),
            battery=data.get("battery", ""),
        )


@dataclass(frozen=True)
class Product:
    """A persisted product listing.

    ``images`` only ever holds hosted references. The dict form uses the
    camelCase keys of the stored JSON documents.
    """

    id: str
    name: str
    brand: str
    price: float
    condition: Condition
    images: List[str]
    specs: ProductSpecs
    description: str
    featured: bool = False
    new_arrival: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "condition": self.condition,
            "images": list(self.images),
            "specs": self.specs.to_dict(),
            "description": self.description,
            "featured": self.featured,
            "newArrival": self.new_arrival,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            brand=data["brand"],
            price=float(data["price"]),
            condition=data["condition"],
            images=list(data.get("images") or []),
            specs=ProductSpecs.from_dict(data.get("specs") or {}),
            description=data.get("description", ""),
            featured=bool(data.get("featured", False)),
            new_arrival=bool(data.get("newArrival", False)),
            created_at=parse_timestamp(data.get("createdAt")),
        )

    def with_changes(self, **changes: Any) -> "Product":
        return replace(self, **changes)


@dataclass(frozen=True)
class ProductDraft:
    """Validated admin submission.

    Images are already resolved to ``InlineImage`` / ``HostedImage`` and
    may still contain inline payloads.
    """

    name: str
    brand: str
    price: float
    condition: Condition
    images: List[ImageRef]
    specs: ProductSpecs
    description: str
    featured: bool = False
    new_arrival: bool = False
