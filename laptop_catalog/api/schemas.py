"""Request and response bodies for the catalog API."""

import math
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from laptop_catalog.models import ProductDraft, ProductSpecs, parse_image

SPEC_FIELD_LABELS = {
    "processor": "Processor",
    "ram": "RAM",
    "storage": "Storage",
    "display": "Display size",
    "battery": "Battery info",
}


def _require_text(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} is required")
    return value


class ProductSpecsForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    processor: str = ""
    ram: str = ""
    storage: str = ""
    display: str = ""
    battery: str = ""

    @field_validator("processor", "ram", "storage", "display", "battery")
    @classmethod
    def _required(cls, value: str, info) -> str:
        return _require_text(value, SPEC_FIELD_LABELS[info.field_name])


class ProductForm(BaseModel):
    """Admin product submission.

    ``images`` mixes hosted URLs with ``data:image/...;base64,...`` strings
    for newly chosen files.
    """

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    name: str = ""
    brand: str = ""
    price: float
    condition: Literal["New", "Used", "Refurbished"]
    images: List[str] = Field(default_factory=list)
    specs: ProductSpecsForm
    description: str = ""
    featured: bool = False
    new_arrival: bool = Field(False, alias="newArrival")

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return _require_text(value, "Name")

    @field_validator("brand")
    @classmethod
    def _brand_required(cls, value: str) -> str:
        return _require_text(value, "Brand")

    @field_validator("description")
    @classmethod
    def _description_required(cls, value: str) -> str:
        return _require_text(value, "Description")

    @field_validator("price")
    @classmethod
    def _price_positive(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("Price must be a positive number")
        return value

    @field_validator("images")
    @classmethod
    def _image_required(cls, value: List[str]) -> List[str]:
        # The upper bound is configurable and checked by ProductService
        if len(value) < 1:
            raise ValueError("At least one image is required")
        return value

    def to_draft(self) -> ProductDraft:
        """
        Resolve the submission into a draft with classified images.

        Raises:
            InvalidImageError: If an inline image is not a valid data URI.
        """
        return ProductDraft(
            name=self.name,
            brand=self.brand,
            price=self.price,
            condition=self.condition,
            images=[parse_image(image) for image in self.images],
            specs=ProductSpecs(**self.specs.model_dump()),
            description=self.description,
            featured=self.featured,
            new_arrival=self.new_arrival,
        )


class LoginRequest(BaseModel):
    username: str
    password: str


class CredentialsUpdate(BaseModel):
    """Credential rotation request; field rules are checked by the service."""

    current_password: str = Field("", alias="currentPassword")
    new_username: str = Field("", alias="newUsername")
    new_password: str = Field("", alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class ProductResponse(BaseModel):
    success: bool = True
    product: dict[str, Any]
