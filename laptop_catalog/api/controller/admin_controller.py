"""Admin endpoints: product management and credential rotation."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from laptop_catalog.api.dependencies import (
    get_credential_service,
    get_product_service,
    require_admin,
)
from laptop_catalog.api.schemas import CredentialsUpdate, LoginRequest, ProductForm, ProductResponse
from laptop_catalog.services import CredentialService, ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
async def login(
    payload: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
) -> dict:
    if not await service.verify(payload.username, payload.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"success": True, "username": payload.username}


@router.get("/products")
async def list_products(
    _: str = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> List[dict]:
    """All products, newest first."""
    return [product.to_dict() for product in await service.list_products()]


@router.post("/products", status_code=201, response_model=ProductResponse)
async def create_product(
    form: ProductForm,
    admin: str = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    product = await service.create_product(form.to_draft())
    logger.info(f"Admin '{admin}' added product {product.id} ({product.name})")
    return ProductResponse(product=product.to_dict())


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    form: ProductForm,
    admin: str = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    product = await service.update_product(product_id, form.to_draft())
    logger.info(f"Admin '{admin}' updated product {product.id}")
    return ProductResponse(product=product.to_dict())


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    admin: str = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> dict:
    await service.delete_product(product_id)
    logger.info(f"Admin '{admin}' deleted product {product_id}")
    return {"success": True}


@router.get("/credentials")
async def get_credentials(
    _: str = Depends(require_admin),
    service: CredentialService = Depends(get_credential_service),
) -> dict:
    return {"username": await service.current_username()}


@router.put("/credentials")
async def update_credentials(
    payload: CredentialsUpdate,
    _: str = Depends(require_admin),
    service: CredentialService = Depends(get_credential_service),
) -> dict:
    credentials = await service.rotate(
        current_password=payload.current_password,
        new_username=payload.new_username,
        new_password=payload.new_password,
    )
    return {"success": True, "username": credentials.username}
