"""Storefront product endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from laptop_catalog.api.dependencies import get_app_config, get_product_service
from laptop_catalog.catalog import (
    FilterState,
    featured_products,
    filter_products,
    max_price,
    new_arrivals,
)
from laptop_catalog.config import AppConfig
from laptop_catalog.services import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["storefront"])


@router.get("")
async def list_products(
    brand: Optional[str] = None,
    max_price_filter: Optional[float] = Query(None, alias="maxPrice", allow_inf_nan=False),
    condition: Optional[List[str]] = Query(None),
    processor: Optional[str] = None,
    ram: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
    config: AppConfig = Depends(get_app_config),
) -> dict:
    """
    Filtered storefront listing.

    ``maxPrice`` in the response is the ceiling the price filter resets to:
    the highest price in the catalog.
    """
    products = await service.list_products()
    fallback = config.catalog.default_price_ceiling

    state = FilterState.from_query(
        products,
        brand=brand,
        price_ceiling=max_price_filter,
        conditions=condition,
        processor=processor,
        ram=ram,
        fallback=fallback,
    )
    items = filter_products(products, state)
    logger.debug(f"Storefront filter {state.to_dict()} matched {len(items)} of {len(products)}")

    return {
        "items": [product.to_dict() for product in items],
        "total": len(items),
        "maxPrice": max_price(products, fallback),
        "filters": state.to_dict(),
    }


@router.get("/featured")
async def list_featured(service: ProductService = Depends(get_product_service)) -> List[dict]:
    products = await service.list_products()
    return [product.to_dict() for product in featured_products(products)]


@router.get("/new-arrivals")
async def list_new_arrivals(service: ProductService = Depends(get_product_service)) -> List[dict]:
    products = await service.list_products()
    return [product.to_dict() for product in new_arrivals(products)]


@router.get("/{product_id}")
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)) -> dict:
    product = await service.get_product(product_id)
    return product.to_dict()
