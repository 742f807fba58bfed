"""API routers."""

from laptop_catalog.api.controller.admin_controller import router as admin_router
from laptop_catalog.api.controller.product_controller import router as product_router

__all__ = ["admin_router", "product_router"]
