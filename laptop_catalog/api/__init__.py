"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from laptop_catalog.api.controller import admin_router, product_router
from laptop_catalog.api.errors import register_exception_handlers
from laptop_catalog.clients import LocalImageStorage
from laptop_catalog.config import AppConfig, get_config, get_environment
from laptop_catalog.services import CatalogBackend, open_backend

logger = logging.getLogger(__name__)

UPLOADS_ROUTE_NAME = "uploads"


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.logging.level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s",
    )


def _mount_uploads(app: FastAPI, storage: LocalImageStorage) -> None:
    """Serve locally stored images under the storage's URL prefix."""
    if any(getattr(route, "name", None) == UPLOADS_ROUTE_NAME for route in app.routes):
        return
    storage.root_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        storage.url_prefix,
        StaticFiles(directory=str(storage.root_dir), check_dir=False),
        name=UPLOADS_ROUTE_NAME,
    )


def create_app(
    config: Optional[AppConfig] = None,
    backend: Optional[CatalogBackend] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application config, loaded with get_config() on startup
            when omitted.
        backend: Pre-built store collaborators. When omitted the configured
            backend is opened on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_config = config or get_config()
        configure_logging(app_config)

        owns_backend = backend is None
        app_backend = backend or await open_backend(app_config)

        app.state.config = app_config
        app.state.backend = app_backend
        if isinstance(app_backend.images, LocalImageStorage):
            _mount_uploads(app, app_backend.images)

        logger.info(
            f"Catalog API started in '{get_environment()}' environment "
            f"with '{app_config.storage.backend}' backend"
        )
        try:
            yield
        finally:
            if owns_backend:
                await app_backend.close()
            logger.info("Catalog API stopped")

    app = FastAPI(
        title="Laptop Catalog API",
        description="Storefront listing and admin management for laptop products",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for the storefront frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production: specify storefront origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(product_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
