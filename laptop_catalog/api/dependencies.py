"""FastAPI dependencies: services built from the app's backend."""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from laptop_catalog.config import AppConfig
from laptop_catalog.services import CatalogBackend, CredentialService, ProductService

basic_auth = HTTPBasic()


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_backend(request: Request) -> CatalogBackend:
    return request.app.state.backend


def get_product_service(
    backend: CatalogBackend = Depends(get_backend),
    config: AppConfig = Depends(get_app_config),
) -> ProductService:
    return ProductService(backend.products, backend.images, max_images=config.catalog.max_images)


def get_credential_service(backend: CatalogBackend = Depends(get_backend)) -> CredentialService:
    return CredentialService(backend.credentials)


async def require_admin(
    credentials: HTTPBasicCredentials = Depends(basic_auth),
    service: CredentialService = Depends(get_credential_service),
) -> str:
    """Check HTTP Basic credentials against the stored admin pair."""
    if not await service.verify(credentials.username, credentials.password):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
