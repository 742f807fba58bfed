"""Error responses in the form-action result shape.

Failures are reported as::

    {"success": false, "error": {"formErrors": [...], "fieldErrors": {...}}}
"""

import logging
from typing import Any, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from laptop_catalog.models import InvalidImageError
from laptop_catalog.services import (
    AuthenticationError,
    CredentialStoreError,
    CredentialValidationError,
    ProductNotFoundError,
    ProductPersistenceError,
    ProductValidationError,
)

logger = logging.getLogger(__name__)

_LOCATION_ROOTS = ("body", "query", "path")
_VALUE_ERROR_PREFIX = "Value error, "


def error_response(
    status_code: int,
    form_errors: Optional[list[str]] = None,
    field_errors: Optional[dict[str, list[str]]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "formErrors": form_errors or [],
                "fieldErrors": field_errors or {},
            },
        },
    )


def flatten_validation_errors(errors: Iterable[dict[str, Any]]) -> tuple[list[str], dict[str, list[str]]]:
    """Group pydantic errors by dotted field path (list indexes dropped)."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for error in errors:
        message = error.get("msg", "Invalid value")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]

        location = [part for part in error.get("loc", ()) if not isinstance(part, int)]
        if location and location[0] in _LOCATION_ROOTS:
            location = location[1:]

        if not location:
            form_errors.append(message)
            continue

        field = ".".join(str(part) for part in location)
        messages = field_errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)

    return form_errors, field_errors


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    form_errors, field_errors = flatten_validation_errors(exc.errors())
    return error_response(422, form_errors, field_errors)


async def _invalid_image_handler(request: Request, exc: InvalidImageError) -> JSONResponse:
    return error_response(422, field_errors={"images": [str(exc)]})


async def _product_validation_handler(request: Request, exc: ProductValidationError) -> JSONResponse:
    return error_response(422, field_errors={exc.field: [exc.message]})


async def _credential_validation_handler(request: Request, exc: CredentialValidationError) -> JSONResponse:
    return error_response(422, field_errors=exc.field_errors)


async def _not_found_handler(request: Request, exc: ProductNotFoundError) -> JSONResponse:
    return error_response(404, ["Product not found"])


async def _authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return error_response(401, [str(exc)])


async def _persistence_handler(request: Request, exc: ProductPersistenceError) -> JSONResponse:
    return error_response(500, [str(exc)])


async def _credential_store_handler(request: Request, exc: CredentialStoreError) -> JSONResponse:
    logger.error(f"Failed to update credentials: {exc}")
    return error_response(500, ["Failed to update credentials."])


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to result-shaped JSON responses."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(InvalidImageError, _invalid_image_handler)
    app.add_exception_handler(ProductValidationError, _product_validation_handler)
    app.add_exception_handler(CredentialValidationError, _credential_validation_handler)
    app.add_exception_handler(ProductNotFoundError, _not_found_handler)
    app.add_exception_handler(AuthenticationError, _authentication_handler)
    app.add_exception_handler(ProductPersistenceError, _persistence_handler)
    app.add_exception_handler(CredentialStoreError, _credential_store_handler)
