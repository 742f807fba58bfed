"""ASGI entry point: ``uvicorn laptop_catalog.main:app``."""

from laptop_catalog.api import create_app

app = create_app()
