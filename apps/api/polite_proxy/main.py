"""ASGI entry point: ``uvicorn polite_proxy.main:app``. Fails at import if configuration is missing."""

from polite_proxy.app import create_app

app = create_app()
