"""ASGI entrypoint: ``uvicorn main:app``."""

from facts_fulfillment.api_factory import create_app

app = create_app()
