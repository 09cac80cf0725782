"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI

from facts_fulfillment.apps.api.middleware import CorrelationIdMiddleware
from facts_fulfillment.apps.api.session_locks import lock_cleanup_task
from facts_fulfillment.core.logging import get_logger
from facts_fulfillment.services import ServiceContainer

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate the catalog at startup and run the lock janitor while serving."""
    logger.info("Initializing facts fulfillment...")
    services = getattr(app.state, "services", None)
    if isinstance(services, ServiceContainer):
        services.catalog.validate_fallbacks()
        logger.info(
            "catalog loaded.",
            extra={
                "categories": list(services.catalog.content_categories),
                "cat_facts": len(services.catalog.cats.facts),
            },
        )
    cleanup = asyncio.create_task(lock_cleanup_task())
    try:
        yield
    finally:
        cleanup.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application with configured routers."""
    if services is None:
        raise RuntimeError("Service container must be provided when creating the app.")
    app = FastAPI(lifespan=lifespan)
    app.state.services = services
    app.add_middleware(CorrelationIdMiddleware)

    from .routes import health, webhooks  # pylint: disable=import-outside-toplevel

    app.include_router(health.router)
    app.include_router(webhooks.router)
    return app


__all__ = ["create_app", "lifespan"]
