"""Health and readiness routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from facts_fulfillment.apps.api.session_locks import get_lock_stats
from facts_fulfillment.services import ServiceContainer

from ..dependencies import get_service_container

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Health/info endpoint with a short usage message."""
    return {"message": "Facts fulfillment webhook. POST Dialogflow requests to /dialogflow."}


@router.get("/alive")
async def alive_check(
    services: ServiceContainer = Depends(get_service_container),
) -> JSONResponse:
    """Liveness probe reporting catalog size and session lock usage."""
    return JSONResponse(
        {
            "status": "ok",
            "categories": list(services.catalog.content_categories),
            "locks": get_lock_stats(),
        }
    )


__all__ = ["router"]
