"""Shared FastAPI dependencies for service access."""

from fastapi import HTTPException, Request, status

from facts_fulfillment.core.ports import SessionStatePort
from facts_fulfillment.services import ServiceContainer


def get_service_container(request: Request) -> ServiceContainer:
    """Resolve the service container configured on the application."""
    services = getattr(request.app.state, "services", None)
    if not isinstance(services, ServiceContainer):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        )
    return services


def require_session_state(services: ServiceContainer) -> SessionStatePort:
    """Return the session storage port or fail the request."""
    if services.session_state is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Session storage is unavailable",
        )
    return services.session_state


__all__ = ["get_service_container", "require_session_state"]
