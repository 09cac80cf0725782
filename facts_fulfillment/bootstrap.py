"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from facts_fulfillment.adapters.session_state import SessionStateAdapter
from facts_fulfillment.services import ServiceContainer, build_default_services


def build_default_service_container() -> ServiceContainer:
    """Return the default service container wired to production adapters."""

    return build_default_services(session_state_port=SessionStateAdapter())


__all__ = ["build_default_service_container"]
