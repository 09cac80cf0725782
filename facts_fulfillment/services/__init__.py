"""Application service layer scaffolding for intent handling."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from facts_fulfillment.core.catalog import FactCatalog, get_catalog
from facts_fulfillment.core.config import settings
from facts_fulfillment.core.models import Lifespans
from facts_fulfillment.core.ports import SessionStatePort

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .intent_router import IntentRouter


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to handlers."""

    catalog: FactCatalog
    rng: random.Random = field(default_factory=random.Random)
    context_lifespan: int = Lifespans.DEFAULT
    session_state: Optional[SessionStatePort] = None
    intent_router: Optional["IntentRouter"] = None


def build_default_services(
    *,
    catalog: Optional[FactCatalog] = None,
    session_state_port: Optional[SessionStatePort] = None,
    rng: Optional[random.Random] = None,
) -> ServiceContainer:
    """Return a service container with the fact intents registered."""

    # pylint: disable=import-outside-toplevel
    from .intent_router import IntentRouter
    from .intents import register_fact_intents

    intent_router = IntentRouter()
    register_fact_intents(intent_router)
    return ServiceContainer(
        catalog=catalog if catalog is not None else get_catalog(),
        rng=rng if rng is not None else random.Random(settings.FACTS_RANDOM_SEED),
        context_lifespan=settings.CONTEXT_LIFESPAN,
        session_state=session_state_port,
        intent_router=intent_router,
    )


__all__ = ["ServiceContainer", "build_default_services"]
