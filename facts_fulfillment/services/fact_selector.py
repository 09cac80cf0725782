"""Random, non-repeating fact selection."""

from __future__ import annotations

import random
from enum import Enum
from typing import Union

from facts_fulfillment.core.catalog import FactCatalog
from facts_fulfillment.core.logging import get_logger
from facts_fulfillment.core.models import SessionFactState

from .fact_store import get_remaining

logger = get_logger(__name__)


class Depleted(Enum):
    """Marker returned when a category has no facts left for the session."""

    TOKEN = "depleted"

    def __repr__(self) -> str:
        return "DEPLETED"


DEPLETED = Depleted.TOKEN

FactPick = Union[str, Depleted]


def pick_fact(
    state: SessionFactState,
    catalog: FactCatalog,
    category: str,
    rng: random.Random,
) -> FactPick:
    """Remove and return a uniformly random untold fact, or ``DEPLETED``."""
    remaining = get_remaining(state, catalog, category)
    if not remaining:
        logger.info("category %s depleted", category)
        return DEPLETED
    fact = remaining.pop(rng.randrange(len(remaining)))
    logger.debug("picked fact from %s, %d left", category, len(remaining))
    return fact


__all__ = ["Depleted", "DEPLETED", "FactPick", "pick_fact"]
