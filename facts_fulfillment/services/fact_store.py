"""Session fact store: which facts of each category a session has not heard."""

from __future__ import annotations

from facts_fulfillment.core.catalog import FactCatalog
from facts_fulfillment.core.models import SessionFactState


def get_remaining(state: SessionFactState, catalog: FactCatalog, category: str) -> list[str]:
    """Return the live list of untold facts for ``category`` in this session.

    The first access copies the catalog's facts into the session; the catalog
    itself is never mutated. Raises ``InvalidCategory`` for unknown ids.
    """
    facts = catalog.facts_for(category)
    remaining = state.remaining.get(category)
    if remaining is None:
        remaining = list(facts)
        state.remaining[category] = remaining
    return remaining


def is_depleted(state: SessionFactState, catalog: FactCatalog, category: str) -> bool:
    """True once every fact of ``category`` has been told in this session."""
    catalog.facts_for(category)
    return state.touched(category) and not state.remaining[category]


def has_facts_left(state: SessionFactState, catalog: FactCatalog, category: str) -> bool:
    """True if ``category`` is untouched or still has at least one fact left."""
    return not is_depleted(state, catalog, category)


def all_content_depleted(state: SessionFactState, catalog: FactCatalog) -> bool:
    """True when every content category (cats excluded) has run dry."""
    return all(is_depleted(state, catalog, name) for name in catalog.content_categories)


__all__ = ["get_remaining", "is_depleted", "has_facts_left", "all_content_depleted"]
