"""Depletion handling for content categories.

When the requested category has no facts left, the user is steered to another
content category. The fact follow-up context is re-issued with that category
as its argument, so a plain "yes" on the next turn resumes there. Once every
content category is empty the conversation is closed instead of redirected.
"""

from __future__ import annotations

from facts_fulfillment.core.catalog import CATS_CATEGORY, FactCatalog
from facts_fulfillment.core.exceptions import NoFallbackCategory
from facts_fulfillment.core.logging import get_logger
from facts_fulfillment.core.models import (
    AppContexts,
    ContextUpdate,
    DialogTurnResponse,
    Lifespans,
    SessionFactState,
    SpeechMessage,
)

from .fact_store import all_content_depleted, has_facts_left
from .response_helpers import concat

logger = get_logger(__name__)

CATEGORY_ARGUMENT = "category"


def select_fallback_category(
    state: SessionFactState, catalog: FactCatalog, depleted: str
) -> str:
    """Pick the content category to redirect to from ``depleted``.

    Candidates are the other content categories in catalog order. Rather than
    always taking the first candidate, the first one that still has facts wins,
    so two empty categories never redirect to each other; the first candidate
    is used only when every other category is empty too.
    """
    candidates = [name for name in catalog.content_categories if name != depleted]
    if not candidates:
        raise NoFallbackCategory(f"no content category to redirect {depleted!r} to")
    for name in candidates:
        if has_facts_left(state, catalog, name):
            return name
    return candidates[0]


def heard_it_all(catalog: FactCatalog) -> DialogTurnResponse:
    """Terminal response once every content category is exhausted."""
    return DialogTurnResponse(
        messages=(SpeechMessage(catalog.general.heard_it_all),),
        expect_user_response=False,
    )


def build_redirect(
    state: SessionFactState,
    catalog: FactCatalog,
    depleted: str,
    *,
    lifespan: int = Lifespans.DEFAULT,
) -> DialogTurnResponse:
    """Response for a request whose content category ``depleted`` ran out."""
    if all_content_depleted(state, catalog):
        logger.info("all content categories depleted; closing conversation")
        return heard_it_all(catalog)

    redirect = select_fallback_category(state, catalog, depleted)
    offer_cats = has_facts_left(state, catalog, CATS_CATEGORY)
    logger.info(
        "redirecting depleted category",
        extra={"depleted": depleted, "redirect": redirect, "offer_cats": offer_cats},
    )

    transitions = catalog.transitions.content
    parts = [transitions.heard_it_all % (depleted, redirect)]
    if offer_cats:
        parts.append(transitions.also_cats)
    parts.append(catalog.general.want_what)

    suggestions = [catalog.category(redirect).suggestion]
    if offer_cats:
        suggestions.append(catalog.cats.suggestion)

    return DialogTurnResponse(
        messages=(SpeechMessage(concat(*parts)),),
        suggestions=tuple(suggestions),
        context_updates=(
            ContextUpdate(AppContexts.FACT, lifespan, {CATEGORY_ARGUMENT: redirect}),
        ),
    )


__all__ = [
    "CATEGORY_ARGUMENT",
    "select_fallback_category",
    "heard_it_all",
    "build_redirect",
]
