"""Handlers for the fact-telling intents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from facts_fulfillment.core.catalog import CATS_CATEGORY, Category, FactCatalog
from facts_fulfillment.core.exceptions import InvalidCategory
from facts_fulfillment.core.logging import get_logger
from facts_fulfillment.core.models import (
    AppContexts,
    ContextUpdate,
    DialogTurnResponse,
    FactCard,
    Lifespans,
    SpeechMessage,
)
from facts_fulfillment.services.fact_selector import DEPLETED, pick_fact
from facts_fulfillment.services.fact_store import all_content_depleted
from facts_fulfillment.services.intent_router import IntentRequest, IntentResponse
from facts_fulfillment.services.redirect_policy import (
    CATEGORY_ARGUMENT,
    build_redirect,
    heard_it_all,
)
from facts_fulfillment.services.response_helpers import build_fact_card, concat, random_choice

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from facts_fulfillment.services import ServiceContainer

logger = get_logger(__name__)


def _fact_response(
    catalog: FactCatalog,
    *,
    speech: str,
    text: str,
    card: Optional[FactCard],
) -> DialogTurnResponse:
    return DialogTurnResponse(
        messages=(
            SpeechMessage(speech=speech, text=text if card is not None else None),
            SpeechMessage(catalog.general.next_fact),
        ),
        suggestions=catalog.general.suggestions.confirmation,
        card=card,
    )


def _content_category(catalog: FactCatalog, name: Optional[str]) -> Category:
    if name is None or name == CATS_CATEGORY:
        raise InvalidCategory(name)
    return catalog.category(name)


async def handle_unrecognized_deep_link(
    request: IntentRequest, services: "ServiceContainer"
) -> IntentResponse:
    """Greet the user and steer them towards the fact categories."""
    catalog = services.catalog
    query = request.turn.raw_query.strip() or "that"
    response = DialogTurnResponse(
        messages=(SpeechMessage(catalog.general.unhandled % query),),
        suggestions=tuple(category.suggestion for category in catalog.categories),
    )
    return IntentResponse(intent=request.intent, result=response)


async def handle_tell_fact(request: IntentRequest, services: "ServiceContainer") -> IntentResponse:
    """Tell an untold fact from the requested content category."""
    catalog, state = services.catalog, request.state
    if all_content_depleted(state, catalog):
        return IntentResponse(intent=request.intent, result=heard_it_all(catalog))

    category = _content_category(catalog, request.turn.argument(CATEGORY_ARGUMENT))
    fact = pick_fact(state, catalog, category.category, services.rng)
    if fact is DEPLETED:
        response = build_redirect(
            state, catalog, category.category, lifespan=services.context_lifespan
        )
        return IntentResponse(intent=request.intent, result=response)

    card = (
        build_fact_card(fact, category, catalog, services.rng)
        if request.turn.has_screen_output
        else None
    )
    response = _fact_response(
        catalog,
        speech=concat(category.fact_prefix, fact),
        text=category.fact_prefix,
        card=card,
    )
    return IntentResponse(intent=request.intent, result=response)


async def handle_tell_cat_fact(
    request: IntentRequest, services: "ServiceContainer"
) -> IntentResponse:
    """Tell an untold cat fact, or hand the user back to the content categories."""
    catalog, state = services.catalog, request.state
    cats = catalog.cats
    fact = pick_fact(state, catalog, CATS_CATEGORY, services.rng)
    if fact is DEPLETED:
        logger.info("cat facts depleted; returning to content categories")
        response = DialogTurnResponse(
            messages=(SpeechMessage(catalog.transitions.cats.heard_it_all),),
            suggestions=catalog.general.suggestions.new_fact,
            context_updates=(
                ContextUpdate(AppContexts.CATS, Lifespans.END),
                ContextUpdate(AppContexts.FACT, services.context_lifespan),
            ),
        )
        return IntentResponse(intent=request.intent, result=response)

    sound = random_choice(cats.sounds, services.rng)
    audio = cats.audio % sound if sound else ""
    card = (
        build_fact_card(fact, cats, catalog, services.rng)
        if request.turn.has_screen_output
        else None
    )
    response = _fact_response(
        catalog,
        # The prefix carries SSML audio, so the whole utterance is wrapped.
        speech=f"<speak>{concat(cats.fact_prefix, audio, fact)}</speak>",
        text=cats.fact_prefix,
        card=card,
    )
    return IntentResponse(intent=request.intent, result=response)


__all__ = [
    "handle_unrecognized_deep_link",
    "handle_tell_fact",
    "handle_tell_cat_fact",
]
