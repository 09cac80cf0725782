"""Single entry point for fulfilling one conversational turn."""

from __future__ import annotations

from facts_fulfillment.core.catalog import FactCatalog
from facts_fulfillment.core.exceptions import InvalidCategory
from facts_fulfillment.core.intents import resolve_intent
from facts_fulfillment.core.logging import get_logger
from facts_fulfillment.core.models import (
    DialogTurnRequest,
    DialogTurnResponse,
    SessionFactState,
    SpeechMessage,
)

from . import ServiceContainer
from .intent_router import IntentHandlerNotFoundError, IntentRequest

logger = get_logger(__name__)


def generic_fallback(catalog: FactCatalog) -> DialogTurnResponse:
    """Clarifying prompt used when the turn cannot be fulfilled."""
    suggestions = [category.suggestion for category in catalog.categories]
    suggestions.append(catalog.cats.suggestion)
    return DialogTurnResponse(
        messages=(SpeechMessage(catalog.general.fallback),),
        suggestions=tuple(suggestions),
    )


def unknown_category(catalog: FactCatalog) -> DialogTurnResponse:
    """Prompt asking the user to pick one of the content categories again."""
    return DialogTurnResponse(
        messages=(SpeechMessage(catalog.general.unknown_category),),
        suggestions=tuple(category.suggestion for category in catalog.categories),
    )


async def handle_turn(
    turn: DialogTurnRequest, state: SessionFactState, services: ServiceContainer
) -> DialogTurnResponse:
    """Dispatch ``turn`` to exactly one intent handler and return its response.

    Unmapped intents and unknown categories are logged and answered with a
    clarifying prompt; ``state`` is mutated in place by the handler.
    """
    catalog = services.catalog
    intent = resolve_intent(turn.intent_name)
    router = services.intent_router
    if intent is None or router is None:
        logger.warning("no handler mapped for intent %r", turn.intent_name)
        return generic_fallback(catalog)

    try:
        request = IntentRequest(intent=intent, turn=turn, state=state)
        response = await router.dispatch(request, services)
    except IntentHandlerNotFoundError:
        logger.warning("no handler mapped for intent %r", turn.intent_name, exc_info=True)
        return generic_fallback(catalog)
    except InvalidCategory as exc:
        logger.warning(
            "invalid category for intent %s: %r", intent.value, exc.category, exc_info=True
        )
        return unknown_category(catalog)

    logger.info(
        "turn fulfilled",
        extra={
            "intent": intent.value,
            "expect_user_response": response.result.expect_user_response,
            "remaining": {key: len(values) for key, values in state.remaining.items()},
        },
    )
    return response.result


__all__ = ["handle_turn", "generic_fallback", "unknown_category"]
