"""Intent handler registration."""

from __future__ import annotations

from facts_fulfillment.core.intents import IntentType
from facts_fulfillment.services.intent_router import IntentRouter

from .fact_intents import handle_tell_cat_fact, handle_tell_fact, handle_unrecognized_deep_link


def register_fact_intents(router: IntentRouter) -> IntentRouter:
    """Register every fact intent, including the choose_* follow-up aliases."""
    router.register(IntentType.UNRECOGNIZED_DEEP_LINK, handle_unrecognized_deep_link)
    router.register(IntentType.TELL_FACT, handle_tell_fact)
    router.register(IntentType.TELL_CAT_FACT, handle_tell_cat_fact)
    router.alias(IntentType.CHOOSE_FACT, IntentType.TELL_FACT)
    router.alias(IntentType.CHOOSE_CATS, IntentType.TELL_CAT_FACT)
    return router


__all__ = ["register_fact_intents"]
