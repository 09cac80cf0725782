"""Intent types recognised by the fulfillment webhook."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class IntentType(str, Enum):
    """Enumeration of the agent intents this webhook fulfills."""

    UNRECOGNIZED_DEEP_LINK = "Unrecognized Deep Link Fallback"
    CHOOSE_FACT = "choose_fact"
    TELL_FACT = "tell_fact"
    CHOOSE_CATS = "choose_cats"
    TELL_CAT_FACT = "tell_cat_fact"


def resolve_intent(name: Optional[str]) -> Optional[IntentType]:
    """Return the ``IntentType`` for a platform intent display name, if known."""
    if not name:
        return None
    try:
        return IntentType(name)
    except ValueError:
        return None


__all__ = ["IntentType", "resolve_intent"]
