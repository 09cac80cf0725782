"""Helpers for assembling spoken responses."""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

from facts_fulfillment.core.catalog import Category, FactCatalog
from facts_fulfillment.core.models import FactCard

T = TypeVar("T")


def concat(*messages: str) -> str:
    """Join messages with single spaces, trimming each one."""
    return " ".join(message.strip() for message in messages if message and message.strip())


def random_choice(items: Sequence[T], rng: random.Random) -> Optional[T]:
    """Return a random element of ``items`` or ``None`` when empty."""
    if not items:
        return None
    return items[rng.randrange(len(items))]


def build_fact_card(
    fact: str,
    category: Category,
    catalog: FactCatalog,
    rng: random.Random,
) -> FactCard:
    """Card for ``fact``, falling back to the shared content link and images."""
    images = category.images or catalog.content.images
    image = random_choice(images, rng)
    return FactCard(
        title=fact,
        image_url=image[0] if image else None,
        image_alt=image[1] if image else None,
        link_title=catalog.general.link_out,
        link_url=category.link or catalog.content.link,
    )


__all__ = ["concat", "random_choice", "build_fact_card"]
