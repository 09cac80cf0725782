"""Immutable fact catalog and response phrase book.

The catalog is read once at startup from a JSON resource and validated with
pydantic. Content categories keep their authored order, which also decides the
redirect target when a category runs out of facts. The cats bucket is tracked
separately and never takes part in that redirect cycle.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from facts_fulfillment.core.config import settings
from facts_fulfillment.core.exceptions import CatalogError, InvalidCategory, NoFallbackCategory

CATS_CATEGORY = "cats"
DEFAULT_RESPONSES_PATH = Path(__file__).resolve().parent.parent / "data" / "responses.json"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Category(_Frozen):
    """A named, ordered list of facts plus how to introduce them."""

    category: str = Field(min_length=1)
    suggestion: str
    fact_prefix: str
    facts: tuple[str, ...] = Field(min_length=1)
    images: tuple[tuple[str, str], ...] = ()
    link: Optional[str] = None


class CatsBucket(Category):
    """The cats category, with the SSML audio clip played before each fact."""

    category: str = CATS_CATEGORY
    audio: str = '<audio src="%s"></audio>'
    sounds: tuple[str, ...] = ()


class ContentLinks(_Frozen):
    """Card resources shared by every content category."""

    link: str
    images: tuple[tuple[str, str], ...] = ()


class SuggestionSets(_Frozen):
    """Canned suggestion chip sets."""

    confirmation: tuple[str, ...]
    new_fact: tuple[str, ...]


class GeneralPhrases(_Frozen):
    """Prompts not tied to a single category."""

    unhandled: str
    unknown_category: str
    fallback: str
    heard_it_all: str
    want_what: str
    next_fact: str
    link_out: str
    suggestions: SuggestionSets


class ContentTransitions(_Frozen):
    """Phrases used when a content category is depleted."""

    heard_it_all: str
    also_cats: str


class CatsTransitions(_Frozen):
    """Phrases used when the cats bucket is depleted."""

    heard_it_all: str


class Transitions(_Frozen):
    """Depletion transitions for both flows."""

    content: ContentTransitions
    cats: CatsTransitions


class FactCatalog(_Frozen):
    """Validated, immutable view of the response resource."""

    content: ContentLinks
    categories: tuple[Category, ...]
    cats: CatsBucket
    general: GeneralPhrases
    transitions: Transitions

    @model_validator(mode="after")
    def _check_categories(self) -> "FactCatalog":
        names = [category.category for category in self.categories]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate content categories: {names}")
        if CATS_CATEGORY in names:
            raise ValueError(f"{CATS_CATEGORY!r} is reserved for the cats bucket")
        if self.cats.category != CATS_CATEGORY:
            raise ValueError(f"cats bucket must use the {CATS_CATEGORY!r} identifier")
        return self

    @property
    def content_categories(self) -> tuple[str, ...]:
        """Content category ids in catalog order, excluding cats."""
        return tuple(category.category for category in self.categories)

    def category(self, name: str) -> Category:
        """Return the category (content or cats) registered under ``name``."""
        if name == CATS_CATEGORY:
            return self.cats
        for category in self.categories:
            if category.category == name:
                return category
        raise InvalidCategory(name)

    def facts_for(self, name: str) -> tuple[str, ...]:
        """Return the authored facts for ``name``."""
        return self.category(name).facts

    def validate_fallbacks(self) -> None:
        """Fail unless every content category has somewhere to redirect to."""
        if len(self.categories) < 2:
            raise NoFallbackCategory(
                "at least two content categories are required, found "
                f"{list(self.content_categories)}"
            )


def load_catalog(path: Optional[Path] = None) -> FactCatalog:
    """Read, validate, and return the catalog stored at ``path``."""
    source = Path(path) if path is not None else DEFAULT_RESPONSES_PATH
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"response catalog not found: {source}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"response catalog is not valid JSON: {source}") from exc
    try:
        catalog = FactCatalog.model_validate(raw)
    except ValidationError as exc:
        raise CatalogError(f"response catalog is malformed: {exc}") from exc
    catalog.validate_fallbacks()
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> FactCatalog:
    """Return the process-wide catalog, loading it on first use."""
    return load_catalog(getattr(settings, "FACTS_RESPONSES_PATH", None))


__all__ = [
    "CATS_CATEGORY",
    "DEFAULT_RESPONSES_PATH",
    "Category",
    "CatsBucket",
    "FactCatalog",
    "get_catalog",
    "load_catalog",
]
