"""Core exception types shared across layers."""


class FactsError(Exception):
    """Base class for fact catalog and selection failures."""


class CatalogError(FactsError):
    """Raised when the response catalog resource is missing or malformed."""


class InvalidCategory(FactsError):
    """Raised when a caller asks for a category the catalog does not define."""

    def __init__(self, category: object) -> None:
        super().__init__(f"unknown fact category: {category!r}")
        self.category = category


class NoFallbackCategory(CatalogError):
    """Raised when no other content category exists to redirect a depleted one to."""


__all__ = [
    "FactsError",
    "CatalogError",
    "InvalidCategory",
    "NoFallbackCategory",
]
