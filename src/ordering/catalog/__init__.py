"""Catalog service factory.

get_catalog() / set_catalog() swap implementations:
- FakeCatalog for development and testing
- HttpCatalog against the meal service (CATALOG_BACKEND=http)
"""

from ordering.catalog.fake_adapter import FakeCatalog
from ordering.catalog.http_adapter import HttpCatalog
from ordering.catalog.port import CatalogService, Meal
from ordering.utils import settings

__all__ = ["CatalogService", "FakeCatalog", "HttpCatalog", "Meal", "get_catalog", "reset_catalog", "set_catalog"]

_current_catalog: CatalogService | None = None


def get_catalog() -> CatalogService:
    """Return the active catalog, built from settings on first use."""
    global _current_catalog
    if _current_catalog is None:
        if settings.CATALOG_BACKEND == "http":
            _current_catalog = HttpCatalog()
        else:
            _current_catalog = FakeCatalog()
    return _current_catalog


def set_catalog(catalog: CatalogService) -> None:
    """Override the active catalog (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default catalog."""
    global _current_catalog
    _current_catalog = None
