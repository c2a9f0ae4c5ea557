# Catalog Package
"""
Catalog sources and catalog-embedding persistence.

Provides:
- get_default_catalog: Built-in six-item reference catalog
- load_catalog: Validated catalog from a JSON/YAML file
- EmbeddingCache: JSON file of catalog vectors keyed by model and description

Example:
    >>> from stylematch.infrastructure.catalog import load_catalog
    >>> catalog = load_catalog("data/catalog.json")
"""

from stylematch.infrastructure.catalog.catalog_loader import (
    CatalogItemModel,
    get_default_catalog,
    load_catalog,
    resolve_catalog,
)
from stylematch.infrastructure.catalog.embedding_cache import EmbeddingCache, description_hash

__all__ = [
    "CatalogItemModel",
    "get_default_catalog",
    "load_catalog",
    "resolve_catalog",
    "EmbeddingCache",
    "description_hash",
]
