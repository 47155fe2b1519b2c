"""Product search: vector-first literal search and semantic search over the inventory backend."""

from src.orchestrators.products.normalize import normalize_product
from src.orchestrators.products.orchestrator import (
    PRODUCTS_PATH,
    VECTOR_SEARCH_PATH,
    ProductSearchOrchestrator,
)

__all__ = [
    "PRODUCTS_PATH",
    "VECTOR_SEARCH_PATH",
    "ProductSearchOrchestrator",
    "normalize_product",
]
