"""Product search contract v1: shared payload types for both search tools."""

from src.contracts.products_v1 import Product, SearchResult, validate_search_payload

__all__ = [
    "Product",
    "SearchResult",
    "validate_search_payload",
]
