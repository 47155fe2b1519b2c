"""Product search orchestration over the inventory backend.

Two operations:
  - search: literal search that first tries the vector endpoint and falls back
    to the literal listing when vector search yields nothing usable
  - vector_search: semantic search with a similarity threshold, never falls back

Both always return a SearchResult; backend failures become ``success=False``
envelopes with zero products.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.backend.errors import BackendRequestError
from src.contracts.products_v1 import SearchResult
from src.core.config import config
from src.core.logger import SupplyLogger, logger as default_logger
from src.orchestrators.products.normalize import normalize_products

PRODUCTS_PATH = "/api/supply/products"
VECTOR_SEARCH_PATH = f"{PRODUCTS_PATH}/vector-search"


class ProductBackend(Protocol):
    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any: ...


def _argument_error(query: Any, limit: int, threshold: float | None = None) -> str | None:
    if not isinstance(query, str) or not query.strip():
        return "query must be a non-empty string"
    if limit < 1:
        return f"limit must be >= 1, got {limit}"
    if threshold is not None and not 0.0 <= threshold <= 1.0:
        return f"threshold must be within [0, 1], got {threshold}"
    return None


class ProductSearchOrchestrator:
    """Runs the two product searches and normalizes whichever backend path answered."""

    def __init__(
        self,
        backend: ProductBackend,
        *,
        default_limit: int | None = None,
        default_threshold: float | None = None,
        log: SupplyLogger | None = None,
    ):
        self._backend = backend
        self.default_limit = default_limit or config.default_search_limit
        self.default_threshold = (
            default_threshold if default_threshold is not None else config.default_vector_threshold
        )
        self._log = log or default_logger

    async def search(self, query: str, limit: int | None = None) -> SearchResult:
        limit = self.default_limit if limit is None else limit
        self._log.search_start("search", query if isinstance(query, str) else "", limit=limit)
        problem = _argument_error(query, limit)
        if problem:
            result = SearchResult.failure(query if isinstance(query, str) else "", problem)
        else:
            try:
                result = await self._literal_search(query, limit)
            except Exception as e:
                self._log.error(f"Product search failed: {e}")
                result = SearchResult.failure(query, str(e) or type(e).__name__)
        self._log.search_done("search", result.total_found, len(result.products), result.success)
        return result

    async def _literal_search(self, query: str, limit: int) -> SearchResult:
        vector, reason = await self._try_vector_first(query, limit)
        if reason is None:
            return SearchResult(
                success=True,
                query=query,
                total_found=vector.get("totalFound") or 0,
                products=normalize_products(vector.get("products"), limit),
            )

        self._log.fallback_triggered(query, reason)
        listing = await self._backend.get(PRODUCTS_PATH, {"search": query, "limit": limit})
        if listing is None:
            listing = []
        if not isinstance(listing, list):
            raise BackendRequestError("Backend request failed: product listing is not an array")
        return SearchResult(
            success=True,
            query=query,
            total_found=len(listing),
            products=normalize_products(listing, limit),
        )

    async def _try_vector_first(
        self, query: str, limit: int
    ) -> tuple[dict[str, Any], str | None]:
        """One vector attempt. Returns (body, None) when usable, else ({}, fallback reason)."""
        try:
            body = await self._backend.get(VECTOR_SEARCH_PATH, {"query": query, "limit": limit})
        except Exception as e:
            return {}, f"vector search failed: {e}"
        if not isinstance(body, dict) or not body.get("success"):
            return {}, "vector search unsuccessful"
        if body.get("totalFound") == 0:
            return {}, "no vector results"
        return body, None

    async def vector_search(
        self,
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> SearchResult:
        limit = self.default_limit if limit is None else limit
        threshold = self.default_threshold if threshold is None else threshold
        self._log.search_start(
            "vector_search",
            query if isinstance(query, str) else "",
            limit=limit,
            threshold=threshold,
        )
        problem = _argument_error(query, limit, threshold)
        if problem:
            result = SearchResult.failure(query if isinstance(query, str) else "", problem)
        else:
            try:
                result = await self._vector_search(query, limit, threshold)
            except Exception as e:
                self._log.error(f"Vector search failed: {e}")
                result = SearchResult.failure(query, str(e) or type(e).__name__)
        self._log.search_done(
            "vector_search", result.total_found, len(result.products), result.success
        )
        return result

    async def _vector_search(self, query: str, limit: int, threshold: float) -> SearchResult:
        body = await self._backend.get(
            VECTOR_SEARCH_PATH,
            {"query": query, "limit": limit, "threshold": threshold},
        )
        if not isinstance(body, dict):
            raise BackendRequestError("Backend request failed: vector search response is not an object")

        success = bool(body.get("success"))
        backend_threshold = body.get("threshold")
        fields: dict[str, Any] = {
            "success": success,
            "query": query,
            "total_found": body.get("totalFound") or 0,
            "threshold": threshold if backend_threshold is None else backend_threshold,
            "products": normalize_products(body.get("products"), limit),
            "cache_info": body.get("cacheInfo"),
        }
        if not success:
            fields["error"] = str(
                body.get("error") or body.get("message") or "Vector search was not successful"
            )
        return SearchResult(**fields)
