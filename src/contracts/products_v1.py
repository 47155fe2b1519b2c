"""Product search contract v1.

Defines the canonical payload returned by both product-search tools:
  - Product: one inventory item, projected from backend data
  - SearchResult: the envelope every code path (success, fallback, failure) produces

Payload keys are camelCase (``totalFound``, ``estimatedPrice``, ``cacheInfo``);
Python attributes are snake_case. Optional keys are emitted only when set, so a
literal search never carries ``threshold``/``cacheInfo`` and a successful
search never carries ``error``.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Result payload
# ---------------------------------------------------------------------------


class Product(BaseModel):
    """One inventory item. Built fresh per response and never mutated."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: int = Field(description="Inventory product code")
    name: str
    unit: str = Field(description="Unit of supply, e.g. 'UN', 'CX'")
    estimated_price: float | None = Field(alias="estimatedPrice")
    description: str | None = Field(default=None)
    type: str | None = Field(default=None)
    family: str | None = Field(default=None)
    similarity: float | None = Field(
        default=None,
        description="Vector similarity in [0, 1]; null when the literal listing answered",
    )


class SearchResult(BaseModel):
    """Envelope returned by products.search and products.vectorSearch.

    ``len(products)`` need not equal ``total_found``: the latter is the
    backend's count, the former the page actually returned.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    query: str
    total_found: int = Field(default=0, ge=0, alias="totalFound")
    products: list[Product] = Field(default_factory=list)
    threshold: float | None = Field(default=None)
    cache_info: Any = Field(
        default=None,
        alias="cacheInfo",
        description="Backend cache diagnostics (hit/miss, size), forwarded unmodified",
    )
    error: str | None = Field(default=None)

    @classmethod
    def failure(cls, query: str, error: str) -> "SearchResult":
        return cls(
            success=False,
            error=error or "Unknown error",
            query=query,
            total_found=0,
            products=[],
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Payload validation
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_search_payload(payload: Any) -> list[str]:
    """Check a decoded SearchResult payload; return human-readable problems."""
    if not isinstance(payload, dict):
        return [f"Payload must be an object, got {type(payload).__name__}"]

    errors: list[str] = []
    success = payload.get("success")
    if not isinstance(success, bool):
        errors.append('Missing or invalid "success" field')
    elif not success and not isinstance(payload.get("error"), str):
        errors.append('Failed result is missing an "error" string')
    if not isinstance(payload.get("query"), str):
        errors.append('Missing or invalid "query" field')
    total = payload.get("totalFound")
    if not isinstance(total, int) or isinstance(total, bool) or total < 0:
        errors.append('Missing or invalid "totalFound" field')

    products = payload.get("products")
    if not isinstance(products, list):
        errors.append('Missing or invalid "products" array')
        return errors

    for index, product in enumerate(products):
        if not isinstance(product, dict):
            errors.append(f"Product {index}: not an object")
            continue
        problems = []
        code = product.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            problems.append('Missing or invalid "code" field')
        if not isinstance(product.get("name"), str):
            problems.append('Missing or invalid "name" field')
        if not isinstance(product.get("unit"), str):
            problems.append('Missing or invalid "unit" field')
        if not _is_number(product.get("estimatedPrice")):
            problems.append('Missing or invalid "estimatedPrice" field')
        if "priceEstimated" in product:
            problems.append('Unexpected backend field "priceEstimated"')
        if problems:
            errors.append(f"Product {index}: {', '.join(problems)}")
    return errors
