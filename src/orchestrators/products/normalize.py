"""Project raw backend product records onto the Product contract."""

from collections.abc import Mapping
from typing import Any

from src.contracts.products_v1 import Product

_OPTIONAL_TEXT_FIELDS = ("description", "type", "family")


def normalize_product(raw: Mapping[str, Any]) -> Product:
    """Rename ``priceEstimated`` to ``estimatedPrice``; similarity is null unless the source scored it."""
    if not isinstance(raw, Mapping):
        raise TypeError(f"Product record must be an object, got {type(raw).__name__}")
    price = raw.get("priceEstimated")
    if price is None:
        price = raw.get("estimatedPrice")
    fields: dict[str, Any] = {
        "code": raw.get("code"),
        "name": raw.get("name"),
        "unit": raw.get("unit"),
        "estimated_price": price,
        "similarity": raw.get("similarity"),
    }
    for key in _OPTIONAL_TEXT_FIELDS:
        if raw.get(key) is not None:
            fields[key] = raw[key]
    return Product(**fields)


def normalize_products(raw_products: Any, limit: int) -> list[Product]:
    if not raw_products:
        return []
    if not isinstance(raw_products, list):
        raise TypeError(f"Products must be an array, got {type(raw_products).__name__}")
    return [normalize_product(p) for p in raw_products[:limit]]
