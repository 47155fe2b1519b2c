import json

import pytest
from pydantic import ValidationError

from src.contracts.products_v1 import Product, SearchResult, validate_search_payload
from src.orchestrators.products.normalize import normalize_product, normalize_products


def test_price_field_is_renamed_and_similarity_defaults_to_null():
    product = normalize_product({"code": 12345, "name": "X", "unit": "UN", "priceEstimated": 2.5})

    payload = product.model_dump(by_alias=True, exclude_unset=True)

    assert payload == {
        "code": 12345,
        "name": "X",
        "unit": "UN",
        "estimatedPrice": 2.5,
        "similarity": None,
    }
    assert "priceEstimated" not in payload


def test_optional_text_fields_are_kept_when_present():
    product = normalize_product(
        {
            "code": 1,
            "name": "LUVA",
            "unit": "CX",
            "priceEstimated": 10,
            "description": "Luva de procedimento",
            "type": "CONSUMO",
            "family": None,
            "similarity": 0.83,
        }
    )

    payload = product.model_dump(by_alias=True, exclude_unset=True)

    assert payload["description"] == "Luva de procedimento"
    assert payload["type"] == "CONSUMO"
    assert "family" not in payload
    assert payload["similarity"] == 0.83


def test_products_are_immutable():
    product = normalize_product({"code": 1, "name": "A", "unit": "UN", "priceEstimated": 1})
    with pytest.raises(ValidationError):
        product.name = "B"


def test_normalize_products_rejects_non_array():
    with pytest.raises(TypeError):
        normalize_products({"code": 1}, limit=5)


def test_failure_envelope_shape():
    payload = SearchResult.failure("seringa", "Backend request failed: HTTP 500").to_payload()

    assert payload == {
        "success": False,
        "error": "Backend request failed: HTTP 500",
        "query": "seringa",
        "totalFound": 0,
        "products": [],
    }
    assert validate_search_payload(payload) == []


def test_to_json_keeps_accents_readable():
    result = SearchResult(
        success=True,
        query="seringa médica",
        total_found=1,
        products=[Product(code=1, name="SERINGA", unit="UN", estimated_price=1.0, similarity=None)],
    )

    text = result.to_json()

    assert "médica" in text
    assert json.loads(text)["totalFound"] == 1


def test_total_found_cannot_be_negative():
    with pytest.raises(ValidationError):
        SearchResult(success=True, query="x", total_found=-1, products=[])


class TestValidateSearchPayload:
    def test_valid_payload(self):
        payload = {
            "success": True,
            "query": "seringa",
            "totalFound": 2,
            "products": [
                {"code": 1, "name": "A", "unit": "UN", "estimatedPrice": 1.5, "similarity": None}
            ],
        }
        assert validate_search_payload(payload) == []

    def test_reports_each_broken_field(self):
        payload = {
            "success": "yes",
            "query": 3,
            "totalFound": "2",
            "products": [{"code": "1", "name": "A", "unit": "UN", "priceEstimated": 1.5}],
        }

        errors = validate_search_payload(payload)

        assert 'Missing or invalid "success" field' in errors
        assert 'Missing or invalid "query" field' in errors
        assert 'Missing or invalid "totalFound" field' in errors
        product_error = errors[-1]
        assert product_error.startswith("Product 0:")
        assert '"code"' in product_error
        assert '"estimatedPrice"' in product_error
        assert "priceEstimated" in product_error

    def test_failure_without_error_string_is_invalid(self):
        payload = {"success": False, "query": "x", "totalFound": 0, "products": []}
        assert validate_search_payload(payload) == ['Failed result is missing an "error" string']

    def test_non_object_payload(self):
        assert validate_search_payload([1, 2]) == ["Payload must be an object, got list"]

    def test_missing_products_array(self):
        errors = validate_search_payload({"success": True, "query": "x", "totalFound": 0})
        assert errors == ['Missing or invalid "products" array']
