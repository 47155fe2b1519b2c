"""Per-tool argument models: defaults, validation, and JSON schema for tools/list."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.config import config


class ProductSearchCall(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str = Field(description="Search query text")
    limit: int = Field(
        default=config.default_search_limit,
        ge=1,
        description=f"Maximum number of results (default: {config.default_search_limit})",
    )

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be empty")
        return value


class VectorSearchCall(ProductSearchCall):
    query: str = Field(description="Search query text for semantic search")
    threshold: float = Field(
        default=config.default_vector_threshold,
        ge=0.0,
        le=1.0,
        description=f"Similarity threshold (0-1, default: {config.default_vector_threshold})",
    )


def input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Flat JSON schema for an MCP tool descriptor (no titles, defaults kept)."""
    schema = model.model_json_schema()
    properties: dict[str, Any] = {}
    for name, prop in schema.get("properties", {}).items():
        properties[name] = {k: v for k, v in prop.items() if k != "title"}
    return {
        "type": "object",
        "properties": properties,
        "required": list(schema.get("required", [])),
    }
