"""Product search tools: products.search and products.vectorSearch."""

from pydantic import BaseModel

from src.core.tool_call import ProductSearchCall, VectorSearchCall
from src.orchestrators.products.orchestrator import ProductSearchOrchestrator
from src.tools.base import Tool, ToolResult


class ProductSearchTool(Tool):
    def __init__(self, orchestrator: ProductSearchOrchestrator):
        self._orchestrator = orchestrator

    @property
    def name(self) -> str:
        return "products.search"

    @property
    def description(self) -> str:
        return "Search products by literal text (regex in name or code)"

    @property
    def arguments_model(self) -> type[BaseModel]:
        return ProductSearchCall

    async def execute(self, arguments: ProductSearchCall) -> ToolResult:
        result = await self._orchestrator.search(arguments.query, arguments.limit)
        return ToolResult.ok(result.to_payload())


class ProductVectorSearchTool(Tool):
    def __init__(self, orchestrator: ProductSearchOrchestrator):
        self._orchestrator = orchestrator

    @property
    def name(self) -> str:
        return "products.vectorSearch"

    @property
    def description(self) -> str:
        return "Search products using semantic similarity with embeddings"

    @property
    def arguments_model(self) -> type[BaseModel]:
        return VectorSearchCall

    async def execute(self, arguments: VectorSearchCall) -> ToolResult:
        result = await self._orchestrator.vector_search(
            arguments.query, arguments.limit, arguments.threshold
        )
        return ToolResult.ok(result.to_payload())
