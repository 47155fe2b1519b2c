"""Tool registration and backend wiring at startup."""

from src.backend.client import BackendClient
from src.core.config import config
from src.core.logger import logger
from src.orchestrators.products.orchestrator import ProductSearchOrchestrator
from src.tools.base import ToolRegistry
from src.tools.products import ProductSearchTool, ProductVectorSearchTool


def build_registry(orchestrator: ProductSearchOrchestrator) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(ProductSearchTool(orchestrator))
    registry.register(ProductVectorSearchTool(orchestrator))
    return registry


def setup_tools(backend: BackendClient | None = None) -> tuple[ToolRegistry, list[object]]:
    """Build the backend client, orchestrator and tool registry.

    Returns the registry and the resources that need explicit shutdown
    (the backend HTTP client).
    """
    closables: list[object] = []
    if backend is None:
        backend = BackendClient()
        closables.append(backend)
    orchestrator = ProductSearchOrchestrator(
        backend,
        default_limit=config.default_search_limit,
        default_threshold=config.default_vector_threshold,
    )
    registry = build_registry(orchestrator)
    logger.debug(f"Registered tools:\n{registry.get_tools_list()}")
    return registry, closables
