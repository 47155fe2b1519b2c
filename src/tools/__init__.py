from src.tools.base import Tool, ToolRegistry, ToolResult, UnknownToolError
from src.tools.products import ProductSearchTool, ProductVectorSearchTool

__all__ = [
    "ProductSearchTool",
    "ProductVectorSearchTool",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "UnknownToolError",
]
